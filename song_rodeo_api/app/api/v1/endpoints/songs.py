"""
Song endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Response, status

from song_rodeo_api.app.schemas.song import SongCreate, SongRead, SongUpdate, SongWithStats
from song_rodeo_api.app.services.song_service import SongService


router = APIRouter()


@router.post("", response_model=SongRead, status_code=status.HTTP_201_CREATED)
async def add_song(data: SongCreate) -> SongRead:
    """Add a song to a rodeo."""
    return await SongService.create_song(data)


@router.get("/rodeo/{rodeo_id}", response_model=List[SongWithStats])
async def list_songs(rodeo_id: str) -> List[SongWithStats]:
    """List a rodeo's songs with vote counts and average ratings."""
    return await SongService.list_songs(rodeo_id)


@router.get("/{song_id}", response_model=SongRead)
async def get_song(song_id: str) -> SongRead:
    return await SongService.get_song(song_id)


@router.put("/{song_id}", response_model=SongRead)
async def update_song(song_id: str, data: SongUpdate) -> SongRead:
    return await SongService.update_song(song_id, data)


@router.delete("/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(song_id: str) -> Response:
    """Delete a song and its ratings."""
    await SongService.delete_song(song_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
