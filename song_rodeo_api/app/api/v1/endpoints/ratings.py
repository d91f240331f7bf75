"""
Rating endpoints for API v1.

Participants submit ratings anonymously with the session token their
client generated.  A first submission answers ``201 Created``; a
re-submission overwrites the earlier rating and answers ``200 OK``.
"""

from typing import List, Optional

from fastapi import APIRouter, Request, Response, status

from song_rodeo_api.app.schemas.rating import RatingCreate, RatingPublic, RatingRead, SongStats
from song_rodeo_api.app.services.rating_service import RatingService
from song_rodeo_api.app.services.statistics_service import StatisticsService


router = APIRouter()


def client_address(request: Request) -> Optional[str]:
    """Best-effort address of the participant.

    Uses the first entry of ``X-Forwarded-For`` when a proxy set it,
    otherwise the peer address of the connection.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return request.client.host if request.client else None


@router.post(
    "",
    response_model=RatingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit or overwrite a rating",
)
async def submit_rating(data: RatingCreate, request: Request, response: Response) -> RatingRead:
    rating, created = await RatingService.submit_rating(
        rodeo_id=data.rodeo_id,
        song_id=data.song_id,
        user_session_id=data.user_session_id,
        rating=data.rating,
        source_address=client_address(request),
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return rating


@router.get("/song/{song_id}", response_model=List[RatingPublic])
async def list_song_ratings(song_id: str) -> List[RatingPublic]:
    """List the ratings of a song, most recent first."""
    return await RatingService.list_for_song(song_id)


@router.get("/rodeo/{rodeo_id}/user/{user_session_id}", response_model=List[RatingRead])
async def list_session_ratings(rodeo_id: str, user_session_id: str) -> List[RatingRead]:
    """List the ratings a participant session gave in a rodeo."""
    return await RatingService.list_for_session(rodeo_id, user_session_id)


@router.get("/rodeo/{rodeo_id}/stats", response_model=List[SongStats])
async def rodeo_stats(rodeo_id: str) -> List[SongStats]:
    """Per-song vote count and rating statistics, best rated first."""
    return await StatisticsService.rodeo_stats(rodeo_id)


@router.get("/{rating_id}", response_model=RatingRead)
async def get_rating(rating_id: str) -> RatingRead:
    return await RatingService.get_rating(rating_id)
