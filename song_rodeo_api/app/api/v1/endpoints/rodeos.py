"""
Rodeo endpoints for API v1.

Admins create, list, edit and delete rodeos; participants open a
rodeo through its shareable link (``/rodeos/link/{slug}``).  Errors
raised by the service are mapped to HTTP responses by the handlers in
``api.error_handlers``.
"""

from typing import List

from fastapi import APIRouter, Response, status

from song_rodeo_api.app.schemas.rodeo import (
    RodeoCreate,
    RodeoDetail,
    RodeoRead,
    RodeoUpdate,
    RodeoWithSongs,
)
from song_rodeo_api.app.services.rodeo_service import RodeoService


router = APIRouter()


@router.post("", response_model=RodeoRead, status_code=status.HTTP_201_CREATED)
async def create_rodeo(data: RodeoCreate) -> RodeoRead:
    """Create a new rodeo and allocate its shareable link."""
    return await RodeoService.create_rodeo(data)


@router.get("", response_model=List[RodeoRead])
async def list_rodeos() -> List[RodeoRead]:
    """List all rodeos, newest first."""
    return await RodeoService.list_rodeos()


@router.get("/link/{slug}", response_model=RodeoWithSongs)
async def get_rodeo_by_link(slug: str) -> RodeoWithSongs:
    """Open a rodeo through its shareable link, with its song list."""
    return await RodeoService.get_by_slug(slug)


@router.get("/{rodeo_id}", response_model=RodeoDetail)
async def get_rodeo(rodeo_id: str) -> RodeoDetail:
    """Admin view of a rodeo: songs with vote counts and averages."""
    return await RodeoService.get_rodeo(rodeo_id)


@router.put("/{rodeo_id}", response_model=RodeoRead)
async def update_rodeo(rodeo_id: str, data: RodeoUpdate) -> RodeoRead:
    """Update the supplied fields of a rodeo."""
    return await RodeoService.update_rodeo(rodeo_id, data)


@router.delete("/{rodeo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rodeo(rodeo_id: str) -> Response:
    """Delete a rodeo with all of its songs and ratings."""
    await RodeoService.delete_rodeo(rodeo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
