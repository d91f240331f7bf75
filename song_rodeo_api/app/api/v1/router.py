"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (rodeos, songs, ratings).
When a new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import ratings, rodeos, songs

router = APIRouter()

router.include_router(rodeos.router, prefix="/rodeos", tags=["rodeos"])
router.include_router(songs.router, prefix="/songs", tags=["songs"])
router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
