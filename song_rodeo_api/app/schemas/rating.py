"""
Pydantic schemas for song ratings.

Participants are anonymous: ``user_session_id`` is an opaque token
generated by the client and is treated purely as a correlation key.
``RatingPublic`` is the shape shown to other participants and leaves
that token out.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
# Tokens travel as a URL path segment in per-session lookups.
SessionToken = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=200, pattern=r"^[A-Za-z0-9._~-]+$"),
]


class RatingCreate(BaseModel):
    """Schema for submitting (or re-submitting) a rating."""

    rodeo_id: Identifier
    song_id: Identifier
    user_session_id: SessionToken = Field(..., examples=["session-1725210000000-k3j9x0a1b"])
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")


class RatingPublic(BaseModel):
    """A rating as listed for a song."""

    id: str
    rodeo_id: str
    song_id: str
    rating: int
    created_at: str
    updated_at: str


class RatingRead(RatingPublic):
    """A rating as returned to the participant who owns it."""

    user_session_id: str


class SongStats(BaseModel):
    """Per-song aggregates for a rodeo.

    Songs without votes have ``vote_count == 0`` and ``None`` for the
    average, minimum and maximum.
    """

    song_id: str
    title: str
    artist: Optional[str] = None
    vote_count: int
    average_rating: Optional[float] = None
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
