"""
Pydantic models for songs.

``SongCreate`` and ``SongUpdate`` describe the admin payloads,
``SongRead`` the stored song and ``SongWithStats`` a song together
with its live vote count and average rating.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=300)]
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
MediaUrl = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class SongBase(BaseModel):
    title: Title = Field(..., examples=["Jolene"])
    artist: Optional[str] = Field(None, max_length=300, examples=["Dolly Parton"])
    duration: Optional[int] = Field(None, ge=0, le=86400, description="Length in seconds")
    spotify_url: Optional[MediaUrl] = None
    youtube_url: Optional[MediaUrl] = None

    @field_validator("artist")
    @classmethod
    def blank_artist_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class SongCreate(SongBase):
    """Schema for adding a song to a rodeo."""

    rodeo_id: Identifier


class SongUpdate(BaseModel):
    """Schema for updating a song.

    All fields are optional; only provided fields will be updated.
    """

    title: Optional[Title] = None
    artist: Optional[str] = Field(None, max_length=300)
    duration: Optional[int] = Field(None, ge=0, le=86400)
    spotify_url: Optional[MediaUrl] = None
    youtube_url: Optional[MediaUrl] = None

    @field_validator("artist")
    @classmethod
    def strip_artist(cls, v: Optional[str]) -> Optional[str]:
        # A blank artist means "not provided" and keeps the stored value.
        if v is None:
            return None
        return v.strip() or None


class SongRead(SongBase):
    """Schema for reading a song from the API."""

    id: str
    rodeo_id: str
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class SongWithStats(SongRead):
    """A song with the aggregates of its ratings.

    ``average_rating`` is ``None`` while the song has no votes.
    """

    vote_count: int = 0
    average_rating: Optional[float] = None
