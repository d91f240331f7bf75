"""
Pydantic models for rodeo data.

A rodeo is a time-boxed voting event.  Its ``status`` is never
stored: it is derived from ``start_date`` and ``end_date`` by
``status_for_window`` so that the displayed status and the voting
eligibility checks always agree.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints, ValidationInfo, field_validator

from .song import SongRead, SongWithStats

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class RodeoStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ENDED = "ended"


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def status_for_window(
    start_date: datetime, end_date: datetime, now: Optional[datetime] = None
) -> RodeoStatus:
    """Derive the lifecycle status of a rodeo from its voting window."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    if now < as_utc(start_date):
        return RodeoStatus.DRAFT
    if now >= as_utc(end_date):
        return RodeoStatus.ENDED
    return RodeoStatus.ACTIVE


class RodeoBase(BaseModel):
    name: Name = Field(..., examples=["Friday Night Rodeo"])
    created_by: Optional[str] = Field(None, max_length=200, examples=["DJ Hank"])
    start_date: datetime = Field(..., examples=["2025-09-01T18:00:00Z"])
    end_date: datetime = Field(..., examples=["2025-09-01T22:00:00Z"])

    @field_validator("created_by")
    @classmethod
    def blank_creator_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class RodeoCreate(RodeoBase):
    """Schema for creating a rodeo."""

    @field_validator("start_date")
    @classmethod
    def normalise_start(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: datetime, info: ValidationInfo) -> datetime:
        v = as_utc(v)
        start = info.data.get("start_date")
        if start is not None and v <= start:
            raise ValueError("end_date must be after start_date")
        return v


class RodeoUpdate(BaseModel):
    """Schema for updating a rodeo.

    All fields are optional; only provided fields will be updated.
    The merged window is checked by the service against the stored
    dates.  The slug cannot be changed.
    """

    name: Optional[Name] = None
    created_by: Optional[str] = Field(None, max_length=200)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("created_by")
    @classmethod
    def strip_creator(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalise_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None


class RodeoRead(RodeoBase):
    """Schema for reading a rodeo from the API."""

    id: str
    slug: str
    status: RodeoStatus
    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True,
    }


class RodeoWithSongs(RodeoRead):
    """Public view of a rodeo, as opened through its shareable link."""

    songs: List[SongRead] = []


class RodeoDetail(RodeoRead):
    """Admin view of a rodeo with live per-song aggregates."""

    songs: List[SongWithStats] = []
