"""
Business logic for rodeos.

A rodeo is created with a random public slug which becomes its
shareable voting link.  Slugs are unique at the database level; a
collision on insert is retried with a fresh candidate a bounded number
of times.  Deleting a rodeo relies on ``ON DELETE CASCADE`` to remove
its songs and their ratings.
"""

import logging
import sqlite3
import uuid
from datetime import datetime
from typing import List

from song_rodeo_api.app.core.config import settings
from song_rodeo_api.app.core.db import transaction
from song_rodeo_api.app.core.errors import FieldError, NotFoundError, StorageError, ValidationError
from song_rodeo_api.app.schemas.rodeo import (
    RodeoCreate,
    RodeoDetail,
    RodeoRead,
    RodeoUpdate,
    RodeoWithSongs,
    status_for_window,
)
from song_rodeo_api.app.schemas.song import SongRead
from song_rodeo_api.app.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)

RODEO_COLUMNS = "id, name, slug, created_by, start_date, end_date, created_at, updated_at"


def generate_slug() -> str:
    """Return a new slug candidate such as ``rodeo-1a2b3c4d``."""
    return f"{settings.slug_prefix}{uuid.uuid4().hex[:settings.slug_length]}"


def rodeo_from_row(row: sqlite3.Row) -> RodeoRead:
    start_date = datetime.fromisoformat(row["start_date"])
    end_date = datetime.fromisoformat(row["end_date"])
    return RodeoRead(
        id=row["id"],
        name=row["name"],
        slug=row["slug"],
        created_by=row["created_by"],
        start_date=start_date,
        end_date=end_date,
        status=status_for_window(start_date, end_date),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _is_slug_collision(exc: sqlite3.IntegrityError) -> bool:
    return "rodeos.slug" in str(exc)


class RodeoService:
    """Catalog operations for rodeos."""

    @classmethod
    async def create_rodeo(cls, data: RodeoCreate) -> RodeoRead:
        """Create a rodeo with a fresh unique slug.

        Raises ``StorageError`` if no free slug is found within
        ``settings.slug_max_attempts`` attempts.
        """
        rodeo_id = str(uuid.uuid4())
        with transaction() as cursor:
            for attempt in range(1, settings.slug_max_attempts + 1):
                slug = generate_slug()
                try:
                    cursor.execute(
                        """
                        INSERT INTO rodeos (id, name, slug, created_by, start_date, end_date)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            rodeo_id,
                            data.name,
                            slug,
                            data.created_by,
                            data.start_date.isoformat(),
                            data.end_date.isoformat(),
                        ),
                    )
                except sqlite3.IntegrityError as exc:
                    if not _is_slug_collision(exc):
                        raise
                    logger.warning("Slug %s already taken (attempt %d)", slug, attempt)
                    continue
                break
            else:
                logger.error(
                    "Could not allocate a unique slug after %d attempts",
                    settings.slug_max_attempts,
                )
                raise StorageError("Could not allocate a unique rodeo link")
            row = cursor.execute(
                f"SELECT {RODEO_COLUMNS} FROM rodeos WHERE id = ?", (rodeo_id,)
            ).fetchone()
        logger.info("Created rodeo %s '%s' with link %s", rodeo_id, data.name, slug)
        return rodeo_from_row(row)

    @classmethod
    async def list_rodeos(cls) -> List[RodeoRead]:
        """Return all rodeos, newest first."""
        with transaction() as cursor:
            rows = cursor.execute(
                f"SELECT {RODEO_COLUMNS} FROM rodeos ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [rodeo_from_row(row) for row in rows]

    @classmethod
    async def get_rodeo(cls, rodeo_id: str) -> RodeoDetail:
        """Return a rodeo by id with its songs and their live aggregates."""
        with transaction() as cursor:
            row = cursor.execute(
                f"SELECT {RODEO_COLUMNS} FROM rodeos WHERE id = ?", (rodeo_id,)
            ).fetchone()
        if not row:
            raise NotFoundError("rodeo", rodeo_id)
        songs = await StatisticsService.songs_with_stats(rodeo_id)
        return RodeoDetail(**rodeo_from_row(row).model_dump(), songs=songs)

    @classmethod
    async def get_by_slug(cls, slug: str) -> RodeoWithSongs:
        """Resolve a shareable link to its rodeo and song list."""
        with transaction() as cursor:
            row = cursor.execute(
                f"SELECT {RODEO_COLUMNS} FROM rodeos WHERE slug = ?", (slug,)
            ).fetchone()
            if not row:
                raise NotFoundError("rodeo", slug)
            song_rows = cursor.execute(
                """
                SELECT id, rodeo_id, title, artist, duration, spotify_url, youtube_url, created_at
                FROM songs WHERE rodeo_id = ? ORDER BY created_at, rowid
                """,
                (row["id"],),
            ).fetchall()
        songs = [SongRead.model_validate(dict(song)) for song in song_rows]
        return RodeoWithSongs(**rodeo_from_row(row).model_dump(), songs=songs)

    @classmethod
    async def update_rodeo(cls, rodeo_id: str, data: RodeoUpdate) -> RodeoRead:
        """Update the supplied fields of a rodeo.

        Fields that are omitted (or null) keep their stored value.  The
        resulting window must still end after it starts.
        """
        updates = data.model_dump(exclude_none=True)
        with transaction() as cursor:
            row = cursor.execute(
                "SELECT start_date, end_date FROM rodeos WHERE id = ?", (rodeo_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("rodeo", rodeo_id)
            start_date = updates.get("start_date") or datetime.fromisoformat(row["start_date"])
            end_date = updates.get("end_date") or datetime.fromisoformat(row["end_date"])
            if end_date <= start_date:
                raise ValidationError(
                    [FieldError("end_date", "end_date must be after start_date")]
                )
            if updates:
                fields = []
                values = []
                for key, value in updates.items():
                    fields.append(f"{key} = ?")
                    if isinstance(value, datetime):
                        values.append(value.isoformat())
                    else:
                        values.append(value)
                values.append(rodeo_id)
                sql = f"UPDATE rodeos SET {', '.join(fields)}, updated_at = CURRENT_TIMESTAMP WHERE id = ?"
                cursor.execute(sql, tuple(values))
            updated = cursor.execute(
                f"SELECT {RODEO_COLUMNS} FROM rodeos WHERE id = ?", (rodeo_id,)
            ).fetchone()
        logger.info("Updated rodeo %s: %s", rodeo_id, sorted(updates))
        return rodeo_from_row(updated)

    @classmethod
    async def delete_rodeo(cls, rodeo_id: str) -> None:
        """Delete a rodeo together with its songs and ratings."""
        with transaction() as cursor:
            cursor.execute("DELETE FROM rodeos WHERE id = ?", (rodeo_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("rodeo", rodeo_id)
        logger.info("Deleted rodeo %s", rodeo_id)
