"""
Business logic for songs.

Songs belong to exactly one rodeo.  Nothing prevents adding songs
after voting has closed; organizers may curate the list at any time.
"""

import logging
import uuid
from typing import List

from song_rodeo_api.app.core.db import transaction
from song_rodeo_api.app.core.errors import NotFoundError
from song_rodeo_api.app.schemas.song import SongCreate, SongRead, SongUpdate, SongWithStats
from song_rodeo_api.app.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)

SONG_COLUMNS = "id, rodeo_id, title, artist, duration, spotify_url, youtube_url, created_at"


class SongService:
    """Catalog operations for songs."""

    @classmethod
    async def create_song(cls, data: SongCreate) -> SongRead:
        """Add a song to an existing rodeo."""
        song_id = str(uuid.uuid4())
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM rodeos WHERE id = ?", (data.rodeo_id,)).fetchone():
                raise NotFoundError("rodeo", data.rodeo_id)
            cursor.execute(
                """
                INSERT INTO songs (id, rodeo_id, title, artist, duration, spotify_url, youtube_url)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    song_id,
                    data.rodeo_id,
                    data.title,
                    data.artist,
                    data.duration,
                    data.spotify_url,
                    data.youtube_url,
                ),
            )
            row = cursor.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
        logger.info("Added song %s '%s' to rodeo %s", song_id, data.title, data.rodeo_id)
        return SongRead.model_validate(dict(row))

    @classmethod
    async def get_song(cls, song_id: str) -> SongRead:
        with transaction() as cursor:
            row = cursor.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
        if not row:
            raise NotFoundError("song", song_id)
        return SongRead.model_validate(dict(row))

    @classmethod
    async def list_songs(cls, rodeo_id: str) -> List[SongWithStats]:
        """Return a rodeo's songs with vote counts and averages."""
        return await StatisticsService.songs_with_stats(rodeo_id)

    @classmethod
    async def update_song(cls, song_id: str, data: SongUpdate) -> SongRead:
        """Update the supplied fields of a song; others keep their value."""
        updates = data.model_dump(exclude_none=True)
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM songs WHERE id = ?", (song_id,)).fetchone():
                raise NotFoundError("song", song_id)
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE songs SET {assignments} WHERE id = ?",
                    (*updates.values(), song_id),
                )
            row = cursor.execute(
                f"SELECT {SONG_COLUMNS} FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
        logger.info("Updated song %s: %s", song_id, sorted(updates))
        return SongRead.model_validate(dict(row))

    @classmethod
    async def delete_song(cls, song_id: str) -> None:
        """Delete a song and, through the foreign key, its ratings."""
        with transaction() as cursor:
            cursor.execute("DELETE FROM songs WHERE id = ?", (song_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("song", song_id)
        logger.info("Deleted song %s", song_id)
