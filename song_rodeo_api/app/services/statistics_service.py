"""
Service layer for rating aggregates.

Aggregates are never stored: every call recomputes vote counts and
averages from the ``ratings`` rows with a single ``LEFT JOIN`` so that
songs without votes still appear (with a zero count and no average).
Rodeos are small, so re-scanning on each request is acceptable.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from song_rodeo_api.app.core.db import transaction
from song_rodeo_api.app.core.errors import NotFoundError
from song_rodeo_api.app.schemas.rating import SongStats
from song_rodeo_api.app.schemas.song import SongWithStats

logger = logging.getLogger(__name__)


def _require_rodeo(cursor: sqlite3.Cursor, rodeo_id: str) -> None:
    if not cursor.execute("SELECT id FROM rodeos WHERE id = ?", (rodeo_id,)).fetchone():
        raise NotFoundError("rodeo", rodeo_id)


class StatisticsService:
    """Read-only aggregates over the ratings of a rodeo."""

    @classmethod
    async def rodeo_stats(cls, rodeo_id: str) -> List[SongStats]:
        """Return vote count, mean, min and max rating for every song.

        Results are ordered by average rating, highest first.  Songs
        with no ratings come last whatever their position in the
        catalog; ties keep the order in which songs were added.
        """
        with transaction() as cursor:
            _require_rodeo(cursor, rodeo_id)
            rows = cursor.execute(
                """
                SELECT s.id AS song_id,
                       s.title,
                       s.artist,
                       COUNT(r.id) AS vote_count,
                       AVG(r.rating) AS average_rating,
                       MIN(r.rating) AS min_rating,
                       MAX(r.rating) AS max_rating
                FROM songs s
                LEFT JOIN ratings r ON r.song_id = s.id
                WHERE s.rodeo_id = ?
                GROUP BY s.id
                ORDER BY COUNT(r.id) = 0, AVG(r.rating) DESC, s.created_at, s.rowid
                """,
                (rodeo_id,),
            ).fetchall()
        logger.debug("Computed stats for %d songs of rodeo %s", len(rows), rodeo_id)
        return [
            SongStats(
                song_id=row["song_id"],
                title=row["title"],
                artist=row["artist"],
                vote_count=row["vote_count"],
                average_rating=row["average_rating"],
                min_rating=row["min_rating"],
                max_rating=row["max_rating"],
            )
            for row in rows
        ]

    @classmethod
    async def songs_with_stats(cls, rodeo_id: str) -> List[SongWithStats]:
        """Return the songs of a rodeo in catalog order with their vote
        count and average rating."""
        with transaction() as cursor:
            _require_rodeo(cursor, rodeo_id)
            rows = cursor.execute(
                """
                SELECT s.id, s.rodeo_id, s.title, s.artist, s.duration,
                       s.spotify_url, s.youtube_url, s.created_at,
                       COUNT(r.id) AS vote_count,
                       AVG(r.rating) AS average_rating
                FROM songs s
                LEFT JOIN ratings r ON r.song_id = s.id
                WHERE s.rodeo_id = ?
                GROUP BY s.id
                ORDER BY s.created_at, s.rowid
                """,
                (rodeo_id,),
            ).fetchall()
        return [SongWithStats.model_validate(dict(row)) for row in rows]
