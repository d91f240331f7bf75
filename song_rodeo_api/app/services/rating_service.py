"""
Business logic for ratings.

A participant is identified only by the opaque ``user_session_id`` the
client generates.  It is an untrusted correlation key, never a
credential: it decides which row a submission overwrites and nothing
else.

Submitting is idempotent per participant.  The write is one
``INSERT ... ON CONFLICT ... DO UPDATE`` statement backed by the
``UNIQUE(rodeo_id, song_id, user_session_id)`` constraint, so two
concurrent submissions for the same song by the same session can
never both insert.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

import pydantic

from song_rodeo_api.app.core.config import settings
from song_rodeo_api.app.core.db import transaction
from song_rodeo_api.app.core.errors import FieldError, NotFoundError, ValidationError
from song_rodeo_api.app.schemas.rating import RatingCreate, RatingPublic, RatingRead
from song_rodeo_api.app.schemas.rodeo import RodeoStatus, status_for_window

logger = logging.getLogger(__name__)

RATING_COLUMNS = "id, rodeo_id, song_id, user_session_id, rating, created_at, updated_at"


class RatingService:
    """Service for submitting and reading song ratings."""

    @classmethod
    async def submit_rating(
        cls,
        rodeo_id: str,
        song_id: str,
        user_session_id: str,
        rating: int,
        source_address: Optional[str] = None,
    ) -> Tuple[RatingRead, bool]:
        """Store a participant's rating for a song, replacing any earlier one.

        Returns the stored rating and ``True`` if it was newly created,
        ``False`` if an earlier rating by the same session was
        overwritten.  ``source_address`` is recorded on first insert for
        abuse auditing and plays no part in aggregation.

        Raises ``ValidationError`` listing every invalid argument,
        ``NotFoundError`` if the rodeo or song does not exist, and
        ``StorageError`` if the database fails.
        """
        try:
            data = RatingCreate(
                rodeo_id=rodeo_id,
                song_id=song_id,
                user_session_id=user_session_id,
                rating=rating,
            )
        except pydantic.ValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        new_id = str(uuid.uuid4())
        with transaction() as cursor:
            rodeo = cursor.execute(
                "SELECT start_date, end_date FROM rodeos WHERE id = ?", (data.rodeo_id,)
            ).fetchone()
            if not rodeo:
                raise NotFoundError("rodeo", data.rodeo_id)
            song = cursor.execute(
                "SELECT id FROM songs WHERE id = ? AND rodeo_id = ?",
                (data.song_id, data.rodeo_id),
            ).fetchone()
            if not song:
                raise NotFoundError("song", data.song_id)
            if settings.enforce_voting_window:
                status = status_for_window(
                    datetime.fromisoformat(rodeo["start_date"]),
                    datetime.fromisoformat(rodeo["end_date"]),
                )
                if status is not RodeoStatus.ACTIVE:
                    raise ValidationError(
                        [FieldError("rodeo_id", f"Voting is not open for this rodeo ({status.value})")]
                    )
            cursor.execute(
                """
                INSERT INTO ratings (id, rodeo_id, song_id, user_session_id, user_ip, rating)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(rodeo_id, song_id, user_session_id)
                DO UPDATE SET rating = excluded.rating, updated_at = CURRENT_TIMESTAMP
                """,
                (
                    new_id,
                    data.rodeo_id,
                    data.song_id,
                    data.user_session_id,
                    source_address,
                    data.rating,
                ),
            )
            row = cursor.execute(
                f"""
                SELECT {RATING_COLUMNS} FROM ratings
                WHERE rodeo_id = ? AND song_id = ? AND user_session_id = ?
                """,
                (data.rodeo_id, data.song_id, data.user_session_id),
            ).fetchone()
        created = row["id"] == new_id
        logger.info(
            "%s rating %s for song %s in rodeo %s: %d",
            "Created" if created else "Updated",
            row["id"],
            data.song_id,
            data.rodeo_id,
            data.rating,
        )
        return RatingRead.model_validate(dict(row)), created

    @classmethod
    async def get_rating(cls, rating_id: str) -> RatingRead:
        with transaction() as cursor:
            row = cursor.execute(
                f"SELECT {RATING_COLUMNS} FROM ratings WHERE id = ?", (rating_id,)
            ).fetchone()
        if not row:
            raise NotFoundError("rating", rating_id)
        return RatingRead.model_validate(dict(row))

    @classmethod
    async def list_for_song(cls, song_id: str) -> List[RatingPublic]:
        """Return all ratings of a song, most recently written first."""
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM songs WHERE id = ?", (song_id,)).fetchone():
                raise NotFoundError("song", song_id)
            rows = cursor.execute(
                f"SELECT {RATING_COLUMNS} FROM ratings WHERE song_id = ? "
                "ORDER BY updated_at DESC, rowid DESC",
                (song_id,),
            ).fetchall()
        return [RatingPublic.model_validate(dict(row)) for row in rows]

    @classmethod
    async def list_for_session(cls, rodeo_id: str, user_session_id: str) -> List[RatingRead]:
        """Return the ratings one participant session gave in a rodeo."""
        with transaction() as cursor:
            if not cursor.execute("SELECT id FROM rodeos WHERE id = ?", (rodeo_id,)).fetchone():
                raise NotFoundError("rodeo", rodeo_id)
            rows = cursor.execute(
                f"SELECT {RATING_COLUMNS} FROM ratings "
                "WHERE rodeo_id = ? AND user_session_id = ? ORDER BY created_at, rowid",
                (rodeo_id, user_session_id),
            ).fetchall()
        return [RatingRead.model_validate(dict(row)) for row in rows]
