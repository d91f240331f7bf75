"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running a unit of work (``transaction``) and
applying migrations on application start (``init_db``).

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import StorageError

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS rodeos (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            created_by TEXT,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS songs (
            id TEXT PRIMARY KEY,
            rodeo_id TEXT NOT NULL,
            title TEXT NOT NULL,
            artist TEXT,
            duration INTEGER,
            spotify_url TEXT,
            youtube_url TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(rodeo_id) REFERENCES rodeos(id) ON DELETE CASCADE
        );

        -- One rating per participant session per song in a rodeo.
        CREATE TABLE IF NOT EXISTS ratings (
            id TEXT PRIMARY KEY,
            rodeo_id TEXT NOT NULL,
            song_id TEXT NOT NULL,
            user_session_id TEXT NOT NULL,
            user_ip TEXT,
            rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(rodeo_id) REFERENCES rodeos(id) ON DELETE CASCADE,
            FOREIGN KEY(song_id) REFERENCES songs(id) ON DELETE CASCADE,
            UNIQUE(rodeo_id, song_id, user_session_id)
        );
        """,
    ),
    # Migration 2: indices for the lookups the services run per request
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_songs_rodeo_id ON songs(rodeo_id);
        CREATE INDEX IF NOT EXISTS idx_ratings_song_id ON ratings(song_id);
        CREATE INDEX IF NOT EXISTS idx_ratings_rodeo_session ON ratings(rodeo_id, user_session_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # song_rodeo_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is switched on for the lifetime of
    the connection; SQLite leaves it off by default and the cascading
    deletes of songs and ratings depend on it.
    """
    conn = sqlite3.connect(get_database_path(), timeout=settings.db_timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor whose work is committed on success.

    Any ``sqlite3.Error`` rolls the transaction back and surfaces as a
    ``StorageError``; the underlying cause is only logged.  Other
    exceptions (e.g. ``NotFoundError``) roll back and propagate as is.
    """
    try:
        conn = get_connection()
    except sqlite3.Error as exc:
        logger.exception("Could not open database %s", settings.database_url)
        raise StorageError() from exc
    try:
        yield conn.cursor()
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        logger.exception("Database operation failed")
        raise StorageError() from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    with transaction() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
