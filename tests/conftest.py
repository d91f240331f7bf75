"""Pytest configuration and shared fixtures."""

import asyncio
import sqlite3
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from song_rodeo_api.app.core import db
from song_rodeo_api.app.core.config import settings
from song_rodeo_api.app.core.db import init_db
from song_rodeo_api.app.schemas.rodeo import RodeoCreate
from song_rodeo_api.app.schemas.song import SongCreate
from song_rodeo_api.app.services.rodeo_service import RodeoService
from song_rodeo_api.app.services.song_service import SongService


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point every test at a fresh, migrated SQLite file."""
    path = tmp_path / "rodeo.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def api_client():
    from song_rodeo_api.app.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_rodeo():
    """Create a rodeo whose voting window is open unless told otherwise."""

    def _make(name="Friday Night Rodeo", start=None, end=None, created_by=None):
        now = datetime.now(timezone.utc)
        data = RodeoCreate(
            name=name,
            created_by=created_by,
            start_date=start or now - timedelta(hours=1),
            end_date=end or now + timedelta(days=1),
        )
        return asyncio.run(RodeoService.create_rodeo(data))

    return _make


@pytest.fixture
def make_song():
    def _make(rodeo_id, title="Jolene", **details):
        return asyncio.run(SongService.create_song(SongCreate(rodeo_id=rodeo_id, title=title, **details)))

    return _make


@pytest.fixture
def rodeo(make_rodeo):
    return make_rodeo()


@pytest.fixture
def song(rodeo, make_song):
    return make_song(rodeo.id, artist="Dolly Parton", duration=161)


@pytest.fixture
def read_only_database(database, monkeypatch):
    """Return a callable that makes every later connection read-only.

    Reads keep working while any write fails inside ``transaction()``
    with a real ``sqlite3.Error``.
    """

    def _activate():
        def connect():
            conn = sqlite3.connect(f"{database.as_uri()}?mode=ro", uri=True, timeout=settings.db_timeout)
            conn.row_factory = sqlite3.Row
            return conn

        monkeypatch.setattr(db, "get_connection", connect)

    return _activate


@pytest.fixture
def count_rows(database):
    """Count rows in a table, bypassing the application's connection helper."""

    def _count(table):
        conn = sqlite3.connect(database)
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        finally:
            conn.close()

    return _count
