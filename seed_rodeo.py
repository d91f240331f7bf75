#!/usr/bin/env python3
"""
Create a sample rodeo with a few songs in the Song Rodeo SQLite database.

The rodeo opens immediately and stays open for ``--days`` days.  The
script prints the rodeo id and its shareable slug so the voting page
can be opened right away.

Usage:
    python seed_rodeo.py --db ./song_rodeo_api/song_rodeo.db --name "Sample Rodeo" --days 7
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from song_rodeo_api.app.core.config import settings
from song_rodeo_api.app.core.db import init_db
from song_rodeo_api.app.core.errors import ServiceError
from song_rodeo_api.app.schemas.rodeo import RodeoCreate, RodeoRead
from song_rodeo_api.app.schemas.song import SongCreate
from song_rodeo_api.app.services.rodeo_service import RodeoService
from song_rodeo_api.app.services.song_service import SongService

SAMPLE_SONGS = [
    {"title": "Song One", "artist": "Artist A", "duration": 180},
    {"title": "Song Two", "artist": "Artist B", "duration": 200},
    {"title": "Song Three", "artist": "Artist C", "duration": 190},
]


async def seed(name: str, days: int, created_by: Optional[str] = None) -> RodeoRead:
    """Create the sample rodeo and its songs; return the rodeo."""
    now = datetime.now(timezone.utc)
    rodeo = await RodeoService.create_rodeo(
        RodeoCreate(
            name=name,
            created_by=created_by,
            start_date=now,
            end_date=now + timedelta(days=days),
        )
    )
    for song in SAMPLE_SONGS:
        await SongService.create_song(SongCreate(rodeo_id=rodeo.id, **song))
    return rodeo


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed a sample rodeo (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file; defaults to DATABASE_URL")
    ap.add_argument("--name", default="Sample Rodeo", help="Rodeo name")
    ap.add_argument("--days", type=int, default=7, help="How many days voting stays open")
    ap.add_argument("--created-by", help="Optional organizer label")
    args = ap.parse_args(argv)

    if args.days < 1:
        print("[!] --days must be at least 1.", file=sys.stderr)
        return 1
    if args.db:
        settings.database_url = args.db

    try:
        init_db()
        rodeo = asyncio.run(seed(args.name, args.days, args.created_by))
    except ServiceError as exc:
        print(f"[!] Seeding failed: {exc.message}", file=sys.stderr)
        return 2

    print(f"[+] Created rodeo {rodeo.id} with {len(SAMPLE_SONGS)} songs")
    print(f"[+] Voting link slug: {rodeo.slug}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
