"""Unit tests for SongService."""

import asyncio

import pydantic
import pytest

from song_rodeo_api.app.core.errors import NotFoundError
from song_rodeo_api.app.schemas.song import SongCreate, SongUpdate
from song_rodeo_api.app.services.rating_service import RatingService
from song_rodeo_api.app.services.song_service import SongService


class TestSongService:
    """Tests for SongService."""

    def test_create_song(self, rodeo, song):
        assert song.rodeo_id == rodeo.id
        assert song.title == "Jolene"
        assert song.artist == "Dolly Parton"
        assert song.duration == 161
        assert song.spotify_url is None

    def test_create_song_unknown_rodeo(self):
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(SongService.create_song(SongCreate(rodeo_id="missing", title="Orphan")))
        assert exc_info.value.message == "Rodeo not found"

    def test_blank_title_rejected(self, rodeo):
        with pytest.raises(pydantic.ValidationError):
            SongCreate(rodeo_id=rodeo.id, title="   ")

    def test_negative_duration_rejected(self, rodeo):
        with pytest.raises(pydantic.ValidationError):
            SongCreate(rodeo_id=rodeo.id, title="Short", duration=-1)

    def test_get_song(self, song):
        assert asyncio.run(SongService.get_song(song.id)) == song

    def test_get_unknown_song(self):
        with pytest.raises(NotFoundError):
            asyncio.run(SongService.get_song("missing"))

    def test_list_songs_with_stats(self, rodeo, song, make_song):
        other = make_song(rodeo.id, title="9 to 5")
        asyncio.run(RatingService.submit_rating(rodeo.id, other.id, "session-a", 5))
        songs = asyncio.run(SongService.list_songs(rodeo.id))
        assert [(s.id, s.vote_count) for s in songs] == [(song.id, 0), (other.id, 1)]

    def test_list_songs_unknown_rodeo(self):
        with pytest.raises(NotFoundError):
            asyncio.run(SongService.list_songs("missing"))

    def test_partial_update(self, song):
        updated = asyncio.run(
            SongService.update_song(song.id, SongUpdate(youtube_url="https://youtu.be/Ixrje2rXLMA"))
        )
        assert updated.youtube_url == "https://youtu.be/Ixrje2rXLMA"
        assert updated.title == song.title
        assert updated.artist == song.artist

    def test_update_unknown_song(self):
        with pytest.raises(NotFoundError):
            asyncio.run(SongService.update_song("missing", SongUpdate(title="x")))

    def test_delete_song_removes_ratings(self, rodeo, song):
        rating, _ = asyncio.run(RatingService.submit_rating(rodeo.id, song.id, "session-a", 2))
        asyncio.run(SongService.delete_song(song.id))
        with pytest.raises(NotFoundError):
            asyncio.run(SongService.get_song(song.id))
        with pytest.raises(NotFoundError):
            asyncio.run(RatingService.get_rating(rating.id))

    def test_delete_unknown_song(self):
        with pytest.raises(NotFoundError):
            asyncio.run(SongService.delete_song("missing"))
