"""Tests for the requests-based API client."""

import json
import re

import requests

from song_rodeo_client import SongRodeoAPI, new_session_id


def make_response(status_code, body=None, reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = json.dumps(body).encode() if body is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Records requests and answers with a canned response."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        self.response.url = kwargs["url"]
        return self.response


def client_for(session):
    return SongRodeoAPI(base_url="http://rodeo.test/api/v1/", session=session)


class TestSongRodeoAPI:
    """Tests for SongRodeoAPI."""

    def test_submit_rating(self):
        session = FakeSession(make_response(201, {"id": "r1", "rating": 4}))
        data, error = client_for(session).submit_rating("rodeo-1", "song-1", 4, "session-a")

        assert error is None
        assert data == {"id": "r1", "rating": 4}
        [call] = session.calls
        assert call["method"] == "POST"
        assert call["url"] == "http://rodeo.test/api/v1/ratings"
        assert call["json"] == {
            "rodeo_id": "rodeo-1",
            "song_id": "song-1",
            "rating": 4,
            "user_session_id": "session-a",
        }

    def test_create_rodeo_omits_blank_creator(self):
        session = FakeSession(make_response(201, {"id": "rodeo-1"}))
        client_for(session).create_rodeo("Friday", "2025-09-01T18:00:00Z", "2025-09-01T22:00:00Z")
        assert "created_by" not in session.calls[0]["json"]

    def test_validation_errors_are_returned(self):
        body = {"errors": [{"field": "rating", "message": "Input should be less than or equal to 5"}]}
        session = FakeSession(make_response(400, body, reason="Bad Request"))
        data, error = client_for(session).submit_rating("rodeo-1", "song-1", 9, "session-a")

        assert data is None
        assert error["status_code"] == 400
        assert error["errors"] == body["errors"]
        assert error["message"] == "rating: Input should be less than or equal to 5"

    def test_not_found_message(self):
        session = FakeSession(make_response(404, {"error": "Rodeo not found"}, reason="Not Found"))
        data, error = client_for(session).get_rodeo_by_link("rodeo-nothere")
        assert data is None
        assert error == {"status_code": 404, "message": "Rodeo not found", "errors": []}

    def test_delete_has_no_body(self):
        session = FakeSession(make_response(204, reason="No Content"))
        ok, error = client_for(session).delete_rodeo("rodeo-1")
        assert ok is True
        assert error is None
        assert session.calls[0]["method"] == "DELETE"

    def test_connection_failure(self):
        session = FakeSession(exc=requests.ConnectionError("refused"))
        data, error = client_for(session).rodeo_stats("rodeo-1")
        assert data is None
        assert error["status_code"] is None
        assert "refused" in error["message"]

    def test_paths(self):
        session = FakeSession(make_response(200, []))
        client = client_for(session)
        client.list_songs("r1")
        client.song_ratings("s1")
        client.session_ratings("r1", "session-a")
        client.get_rating("x1")
        urls = [c["url"] for c in session.calls]
        assert urls == [
            "http://rodeo.test/api/v1/songs/rodeo/r1",
            "http://rodeo.test/api/v1/ratings/song/s1",
            "http://rodeo.test/api/v1/ratings/rodeo/r1/user/session-a",
            "http://rodeo.test/api/v1/ratings/x1",
        ]

    def test_path_parameters_are_quoted(self):
        session = FakeSession(make_response(200, []))
        client = client_for(session)
        client.session_ratings("r1", "abc?x#y")
        client.get_rodeo_by_link("a/b")
        client.get_song("two words")
        urls = [c["url"] for c in session.calls]
        assert urls == [
            "http://rodeo.test/api/v1/ratings/rodeo/r1/user/abc%3Fx%23y",
            "http://rodeo.test/api/v1/rodeos/link/a%2Fb",
            "http://rodeo.test/api/v1/songs/two%20words",
        ]


def test_new_session_id_format():
    token = new_session_id()
    assert re.fullmatch(r"session-\d{13}-[0-9a-f]{10}", token)
    assert new_session_id() != token
