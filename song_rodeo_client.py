"""Song Rodeo API client.

A thin wrapper around the REST API served by ``song_rodeo_api``.  It is
what the voting page and the admin dashboard use to talk to the
backend, and it is handy for scripting against a running server.

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the decoded JSON body (``None`` for empty responses) and
``error`` is ``None``.  On failure ``data`` is ``None`` and ``error``
is a dictionary with ``status_code``, ``message`` and, for validation
failures, the list of per-field ``errors`` reported by the server.

Participants are anonymous.  Call :func:`new_session_id` once per
browser/device, keep the token, and pass it to every rating call.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


def _segment(value: Any) -> str:
    """Quote one path parameter so ``/``, ``?`` and ``#`` stay inside it."""
    return quote(str(value), safe="")


def new_session_id() -> str:
    """Return a fresh opaque participant token, e.g. ``session-1725210000000-9f3a0c1b2d``."""
    return f"session-{int(time.time() * 1000)}-{secrets.token_hex(5)}"


class SongRodeoAPI:
    """Client for the Song Rodeo REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: API root including the version prefix, e.g.
                ``http://localhost:5000/api/v1``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform an HTTP request to the API and decode the outcome."""
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._describe_error(exc.response)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc), "errors": []}

    @staticmethod
    def _describe_error(response: Optional[requests.Response]) -> Dict[str, Any]:
        if response is None:
            return {"status_code": None, "message": "No response", "errors": []}
        field_errors: List[Dict[str, str]] = []
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            field_errors = body.get("errors") or []
            message = body.get("error") or "; ".join(
                f"{e.get('field')}: {e.get('message')}" for e in field_errors
            )
        else:
            message = response.text
        message = message or response.reason or f"HTTP {response.status_code}"
        logger.error("API request failed (%s): %s", response.status_code, message)
        return {"status_code": response.status_code, "message": message, "errors": field_errors}

    # ------------------------------------------------------------------
    # Rodeos
    # ------------------------------------------------------------------
    def create_rodeo(
        self,
        name: str,
        start_date: str,
        end_date: str,
        created_by: Optional[str] = None,
    ) -> Result:
        """Create a rodeo.  Dates are ISO 8601 strings."""
        payload: Dict[str, Any] = {"name": name, "start_date": start_date, "end_date": end_date}
        if created_by:
            payload["created_by"] = created_by
        return self._request("POST", "/rodeos", json_body=payload)

    def list_rodeos(self) -> Result:
        return self._request("GET", "/rodeos")

    def get_rodeo(self, rodeo_id: str) -> Result:
        """Admin view: rodeo with songs and live aggregates."""
        return self._request("GET", f"/rodeos/{_segment(rodeo_id)}")

    def get_rodeo_by_link(self, slug: str) -> Result:
        """Participant view: rodeo opened through its shareable link."""
        return self._request("GET", f"/rodeos/link/{_segment(slug)}")

    def update_rodeo(self, rodeo_id: str, **changes: Any) -> Result:
        return self._request("PUT", f"/rodeos/{_segment(rodeo_id)}", json_body=changes)

    def delete_rodeo(self, rodeo_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/rodeos/{_segment(rodeo_id)}")
        return error is None, error

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------
    def add_song(self, rodeo_id: str, title: str, **details: Any) -> Result:
        """Add a song; ``details`` may hold artist, duration, spotify_url, youtube_url."""
        return self._request("POST", "/songs", json_body={"rodeo_id": rodeo_id, "title": title, **details})

    def list_songs(self, rodeo_id: str) -> Result:
        return self._request("GET", f"/songs/rodeo/{_segment(rodeo_id)}")

    def get_song(self, song_id: str) -> Result:
        return self._request("GET", f"/songs/{_segment(song_id)}")

    def update_song(self, song_id: str, **changes: Any) -> Result:
        return self._request("PUT", f"/songs/{_segment(song_id)}", json_body=changes)

    def delete_song(self, song_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/songs/{_segment(song_id)}")
        return error is None, error

    # ------------------------------------------------------------------
    # Ratings
    # ------------------------------------------------------------------
    def submit_rating(self, rodeo_id: str, song_id: str, rating: int, user_session_id: str) -> Result:
        """Submit a rating, replacing any earlier one from the same session."""
        return self._request(
            "POST",
            "/ratings",
            json_body={
                "rodeo_id": rodeo_id,
                "song_id": song_id,
                "rating": rating,
                "user_session_id": user_session_id,
            },
        )

    def get_rating(self, rating_id: str) -> Result:
        return self._request("GET", f"/ratings/{_segment(rating_id)}")

    def song_ratings(self, song_id: str) -> Result:
        return self._request("GET", f"/ratings/song/{_segment(song_id)}")

    def session_ratings(self, rodeo_id: str, user_session_id: str) -> Result:
        return self._request("GET", f"/ratings/rodeo/{_segment(rodeo_id)}/user/{_segment(user_session_id)}")

    def rodeo_stats(self, rodeo_id: str) -> Result:
        return self._request("GET", f"/ratings/rodeo/{_segment(rodeo_id)}/stats")
