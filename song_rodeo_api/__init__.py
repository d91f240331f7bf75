"""
Top-level package for the Song Rodeo API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``song_rodeo_api.app.main:app``.
"""

__all__ = []
