"""Entry point for serving the Song Rodeo API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (see ``song_rodeo_api.app.core.config``).  Defaults are
``0.0.0.0`` and ``5000``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from song_rodeo_api.app.core.config import settings
from song_rodeo_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
