"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can run locally without any setup.  In a deployment you should
override these via environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Song Rodeo API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file; console logging is always enabled.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "song_rodeo.db")
    # Seconds a connection waits on a locked database before giving up.
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "5.0"))

    # Shareable voting links look like ``rodeo-1a2b3c4d``.
    slug_prefix: str = os.getenv("SLUG_PREFIX", "rodeo-")
    slug_length: int = int(os.getenv("SLUG_LENGTH", "8"))
    slug_max_attempts: int = int(os.getenv("SLUG_MAX_ATTEMPTS", "5"))

    # Reject ratings for rodeos that have not started or have ended.
    enforce_voting_window: bool = _env_flag("ENFORCE_VOTING_WINDOW", "true")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must be set before importing this module.
settings = Settings()
