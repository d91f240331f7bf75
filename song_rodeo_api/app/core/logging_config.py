"""
Logging setup for the Song Rodeo API.

Everything logs through the root logger: the API's own modules via
``logging.getLogger(__name__)`` and uvicorn's loggers, which are
made to propagate instead of using their own handlers so one format
covers both.  Rating submissions and catalog writes log at INFO,
storage failures with their traceback at ERROR.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Server loggers that should share the application's handlers.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure the root logger once and return the package logger.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``; unknown names
        fall back to INFO.
    logfile : Optional[str]
        Also write records to this file when given.
    """
    package_logger = logging.getLogger("song_rodeo_api")
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(numeric_level)
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    if root.handlers:
        return package_logger

    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    package_logger.debug("Logging configured at %s", logging.getLevelName(numeric_level))
    return package_logger
