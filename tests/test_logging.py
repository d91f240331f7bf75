"""Tests for the logging setup."""

import logging

from song_rodeo_api.app.core.logging_config import SERVER_LOGGERS, setup_logging


def test_package_level_follows_setting():
    logger = setup_logging("debug")
    try:
        assert logger.name == "song_rodeo_api"
        assert logger.level == logging.DEBUG
        assert logging.getLogger("song_rodeo_api.app.services.rating_service").isEnabledFor(logging.DEBUG)
    finally:
        logger.setLevel(logging.INFO)


def test_unknown_level_falls_back_to_info():
    assert setup_logging("chatty").level == logging.INFO


def test_server_loggers_propagate():
    logging.getLogger("uvicorn.access").propagate = False
    setup_logging()
    assert all(logging.getLogger(name).propagate for name in SERVER_LOGGERS)
