"""
Application package initializer.

The API is organised into layers: ``core`` (configuration, logging,
database, errors), ``schemas`` (request and response models),
``services`` (business logic) and ``api`` (versioned HTTP routers).
"""

from .main import app  # noqa: F401
