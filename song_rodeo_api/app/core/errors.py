"""
Error taxonomy shared by the service layer and the API boundary.

Services raise these exceptions; the handlers registered in
``api.error_handlers`` translate them into HTTP responses:

* ``ValidationError`` -> 400 with every failed field listed
* ``NotFoundError`` -> 404
* ``StorageError`` -> 500 with a generic message (details are logged)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

import pydantic

# Request sections FastAPI puts in front of a field location.
_LOCATION_SECTIONS = {"body", "query", "path", "header", "cookie"}


class ErrorCode(Enum):
    """Service error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_FAILURE = "STORAGE_FAILURE"


@dataclass(frozen=True)
class FieldError:
    """A single rejected input field."""

    field: str
    message: str

    def as_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(ServiceError):
    """Raised when caller input is malformed, missing or out of range."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        fields = ", ".join(e.field for e in self.errors)
        super().__init__(f"Invalid input: {fields}")

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError) -> "ValidationError":
        return cls(field_errors(exc.errors()))


class NotFoundError(ServiceError):
    """Raised when a referenced rodeo, song or rating does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, identifier: Any) -> None:
        super().__init__(f"{entity.capitalize()} not found")
        self.entity = entity
        self.identifier = identifier


class StorageError(ServiceError):
    """Raised when the database is unreachable or rejects an operation."""

    code = ErrorCode.STORAGE_FAILURE

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message)


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[FieldError]:
    """Convert pydantic/FastAPI error dicts into ``FieldError`` objects.

    ``("body", "rating")`` becomes ``"rating"``; nested locations are
    joined with dots.  Messages from custom validators lose pydantic's
    ``"Value error, "`` prefix.
    """
    result: List[FieldError] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATION_SECTIONS:
            section = loc.pop(0)
        else:
            section = "body"
        field = ".".join(loc) or section
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        result.append(FieldError(field=field, message=message))
    return result
