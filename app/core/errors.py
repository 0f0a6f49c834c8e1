"""
Domain exceptions for the coil tracker.

Routes map ValidationFailed to a 400 ``{message, field}`` body and
StorageError to a 500.
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """Base class for coil tracker failures."""


class ValidationFailed(TrackerError):
    """Raised when input to append-entry or rotate-coil is rejected."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message if field is None else f"{field}: {message}")

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.field is not None:
            body["field"] = self.field
        return body


class StorageError(TrackerError):
    """Raised when the persisted store cannot be written."""

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Storage failure at {location}: {reason}")
