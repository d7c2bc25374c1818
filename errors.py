"""Error taxonomy shared by the store, the import pipeline and the API.

Every error carries a human-readable ``message``; ``ValidationError`` also
carries a list of field-level issues (``loc``/``msg``/``type``) so callers can
react per field. ``main.py`` registers handlers that render these as JSON.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError


class TrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(TrackerError):
    status_code = 400

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(
        cls, exc: PydanticValidationError, message: str = "Invalid application data"
    ) -> "ValidationError":
        return cls(message, errors=simplify_errors(exc.errors()))

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class NotFoundError(TrackerError):
    status_code = 404


class StorageError(TrackerError):
    status_code = 500


def simplify_errors(raw_errors) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe ``{loc, msg, type}`` entries."""
    return [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": str(err.get("msg", "")),
            "type": str(err.get("type", "value_error")),
        }
        for err in raw_errors
    ]
