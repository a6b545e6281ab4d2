"""Application error taxonomy.

Every failure a request can end in is one of these classes; the handlers
registered in ``create_app`` turn them into JSON responses of the shape
``{"error": <code>, "message": <text>, ...}``.
"""
from __future__ import annotations

from typing import Any


class APIError(Exception):
    status_code: int = 500
    error: str = "server_error"
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ValidationError(APIError):
    """One or more request fields are missing or malformed.

    ``errors`` holds every field failure, not just the first one:
    ``[{"field": "title", "message": "Title is required"}, ...]``.
    """

    status_code = 400
    error = "validation_error"
    default_message = "Validation Error"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> list[str]:
        return [e["field"] for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class CastError(APIError):
    status_code = 400
    error = "invalid_id"
    default_message = "Invalid ID format"


class DuplicateKeyError(APIError):
    status_code = 400
    error = "duplicate_key"
    default_message = "Duplicate field value entered"


class AuthenticationError(APIError):
    status_code = 401
    error = "unauthorized"
    default_message = "Authentication required"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class AuthorizationError(APIError):
    status_code = 403
    error = "forbidden"
    default_message = "Not authorized"


class NotFoundError(APIError):
    status_code = 404
    error = "not_found"
    default_message = "Resource not found"
