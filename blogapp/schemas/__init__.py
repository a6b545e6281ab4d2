from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .auth import LoginRequest, RegisterRequest  # noqa: F401
from .categories import CategoryCreate  # noqa: F401
from .posts import CommentCreate, PostCreate, PostQuery, PostUpdate  # noqa: F401

M = TypeVar("M", bound=BaseModel)

# Friendlier wording for the common "nothing usable was sent" failures
_REQUIRED_TYPES = {"missing", "string_too_short"}


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize() if field else "Request"


def field_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else ""
        if err.get("type") in _REQUIRED_TYPES and err.get("ctx", {}).get("min_length", 1) <= 1:
            message = f"{_label(field)} is required"
        else:
            message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"field": field, "message": message})
    return errors


def validate(schema: type[M], data: Mapping[str, Any]) -> tuple[M | None, list[dict[str, str]]]:
    """Validate ``data`` against ``schema``.

    Returns ``(model, [])`` on success or ``(None, errors)`` where ``errors``
    lists every failing field as ``{"field", "message"}``.
    """
    try:
        return schema.model_validate(dict(data)), []
    except PydanticValidationError as exc:
        return None, field_errors(exc)


__all__ = [
    # auth
    "LoginRequest",
    "RegisterRequest",
    # categories
    "CategoryCreate",
    # posts
    "PostCreate",
    "PostUpdate",
    "PostQuery",
    "CommentCreate",
    # helpers
    "validate",
    "field_errors",
]
