from __future__ import annotations

from blogapp.errors import CastError
from blogapp.models import is_hex_id


def require_hex_id(value: str) -> str:
    """Return ``value`` if it is a well-formed public id, else raise CastError."""
    if not is_hex_id(value):
        raise CastError()
    return value
