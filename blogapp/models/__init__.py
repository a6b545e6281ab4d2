from __future__ import annotations

import re
import secrets
from datetime import datetime, timezone

HEX_ID_RE = re.compile(r"[0-9a-f]{32}")


def generate_hex_id(length: int = 32) -> str:
    """Generate a secure random hex string of specified length."""
    return secrets.token_hex(length // 2)


def is_hex_id(value: object) -> bool:
    return isinstance(value, str) and HEX_ID_RE.fullmatch(value) is not None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Import all models so metadata is complete for create_all/migrations
from blogapp.models.user import User
from blogapp.models.blog import Category, Post, Comment, POST_STATUSES, STATUS_DRAFT, STATUS_PUBLISHED

__all__ = [
    "generate_hex_id",
    "is_hex_id",
    "utcnow",
    "User",
    "Category",
    "Post",
    "Comment",
    "POST_STATUSES",
    "STATUS_DRAFT",
    "STATUS_PUBLISHED",
]
