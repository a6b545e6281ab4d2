from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from blogapp.models import is_hex_id

PostStatus = Literal["draft", "published"]


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _check_category(v: str) -> str:
    if not is_hex_id(v):
        raise ValueError("Invalid category")
    return v


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    category: str = Field(min_length=1)
    status: PostStatus = "draft"

    @field_validator("title", "category", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return _strip(v)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v

    @field_validator("category")
    @classmethod
    def category_id_format(cls, v: str) -> str:
        return _check_category(v)


class PostUpdate(BaseModel):
    """Partial update: only fields present in the request are set."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    status: Optional[PostStatus] = None

    @field_validator("title", "category", mode="before")
    @classmethod
    def strip_fields(cls, v):
        return _strip(v)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Content is required")
        return v

    @field_validator("category")
    @classmethod
    def category_id_format(cls, v: str | None) -> str | None:
        return None if v is None else _check_category(v)


class PostQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    search: str = ""
    category: Optional[str] = None
    status: Optional[PostStatus] = None

    @field_validator("search", mode="before")
    @classmethod
    def strip_search(cls, v):
        return _strip(v) or ""

    @field_validator("category", "status", mode="before")
    @classmethod
    def blank_is_absent(cls, v):
        v = _strip(v)
        return v or None


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return _strip(v)
