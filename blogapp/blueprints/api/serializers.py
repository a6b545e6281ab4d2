from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from blogapp.models import Category, Comment, Post, User


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        # SQLite drops the offset; stored values are UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def user_summary(user: User, *, include_email: bool = True) -> dict[str, Any]:
    data = {"id": user.hex_id, "username": user.username}
    if include_email:
        data["email"] = user.email
    return data


def category_to_dict(cat: Category, *, brief: bool = False) -> dict[str, Any]:
    if brief:
        return {"id": cat.hex_id, "name": cat.name}
    return {
        "id": cat.hex_id,
        "name": cat.name,
        "description": cat.description,
        "createdAt": _iso(cat.created_at),
    }


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.hex_id,
        "content": comment.content,
        "user": user_summary(comment.author, include_email=False),
        "createdAt": _iso(comment.created_at),
    }


def post_to_dict(post: Post, *, detail: bool = False) -> dict[str, Any]:
    data = {
        "id": post.hex_id,
        "title": post.title,
        "content": post.content,
        "status": post.status,
        "featuredImage": post.featured_image or "",
        "author": user_summary(post.author, include_email=detail),
        "category": category_to_dict(post.category, brief=not detail),
        "commentCount": post.comment_count,
        "createdAt": _iso(post.created_at),
        "updatedAt": _iso(post.updated_at),
    }
    if detail:
        data["comments"] = [comment_to_dict(c) for c in post.comments]
    return data
