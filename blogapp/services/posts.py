"""Post listing, lookup and author-only mutation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

import structlog
from flask import current_app
from werkzeug.datastructures import FileStorage

from blogapp.errors import AuthorizationError, NotFoundError, ValidationError
from blogapp.models.blog import STATUS_DRAFT, STATUS_PUBLISHED, Comment, Post
from blogapp.models.user import User
from blogapp.repositories import blog as repo
from blogapp.schemas import CommentCreate, PostCreate, PostQuery, PostUpdate, validate
from blogapp.utils.ids import require_hex_id
from blogapp.utils.image import remove_uploaded_image, save_validated_image, validate_image

logger = structlog.get_logger(__name__)

IMAGE_FIELD = "featuredImage"

IMAGE_ERROR_MESSAGES = {
    "empty_file": "Featured image is empty",
    "file_too_large": "Featured image is too large",
    "invalid_image": "Featured image is not a valid image",
    "unsupported_format": "Featured image must be a PNG, JPEG or WEBP file",
    "too_many_pixels": "Featured image dimensions are too large",
    "processing_error": "Featured image could not be processed",
    "write_failed": "Featured image could not be stored",
}


@dataclass
class PostPage:
    posts: list[Post]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def _present(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop absent values; an empty form field counts as not sent."""
    return {k: v for k, v in data.items() if v is not None and v != ""}


def _upload_dir() -> str:
    return current_app.config["UPLOAD_FOLDER"]


def _max_upload_bytes() -> int:
    return int(current_app.config.get("MAX_CONTENT_LENGTH") or 5 * 1024 * 1024)


def _read_image(image: FileStorage | None) -> tuple[bytes | None, str | None]:
    if image is None or not image.filename:
        return None, None
    return image.read(), image.filename


def _image_error(data: bytes) -> dict[str, str] | None:
    ok, err, _info = validate_image(data, max_bytes=_max_upload_bytes())
    if ok:
        return None
    return {"field": IMAGE_FIELD, "message": IMAGE_ERROR_MESSAGES.get(err or "", "Invalid image")}


def _store_image(data: bytes, filename: str | None) -> str:
    ok, err, _info, path = save_validated_image(
        data, _upload_dir(), original_filename=filename, max_bytes=_max_upload_bytes()
    )
    if not ok or not path:
        raise ValidationError(
            [{"field": IMAGE_FIELD, "message": IMAGE_ERROR_MESSAGES.get(err or "", "Invalid image")}]
        )
    return path


def _discard_image(path: str | None) -> None:
    # File cleanup never fails the request that triggered it
    if not path:
        return
    try:
        remove_uploaded_image(path, _upload_dir())
    except OSError as e:
        logger.error("image_cleanup_failed", path=path, error=str(e))


def _resolve_category(data: Mapping[str, Any], errors: list[dict[str, str]]):
    if any(e["field"] == "category" for e in errors) or "category" not in data:
        return None
    category = repo.get_category_by_hex_id(str(data["category"]).strip())
    if category is None:
        errors.append({"field": "category", "message": "Category does not exist"})
    return category


def _get_post_or_404(post_id: str) -> Post:
    require_hex_id(post_id)
    post = repo.get_post_by_hex_id(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _require_author(post: Post, actor: User, action: str) -> None:
    if post.author_id != actor.id:
        logger.warning(f"post_{action}_forbidden", post=post.hex_id, actor=actor.hex_id)
        raise AuthorizationError(f"Not authorized to {action} this post")


def resolve_visibility(requested: str | None, viewer: User | None) -> tuple[str, int | None]:
    """Return the (status, author_id) filter a listing may use.

    Anonymous callers only ever see published posts. Authenticated callers may
    ask for drafts, and then only get their own.
    """
    if viewer is None or requested in (None, STATUS_PUBLISHED):
        return STATUS_PUBLISHED, None
    return STATUS_DRAFT, viewer.id


def list_posts(params: Mapping[str, Any], viewer: User | None = None) -> PostPage:
    params = dict(params)
    params.setdefault("limit", current_app.config.get("POSTS_PER_PAGE", 10))
    query, errors = validate(PostQuery, params)
    if errors:
        raise ValidationError(errors)

    max_limit = int(current_app.config.get("MAX_POSTS_PER_PAGE", 100))
    if query.limit > max_limit:
        raise ValidationError([{"field": "limit", "message": f"Limit must be at most {max_limit}"}])

    category_id = None
    if query.category:
        category = repo.get_category_by_hex_id(require_hex_id(query.category))
        if category is None:
            return PostPage(posts=[], total=0, page=query.page, limit=query.limit)
        category_id = category.id

    status, author_id = resolve_visibility(query.status, viewer)
    posts, total = repo.search_posts(
        status=status,
        search=query.search,
        category_id=category_id,
        author_id=author_id,
        page=query.page,
        per_page=query.limit,
    )
    return PostPage(posts=posts, total=total, page=query.page, limit=query.limit)


def get_post(post_id: str, viewer: User | None = None) -> Post:
    require_hex_id(post_id)
    post = repo.get_post_detail(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.status == STATUS_DRAFT and (viewer is None or viewer.id != post.author_id):
        raise NotFoundError("Post not found")
    return post


def create_post(author: User, data: Mapping[str, Any], image: FileStorage | None = None) -> Post:
    data = _present(data)
    payload, errors = validate(PostCreate, data)
    category = _resolve_category(data, errors)

    image_bytes, image_name = _read_image(image)
    if image_bytes is not None:
        image_err = _image_error(image_bytes)
        if image_err:
            errors.append(image_err)

    if errors:
        raise ValidationError(errors)

    featured_image = _store_image(image_bytes, image_name) if image_bytes is not None else ""
    try:
        post = repo.create_post(
            title=payload.title,
            content=payload.content,
            status=payload.status,
            category_id=category.id,
            author_id=author.id,
            featured_image=featured_image,
        )
    except Exception:
        _discard_image(featured_image)
        raise

    logger.info("post_created", post=post.hex_id, author=author.hex_id, status=post.status)
    return post


def update_post(
    post_id: str, actor: User, data: Mapping[str, Any], image: FileStorage | None = None
) -> Post:
    post = _get_post_or_404(post_id)
    _require_author(post, actor, "update")

    data = _present(data)
    payload, errors = validate(PostUpdate, data)
    category = _resolve_category(data, errors)

    image_bytes, image_name = _read_image(image)
    if image_bytes is not None:
        image_err = _image_error(image_bytes)
        if image_err:
            errors.append(image_err)

    if errors:
        raise ValidationError(errors)

    changes: dict[str, Any] = payload.model_dump(include={"title", "content", "status"}, exclude_none=True)
    if category is not None:
        changes["category_id"] = category.id

    old_image = post.featured_image
    if image_bytes is not None:
        changes["featured_image"] = _store_image(image_bytes, image_name)

    try:
        post = repo.update_post(post, **changes)
    except Exception:
        _discard_image(changes.get("featured_image"))
        raise

    if "featured_image" in changes and old_image:
        _discard_image(old_image)

    logger.info("post_updated", post=post.hex_id, fields=sorted(changes))
    return post


def delete_post(post_id: str, actor: User) -> None:
    post = _get_post_or_404(post_id)
    _require_author(post, actor, "delete")

    image = post.featured_image
    hex_id = post.hex_id
    repo.delete_post(post)
    _discard_image(image)
    logger.info("post_deleted", post=hex_id, actor=actor.hex_id)


def add_comment(post_id: str, actor: User, data: Mapping[str, Any]) -> Comment:
    require_hex_id(post_id)
    payload, errors = validate(CommentCreate, data)
    if errors:
        raise ValidationError(errors)

    post = _get_post_or_404(post_id)
    if post.status == STATUS_DRAFT and post.author_id != actor.id:
        raise NotFoundError("Post not found")
    comment = repo.add_comment(post, author_id=actor.id, content=payload.content)
    logger.info("comment_added", post=post.hex_id, comment=comment.hex_id, author=actor.hex_id)
    return comment
