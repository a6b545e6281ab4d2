from __future__ import annotations

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from blogapp.errors import DuplicateKeyError
from blogapp.extensions import db
from blogapp.models.blog import Category, Comment, Post

# Largest OFFSET a signed 64-bit SQL integer can bind
MAX_SQL_OFFSET = 2**63 - 1


# Category repositories
def list_categories() -> list[Category]:
    return list(db.session.execute(db.select(Category).order_by(Category.name)).scalars())


def get_category_by_hex_id(hex_id: str) -> Optional[Category]:
    return db.session.execute(db.select(Category).filter_by(hex_id=hex_id)).scalar_one_or_none()


def get_category_by_name(name: str) -> Optional[Category]:
    return db.session.execute(db.select(Category).filter_by(name=name)).scalar_one_or_none()


def create_category(*, name: str, description: str | None) -> Category:
    cat = Category(name=name, description=description)
    db.session.add(cat)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateKeyError("A category with this name already exists")
    return cat


# Post repositories
def get_post_by_hex_id(hex_id: str) -> Optional[Post]:
    return db.session.execute(db.select(Post).filter_by(hex_id=hex_id)).scalar_one_or_none()


def get_post_detail(hex_id: str) -> Optional[Post]:
    stmt = (
        db.select(Post)
        .filter_by(hex_id=hex_id)
        .options(
            selectinload(Post.author),
            selectinload(Post.category),
            selectinload(Post.comments).selectinload(Comment.author),
        )
    )
    return db.session.execute(stmt).scalar_one_or_none()


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_posts(
    *,
    status: str,
    search: str = "",
    category_id: int | None = None,
    author_id: int | None = None,
    page: int = 1,
    per_page: int = 10,
) -> tuple[list[Post], int]:
    """Return one page of posts matching every given filter, newest first,
    together with the total number of matches.

    The page and the total come from two separate queries.
    """
    stmt = db.select(Post).filter(Post.status == status)
    if category_id is not None:
        stmt = stmt.filter(Post.category_id == category_id)
    if author_id is not None:
        stmt = stmt.filter(Post.author_id == author_id)
    if search:
        pattern = _like_pattern(search)
        stmt = stmt.filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.content.ilike(pattern, escape="\\"),
            )
        )
    offset = (page - 1) * per_page
    if offset > MAX_SQL_OFFSET:
        # Past any possible last page; only the total is meaningful
        count_stmt = db.select(db.func.count()).select_from(stmt.order_by(None).subquery())
        return [], db.session.execute(count_stmt).scalar() or 0

    stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).options(
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.comments),
    )
    pag = db.paginate(stmt, page=page, per_page=per_page, error_out=False)
    return list(pag.items), pag.total or 0


def create_post(
    *,
    title: str,
    content: str,
    status: str,
    category_id: int,
    author_id: int,
    featured_image: str = "",
) -> Post:
    p = Post(
        title=title,
        content=content,
        status=status,
        category_id=category_id,
        author_id=author_id,
        featured_image=featured_image,
    )
    db.session.add(p)
    db.session.commit()
    return p


def update_post(p: Post, **changes) -> Post:
    for field, value in changes.items():
        setattr(p, field, value)
    db.session.commit()
    return p


def delete_post(p: Post) -> None:
    # Comments go with the post in the same commit (delete-orphan cascade)
    db.session.delete(p)
    db.session.commit()


def add_comment(p: Post, *, author_id: int, content: str) -> Comment:
    comment = Comment(author_id=author_id, content=content)
    p.comments.append(comment)
    db.session.commit()
    return comment
