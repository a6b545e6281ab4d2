from __future__ import annotations

from typing import Any, Mapping

import structlog

from blogapp.errors import ValidationError
from blogapp.models.blog import Category
from blogapp.repositories.blog import create_category as _create_category
from blogapp.repositories.blog import get_category_by_name, list_categories
from blogapp.schemas import CategoryCreate, validate

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORIES = [
    ("Technology", "Tech-related posts"),
    ("Travel", "Travel adventures"),
    ("Food", "Food and recipes"),
    ("Lifestyle", "Lifestyle tips"),
    ("Business", "Business and entrepreneurship"),
    ("Health", "Health and wellness"),
]


def all_categories() -> list[Category]:
    return list_categories()


def create_category(data: Mapping[str, Any]) -> Category:
    payload, errors = validate(CategoryCreate, data)
    if errors:
        raise ValidationError(errors)
    cat = _create_category(name=payload.name, description=payload.description)
    logger.info("category_created", category=cat.hex_id, name=cat.name)
    return cat


def seed_default_categories() -> list[Category]:
    """Insert the default categories that do not exist yet; returns the ones created."""
    created = []
    for name, description in DEFAULT_CATEGORIES:
        if get_category_by_name(name) is None:
            created.append(_create_category(name=name, description=description))
    return created
