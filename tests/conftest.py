"""Test configuration and fixtures for the blog API."""

import io
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from PIL import Image
from sqlalchemy.pool import StaticPool

from blogapp import create_app
from blogapp.extensions import db
from blogapp.models import User, Category, Post
from blogapp.utils.crypto import hash_password
from blogapp.utils.tokens import create_access_token

PASSWORD = 'password123'


@pytest.fixture
def app(tmp_path) -> Generator[Flask, None, None]:
    """Create and configure a test Flask application.

    No app context stays pushed while tests run so every test-client request
    gets a fresh ``g`` (and a fresh bearer identity).
    """
    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'poolclass': StaticPool,
            'connect_args': {'check_same_thread': False}
        },
        'SECRET_KEY': 'test-secret-key',
        'JWT_SECRET_KEY': 'test-jwt-secret',
        'JWT_EXPIRES_MINUTES': 60,
        'BCRYPT_ROUNDS': 4,
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'RATELIMIT_ENABLED': False,  # Disable rate limiting for tests
        'ENV': 'production',
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask):
    """Create a test CLI runner."""
    return app.test_cli_runner()


def make_user(app: Flask, username: str, email: str, password: str = PASSWORD) -> User:
    with app.app_context():
        user = User(username=username, email=email, password_hash=hash_password(password))
        db.session.add(user)
        db.session.commit()
        db.session.refresh(user)
        return user


def make_category(app: Flask, name: str, description: str = '') -> Category:
    with app.app_context():
        category = Category(name=name, description=description)
        db.session.add(category)
        db.session.commit()
        db.session.refresh(category)
        return category


def make_post(
    app: Flask,
    author: User,
    category: Category,
    title: str = 'Test Post',
    content: str = 'This is a test post content.',
    status: str = 'published',
    created_at: datetime | None = None,
) -> Post:
    with app.app_context():
        post = Post(
            title=title,
            content=content,
            status=status,
            author_id=author.id,
            category_id=category.id,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.session.add(post)
        db.session.commit()
        db.session.refresh(post)
        return post


def make_token(app: Flask, user: User, expires_delta: timedelta | None = None) -> str:
    with app.app_context():
        return create_access_token(user.hex_id, expires_delta)


def bearer(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


def png_bytes(size: tuple[int, int] = (32, 24), color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new('RGB', size, color).save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture
def author(app: Flask) -> User:
    """The user who owns the test posts."""
    return make_user(app, 'author', 'author@example.com')


@pytest.fixture
def other_user(app: Flask) -> User:
    """A second, unrelated user."""
    return make_user(app, 'reader', 'reader@example.com')


@pytest.fixture
def category(app: Flask) -> Category:
    return make_category(app, 'Tech', 'Technology posts')


@pytest.fixture
def published_post(app: Flask, author: User, category: Category) -> Post:
    return make_post(app, author, category, title='Hello World', content='First published post')


@pytest.fixture
def draft_post(app: Flask, author: User, category: Category) -> Post:
    return make_post(app, author, category, title='Secret Draft', content='Not ready yet', status='draft')


@pytest.fixture
def author_headers(app: Flask, author: User) -> dict:
    return bearer(make_token(app, author))


@pytest.fixture
def other_headers(app: Flask, other_user: User) -> dict:
    return bearer(make_token(app, other_user))
