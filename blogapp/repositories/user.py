from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError

from blogapp.errors import DuplicateKeyError
from blogapp.extensions import db
from blogapp.models.user import User


def get_user_by_hex_id(hex_id: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(hex_id=hex_id)).scalar_one_or_none()


def get_user_by_username(username: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(username=username)).scalar_one_or_none()


def get_user_by_email(email: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()


def create_user(*, username: str, email: str, password_hash: str) -> User:
    user = User(username=username, email=email, password_hash=password_hash)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateKeyError("Username or email already registered")
    return user


def delete_user(user: User) -> None:
    db.session.delete(user)
    db.session.commit()
