from __future__ import annotations

from typing import Any, Mapping

import structlog

from blogapp.errors import AuthenticationError, ValidationError
from blogapp.models.user import User
from blogapp.repositories.user import create_user, get_user_by_email, get_user_by_hex_id
from blogapp.schemas import LoginRequest, RegisterRequest, validate
from blogapp.utils.crypto import hash_password, verify_password
from blogapp.utils.tokens import create_access_token, decode_access_token

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "bearer "


def register(data: Mapping[str, Any]) -> User:
    payload, errors = validate(RegisterRequest, data)
    if errors:
        raise ValidationError(errors)
    user = create_user(
        username=payload.username,
        email=payload.email.lower(),
        password_hash=hash_password(payload.password),
    )
    logger.info("user_registered", user=user.hex_id)
    return user


def authenticate(data: Mapping[str, Any]) -> User:
    """Check email/password credentials; returns the user or raises AuthenticationError."""
    payload, errors = validate(LoginRequest, data)
    if errors:
        raise ValidationError(errors)
    user = get_user_by_email(payload.email.strip().lower())
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed")
        raise AuthenticationError("invalid_credentials", "Invalid credentials")
    return user


def issue_access_token(user: User) -> str:
    return create_access_token(user.hex_id)


def extract_bearer_token(header: str | None) -> str:
    if not header or not header.lower().startswith(BEARER_PREFIX):
        raise AuthenticationError("missing_token", "Authentication token missing")
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("missing_token", "Authentication token missing")
    return token


def resolve_bearer_identity(header: str | None) -> User:
    """Resolve an ``Authorization`` header value to a live user.

    Each failure mode raises AuthenticationError with its own reason:
    missing_token, invalid_token, token_expired, user_not_found.
    """
    token = extract_bearer_token(header)
    subject = decode_access_token(token)
    user = get_user_by_hex_id(subject)
    if user is None:
        raise AuthenticationError("user_not_found", "User no longer exists")
    return user
