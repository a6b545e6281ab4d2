"""Signed bearer tokens (JWT) identifying a user by hex id."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask import current_app
from jose import ExpiredSignatureError, JWTError, jwt

from blogapp.errors import AuthenticationError

_DECODE_OPTIONS = {"require_exp": True, "require_sub": True}


def _signing_key() -> str:
    key = current_app.config.get("JWT_SECRET_KEY") or current_app.config.get("SECRET_KEY")
    if not key:
        raise RuntimeError("JWT_SECRET_KEY not configured")
    return key


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=int(current_app.config.get("JWT_EXPIRES_MINUTES", 1440)))
    claims = {"sub": subject, "iat": now, "exp": now + expires_delta}
    return jwt.encode(claims, _signing_key(), algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"))


def decode_access_token(token: str) -> str:
    """Verify signature and expiry and return the token subject.

    Raises AuthenticationError with reason ``token_expired`` or ``invalid_token``.
    """
    try:
        claims = jwt.decode(
            token,
            _signing_key(),
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
            options=_DECODE_OPTIONS,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("token_expired", "Authentication token expired")
    except JWTError:
        raise AuthenticationError("invalid_token", "Invalid authentication token")

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise AuthenticationError("invalid_token", "Invalid authentication token")
    return subject
