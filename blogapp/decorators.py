from __future__ import annotations

from functools import wraps
from typing import Callable, Any

from flask_login import current_user, login_required

from blogapp.models.user import User


def token_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Run ``fn`` only for a request whose bearer token resolved to a live user.

    Failures are raised by the login manager's unauthorized handler as
    AuthenticationError, before ``fn`` is entered.
    """
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        return fn(*args, **kwargs)

    return wrapper


def current_identity() -> User | None:
    """The authenticated user for this request, or None for anonymous callers."""
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None
