from __future__ import annotations

from typing import Any, BinaryIO
from urllib.parse import urljoin

import requests
import structlog

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """A non-2xx answer from the API, or a transport failure (status_code None)."""

    def __init__(self, message: str, status_code: int | None = None, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


class ApiSession:
    """Explicit client session holding the bearer token.

    ``login()`` starts the session, ``logout()`` ends it; every request-issuing
    method goes through this object so no credential lives in global state.
    """

    def __init__(self, base_url: str, http: requests.Session | None = None, timeout: float = 10.0):
        if not base_url.startswith(("http://", "https://")):
            base_url = f"http://{base_url}"
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self._http = http or requests.Session()
        self.token: str | None = None
        self.user: dict | None = None

    # Lifecycle
    def __enter__(self) -> "ApiSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.logout()
        self._http.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        self.user = data["user"]
        return data

    def logout(self) -> None:
        self.token = None
        self.user = None

    def restore(self, token: str) -> dict | None:
        """Re-validate a previously saved token; on failure the session stays logged out."""
        self.token = token
        try:
            data = self._request("GET", "auth/me")
        except ApiError as e:
            logger.info("session_restore_failed", status=e.status_code)
            self.logout()
            return None
        self.user = data["user"]
        return self.user

    def register(self, username: str, email: str, password: str) -> dict:
        return self._request(
            "POST", "auth/register", json={"username": username, "email": email, "password": password}
        )

    # Posts
    def list_posts(self, **params: Any) -> dict:
        params = {k: v for k, v in params.items() if v not in (None, "")}
        return self._request("GET", "posts", params=params)

    def get_post(self, post_id: str) -> dict:
        return self._request("GET", f"posts/{post_id}")

    def create_post(self, fields: dict[str, Any], image: tuple[str, BinaryIO] | None = None) -> dict:
        return self._request("POST", "posts", **self._multipart(fields, image))

    def update_post(self, post_id: str, fields: dict[str, Any], image: tuple[str, BinaryIO] | None = None) -> dict:
        return self._request("PUT", f"posts/{post_id}", **self._multipart(fields, image))

    def delete_post(self, post_id: str) -> dict:
        return self._request("DELETE", f"posts/{post_id}")

    def add_comment(self, post_id: str, content: str) -> dict:
        return self._request("POST", f"posts/{post_id}/comments", json={"content": content})

    # Categories
    def list_categories(self) -> list[dict]:
        return self._request("GET", "categories")

    def create_category(self, name: str, description: str | None = None) -> dict:
        return self._request("POST", "categories", json={"name": name, "description": description})

    def image_url(self, path: str | None) -> str | None:
        """Absolute URL for a stored ``featuredImage`` path."""
        if not path:
            return None
        root = self.base_url
        if root.endswith("/api/"):
            root = root[: -len("api/")]
        return urljoin(root, path.lstrip("/"))

    # Internals
    @staticmethod
    def _multipart(fields: dict[str, Any], image: tuple[str, BinaryIO] | None) -> dict:
        data = {k: v for k, v in fields.items() if v is not None}
        files = {"featuredImage": image} if image else None
        return {"data": data, "files": files}

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = urljoin(self.base_url, path)
        try:
            resp = self._http.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(str(e) or "Network error") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.ok:
            message = "An error occurred"
            errors = None
            if isinstance(body, dict):
                message = body.get("message") or message
                errors = body.get("errors")
            raise ApiError(message, resp.status_code, errors)
        return body
