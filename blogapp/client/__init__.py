"""Python client for the blog API.

``ApiSession`` carries the credential explicitly; ``PostBrowser`` keeps the
listing filters and re-queries with a debounced search box.
"""
from blogapp.client.debounce import Debouncer
from blogapp.client.filters import PostBrowser, PostFilters
from blogapp.client.session import ApiError, ApiSession

__all__ = ["ApiError", "ApiSession", "Debouncer", "PostBrowser", "PostFilters"]
