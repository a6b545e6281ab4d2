from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any, Callable

import structlog

from blogapp.client.debounce import Debouncer
from blogapp.client.session import ApiError, ApiSession

logger = structlog.get_logger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.5


@dataclass(frozen=True)
class PostFilters:
    search: str = ""
    category: str = ""
    page: int = 1

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category
        return params


class PostBrowser:
    """Listing state for a post browser.

    Typing into the search box is debounced; category and page changes
    re-query immediately. Changing search or category goes back to page 1.
    Fetch failures end up in ``error`` instead of propagating.
    """

    def __init__(
        self,
        session: ApiSession,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
        on_change: Callable[["PostBrowser"], None] | None = None,
    ) -> None:
        self.session = session
        self.on_change = on_change
        self.search_input = ""
        self.filters = PostFilters()
        self.posts: list[dict] = []
        self.total_pages = 0
        self.current_page = 1
        self.total_posts = 0
        self.error: str | None = None
        self.loading = False
        self._lock = threading.RLock()
        self._debouncer = Debouncer(debounce_seconds, self._apply_search, timer_factory=timer_factory)

    # Inputs
    def type_search(self, text: str) -> None:
        """Record a keystroke; the query runs once typing pauses."""
        with self._lock:
            self.search_input = text
        self._debouncer.call(text)

    def clear_search(self) -> None:
        self.type_search("")

    def select_category(self, category: str | None) -> None:
        self._set_filters(category=category or "", page=1)

    def go_to_page(self, page: int) -> None:
        self._set_filters(page=max(1, int(page)))

    def close(self) -> None:
        """Tear down: a pending debounced search never fires after this."""
        self._debouncer.cancel()

    # State
    def refresh(self) -> None:
        with self._lock:
            requested = self.filters
            params = requested.to_params()
            self.loading = True
        try:
            data = self.session.list_posts(**params)
        except ApiError as e:
            logger.warning("post_fetch_failed", status=e.status_code, error=e.message)
            with self._lock:
                if self.filters != requested:
                    return
                self.error = "Failed to load posts"
                self.loading = False
            self._notify()
            return

        with self._lock:
            # Filters moved on while this request was in flight
            if self.filters != requested:
                logger.debug("stale_post_page_dropped", params=params)
                return
            self.posts = list(data.get("posts", []))
            self.total_pages = int(data.get("totalPages", 0))
            self.current_page = int(data.get("currentPage", params["page"]))
            self.total_posts = int(data.get("totalPosts", 0))
            self.error = None
            self.loading = False
        self._notify()

    def _apply_search(self, text: str) -> None:
        self._set_filters(search=text.strip(), page=1)

    def _set_filters(self, **changes: Any) -> None:
        with self._lock:
            updated = replace(self.filters, **changes)
            if updated == self.filters:
                return
            self.filters = updated
        self.refresh()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
