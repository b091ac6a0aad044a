"""User-driven state transitions wired into the fetch orchestrator."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Optional

from .client import NewsApiClient
from .config import Settings, get_settings
from .feed import LoadOutcome, NewsFeed
from .models import SessionState
from .view import NewsView

logger = logging.getLogger(__name__)


class NewsSession:
    """
    Owns the SessionState for one browsing session.

    Handlers replace the state and then ask the feed to load; the feed itself
    never touches the state.
    """

    def __init__(
        self,
        feed: NewsFeed,
        view: NewsView,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.feed = feed
        self.view = view
        self.settings = settings
        self.clock = clock
        self.state = SessionState(
            active_category=settings.default_category,
            page_size=settings.page_size,
        )
        self.started = False
        self._last_scroll_load: Optional[float] = None
        self._lock = Lock()

    def start(self) -> Optional[LoadOutcome]:
        with self._lock:
            if self.started:
                return None
            self.started = True
            state = self._enter_query(self.state)
        return self.feed.load_news(state)

    def _enter_query(self, state: SessionState) -> SessionState:
        """Adopt a new query; the caller holds the lock."""
        self.state = state
        self.view.active_category = state.active_category
        self._last_scroll_load = None
        # Claimed here so a scroll trigger racing this transition sees a load in flight.
        self.view.show_loader()
        return state

    def select_category(self, category: str) -> LoadOutcome:
        if category not in self.view.categories:
            raise ValueError(
                f"Unknown category '{category}'. Expected one of: "
                + ", ".join(self.view.categories)
            )
        with self._lock:
            self.started = True
            state = self._enter_query(self.state.with_category(category))
        return self.feed.load_news(state)

    def submit_search(self, raw_query: str) -> Optional[LoadOutcome]:
        query = (raw_query or "").strip()
        if not query:
            return None
        with self._lock:
            self.started = True
            state = self._enter_query(self.state.with_search(query))
        return self.feed.load_news(state)

    def at_bottom(self, scroll_top: float, client_height: float, scroll_height: float) -> bool:
        return scroll_top + client_height >= scroll_height - self.settings.scroll_tolerance

    def scroll(
        self, scroll_top: float, client_height: float, scroll_height: float
    ) -> Optional[LoadOutcome]:
        """Load the next page if the viewport reached the bottom and nothing blocks it."""
        if not self.at_bottom(scroll_top, client_height, scroll_height):
            return None
        with self._lock:
            if self.view.loader_visible or self.feed.exhausted:
                return None
            now = self.clock()
            if (
                self._last_scroll_load is not None
                and now - self._last_scroll_load < self.settings.scroll_debounce_seconds
            ):
                logger.debug("Scroll trigger debounced")
                return None
            self._last_scroll_load = now
            self.state = self.state.next_page()
            state = self.state
            # Claim the loader before releasing the lock so a concurrent trigger sees it.
            self.view.show_loader()
        return self.feed.load_news(state, append=True)

    def report_image_error(self, index: int) -> bool:
        return self.view.mark_image_failed(index)


def build_session(settings: Optional[Settings] = None) -> NewsSession:
    """Wire a session against the live provider."""
    settings = settings or get_settings()
    view = NewsView()
    feed = NewsFeed(NewsApiClient(settings), view, settings)
    return NewsSession(feed, view, settings)
