"""Fetch orchestration: one provider request per load, rendered into the view.

load_news is the single boundary where provider failures stop. Each call takes
a fresh request token; a response whose token is no longer the latest is
dropped so an older, slower request can never overwrite a newer one.
"""

from __future__ import annotations

import enum
import logging
from threading import Lock
from typing import Optional, Protocol

from .client import NewsFetchError
from .config import Settings
from .models import ResponseEnvelope, SessionState
from .query import build_request_url, redact_url
from .view import NewsView

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No news found. Try another search or category."
GENERIC_ERROR_MESSAGE = (
    "Error fetching news. Please check your API key or try again later."
)


class LoadOutcome(str, enum.Enum):
    RENDERED = "rendered"
    EMPTY = "empty"
    FAILED = "failed"
    STALE = "stale"


class EnvelopeFetcher(Protocol):
    def fetch(self, url: str) -> ResponseEnvelope: ...


class NewsFeed:
    """Runs load_news against a provider client and a view."""

    def __init__(self, client: EnvelopeFetcher, view: NewsView, settings: Settings):
        self.client = client
        self.view = view
        self.settings = settings
        self.exhausted = False
        self._rendered_for_query = 0
        self._latest_token = 0
        self._query: Optional[tuple[str, str]] = None
        self._lock = Lock()

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def _is_latest(self, token: int) -> bool:
        return token == self._latest_token

    def load_news(self, state: SessionState, *, append: bool = False) -> LoadOutcome:
        query = (state.active_category, state.search_query)
        with self._lock:
            if append and self._query is not None and query != self._query:
                # A newer query replaced the cards; this page belongs to the old one.
                logger.info("Discarding page %d of a superseded query", state.page)
                return LoadOutcome.STALE
            self._latest_token += 1
            token = self._latest_token
            self.view.show_loader()
            self.view.hide_error()
            if not append:
                self._query = query
                self.view.clear()
                self.exhausted = False
                self._rendered_for_query = 0

        try:
            url = build_request_url(state, self.settings)
            envelope = self.client.fetch(url)
            with self._lock:
                if not self._is_latest(token):
                    logger.info("Discarding stale response for %s", redact_url(url))
                    return LoadOutcome.STALE
                if not envelope.articles:
                    if not append:
                        self.view.show_error(NO_RESULTS_MESSAGE)
                    self.exhausted = True
                    return LoadOutcome.EMPTY
                self.view.render(envelope.articles)
                self._rendered_for_query += len(envelope.articles)
                self.exhausted = self._is_exhausted(state, envelope)
                return LoadOutcome.RENDERED
        except NewsFetchError as exc:
            return self._fail(token, exc)
        except Exception as exc:
            logger.exception("Unexpected error while loading news")
            return self._fail(token, exc, logged=True)
        finally:
            with self._lock:
                if self._is_latest(token):
                    self.view.hide_loader()

    def _is_exhausted(self, state: SessionState, envelope: ResponseEnvelope) -> bool:
        if len(envelope.articles) < state.page_size:
            return True
        total: Optional[int] = envelope.total_results
        return total is not None and self._rendered_for_query >= total

    def _fail(self, token: int, exc: Exception, *, logged: bool = False) -> LoadOutcome:
        with self._lock:
            if not self._is_latest(token):
                logger.info("Discarding failure from superseded request: %s", exc)
                return LoadOutcome.STALE
            if not logged:
                logger.warning("Error fetching news: %s", exc)
            self.view.show_error(GENERIC_ERROR_MESSAGE)
            return LoadOutcome.FAILED
