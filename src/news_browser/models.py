"""Data models for the news browser."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CATEGORIES = (
    "business",
    "entertainment",
    "general",
    "health",
    "science",
    "sports",
    "technology",
)

UNKNOWN_SOURCE = "Unknown Source"
NO_DESCRIPTION = "No description available"


def _text(value: Any) -> str:
    """Stripped string value; anything that is not a string counts as absent."""
    if isinstance(value, str):
        return value.strip()
    return ""


def parse_published_at(raw: Optional[str | datetime]) -> Optional[datetime]:
    """Parse an ISO-8601/RFC3339 timestamp; return None when it cannot be read."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str):
        return None
    txt = raw.strip()
    if not txt:
        return None

    # datetime.fromisoformat doesn't accept common RFC3339 variants such as a
    # trailing "Z" or offsets like "+0000". Normalize those before parsing.
    if txt.endswith(("Z", "z")):
        txt = f"{txt[:-1]}+00:00"
    else:
        txt = re.sub(r"([+-]\d{2})(\d{2})$", r"\1:\2", txt)

    try:
        return datetime.fromisoformat(txt)
    except ValueError:
        logger.debug("Unparseable publishedAt value: %r", raw)
        return None


class Article(BaseModel):
    """One provider article, with defaults for anything missing."""

    source_name: str = UNKNOWN_SOURCE
    title: str = ""
    description: str = NO_DESCRIPTION
    image_url: Optional[str] = None
    url: str = ""
    published_at: Optional[datetime] = Field(
        None, description="Publication timestamp; None if absent or unreadable."
    )

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> "Article":
        """
        Map the provider's article shape onto an Article.

        `source` may be missing, null, or not an object; blank strings count as
        absent so the display defaults apply.
        """
        source = payload.get("source")
        source_name = _text(source.get("name")) if isinstance(source, dict) else ""
        return cls(
            source_name=source_name or UNKNOWN_SOURCE,
            title=_text(payload.get("title")),
            description=_text(payload.get("description")) or NO_DESCRIPTION,
            image_url=_text(payload.get("urlToImage")) or None,
            url=_text(payload.get("url")),
            published_at=parse_published_at(payload.get("publishedAt")),
        )


class ResponseEnvelope(BaseModel):
    """Top-level provider response."""

    status: str
    articles: List[Article] = Field(default_factory=list)
    message: Optional[str] = None
    code: Optional[str] = None
    total_results: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ResponseEnvelope":
        articles: List[Article] = []
        for index, raw in enumerate(data.get("articles") or []):
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object article at position %d", index)
                continue
            articles.append(Article.from_provider(raw))
        total = data.get("totalResults")
        return cls(
            status=_text(data.get("status")),
            articles=articles,
            message=_text(data.get("message")) or None,
            code=_text(data.get("code")) or None,
            total_results=(
                total if isinstance(total, int) and not isinstance(total, bool) else None
            ),
        )


@dataclass(frozen=True)
class SessionState:
    """
    What the user is currently looking at.

    `active_category` and `search_query` are mutually exclusive; every
    transition returns a new state instead of mutating this one.
    """

    active_category: str = "general"
    search_query: str = ""
    page: int = 1
    page_size: int = 12

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1.")
        if self.active_category and self.search_query:
            raise ValueError("A state cannot have both a category and a search query.")

    @property
    def is_search(self) -> bool:
        return bool(self.search_query)

    def with_category(self, category: str) -> "SessionState":
        return replace(self, active_category=category, search_query="", page=1)

    def with_search(self, query: str) -> "SessionState":
        return replace(self, active_category="", search_query=query, page=1)

    def next_page(self) -> "SessionState":
        return replace(self, page=self.page + 1)
