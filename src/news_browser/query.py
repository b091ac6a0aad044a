"""Build provider request URLs from the current session state."""

from __future__ import annotations

import re
from typing import Dict, Tuple
from urllib.parse import urlencode

from .config import Settings
from .models import SessionState

SEARCH_ENDPOINT = "everything"
HEADLINES_ENDPOINT = "top-headlines"

_API_KEY_PATTERN = re.compile(r"(apiKey=)[^&]*")


def build_request_params(
    state: SessionState, settings: Settings
) -> Tuple[str, Dict[str, str | int]]:
    """Return the endpoint name and query parameters for `state`, without the key."""
    if state.search_query:
        return SEARCH_ENDPOINT, {
            "q": state.search_query,
            "page": state.page,
            "pageSize": state.page_size,
        }
    return HEADLINES_ENDPOINT, {
        "country": settings.country,
        "category": state.active_category,
        "page": state.page,
        "pageSize": state.page_size,
    }


def build_request_url(state: SessionState, settings: Settings) -> str:
    endpoint, params = build_request_params(state, settings)
    if settings.news_api_key:
        params = {**params, "apiKey": settings.news_api_key}
    base = settings.news_api_base_url.rstrip("/")
    return f"{base}/{endpoint}?{urlencode(params)}"


def redact_url(url: str) -> str:
    """Mask the API key so the URL can be logged."""
    return _API_KEY_PATTERN.sub(r"\1***", url)
