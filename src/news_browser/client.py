"""HTTP client for the NewsAPI provider and its error taxonomy."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import Settings
from .models import ResponseEnvelope
from .query import redact_url
from .schema import validate_envelope

logger = logging.getLogger(__name__)

DEFAULT_API_ERROR = "Failed to fetch news"


class NewsFetchError(Exception):
    """Base class for every failure of a single provider request."""


class NetworkFailure(NewsFetchError):
    """The request never produced an HTTP response."""


class ApiError(NewsFetchError):
    """The provider answered, but not with a successful envelope."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class MalformedResponse(NewsFetchError):
    """A 2xx response whose body is not a usable envelope."""


class NewsApiClient:
    """Issues one GET per call and returns the parsed envelope."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def fetch(self, url: str) -> ResponseEnvelope:
        logger.debug("Fetching %s", redact_url(url))
        try:
            resp = self.session.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as exc:
            raise NetworkFailure(f"Request to news provider failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            if not resp.ok:
                raise ApiError(
                    f"HTTP {resp.status_code} from news provider",
                    status_code=resp.status_code,
                ) from exc
            raise MalformedResponse("Response body is not valid JSON.") from exc

        try:
            validate_envelope(data)
        except ValueError as exc:
            raise MalformedResponse(str(exc)) from exc

        envelope = ResponseEnvelope.from_payload(data)
        if not envelope.ok:
            raise ApiError(
                envelope.message or DEFAULT_API_ERROR,
                code=envelope.code,
                status_code=resp.status_code,
            )
        if not resp.ok:
            raise ApiError(
                f"HTTP {resp.status_code} from news provider",
                status_code=resp.status_code,
            )
        return envelope
