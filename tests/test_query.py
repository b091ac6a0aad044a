from urllib.parse import parse_qs, urlparse

import pytest

from news_browser.config import Settings
from news_browser.models import SessionState
from news_browser.query import build_request_params, build_request_url, redact_url


def make_settings(**overrides) -> Settings:
    values = {"NEWS_API_KEY": "secret-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _query(url: str) -> dict:
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


def test_category_state_targets_headlines():
    url = build_request_url(SessionState(active_category="sports", page=2), make_settings())
    parsed = urlparse(url)
    assert parsed.path == "/v2/top-headlines"
    assert _query(url) == {
        "country": "us",
        "category": "sports",
        "page": "2",
        "pageSize": "12",
        "apiKey": "secret-key",
    }


def test_search_state_targets_everything_and_drops_category():
    state = SessionState(active_category="", search_query="cats")
    url = build_request_url(state, make_settings())
    assert urlparse(url).path == "/v2/everything"
    params = _query(url)
    assert params["q"] == "cats"
    assert "category" not in params
    assert "country" not in params


@pytest.mark.parametrize(
    "state",
    [
        SessionState(),
        SessionState(active_category="", search_query="x"),
        SessionState(active_category="", search_query=""),
        SessionState(active_category="health", page=9),
    ],
)
def test_exactly_one_of_query_or_category(state):
    endpoint, params = build_request_params(state, make_settings())
    assert ("q" in params) != ("category" in params)
    assert ("q" in params) == (endpoint == "everything")


def test_user_text_is_percent_encoded():
    state = SessionState(active_category="", search_query="cats & dogs?page=99")
    url = build_request_url(state, make_settings())
    assert "cats+%26+dogs%3Fpage%3D99" in url
    assert _query(url)["q"] == "cats & dogs?page=99"
    assert _query(url)["page"] == "1"


def test_missing_key_is_not_sent():
    settings = Settings(_env_file=None, NEWS_API_KEY=None)
    assert "apiKey" not in build_request_url(SessionState(), settings)


def test_base_url_and_country_come_from_settings():
    settings = make_settings(NEWS_API_BASE_URL="http://localhost:9000/v2/", country="gb")
    url = build_request_url(SessionState(), settings)
    assert url.startswith("http://localhost:9000/v2/top-headlines?")
    assert _query(url)["country"] == "gb"


def test_redact_url_masks_key():
    url = build_request_url(SessionState(), make_settings())
    redacted = redact_url(url)
    assert "secret-key" not in redacted
    assert "apiKey=***" in redacted
