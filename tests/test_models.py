from datetime import timezone

import pytest

from news_browser.models import (
    NO_DESCRIPTION,
    UNKNOWN_SOURCE,
    Article,
    ResponseEnvelope,
    SessionState,
    parse_published_at,
)


def test_article_from_provider_maps_fields():
    article = Article.from_provider(
        {
            "source": {"id": None, "name": "Reuters"},
            "title": "Markets rally",
            "description": "Stocks rose.",
            "url": "https://example.com/a",
            "urlToImage": "https://example.com/a.jpg",
            "publishedAt": "2026-10-18T09:30:00Z",
        }
    )
    assert article.source_name == "Reuters"
    assert article.image_url == "https://example.com/a.jpg"
    assert article.published_at.tzinfo == timezone.utc
    assert article.published_at.day == 18


def test_article_defaults_for_missing_or_null_fields():
    article = Article.from_provider(
        {"source": None, "title": None, "description": "   ", "urlToImage": ""}
    )
    assert article.source_name == UNKNOWN_SOURCE
    assert article.title == ""
    assert article.description == NO_DESCRIPTION
    assert article.image_url is None
    assert article.url == ""
    assert article.published_at is None


def test_unreadable_published_at_degrades_to_none():
    assert parse_published_at("not-a-date") is None
    assert parse_published_at("2026-10-18T09:30:00+0000").utcoffset().total_seconds() == 0


def test_envelope_skips_non_object_articles():
    envelope = ResponseEnvelope.from_payload(
        {
            "status": "ok",
            "totalResults": 2,
            "articles": [{"title": "One"}, "garbage", None, {"title": "Two"}],
        }
    )
    assert [a.title for a in envelope.articles] == ["One", "Two"]
    assert envelope.total_results == 2
    assert envelope.ok


def test_envelope_without_articles_is_empty():
    envelope = ResponseEnvelope.from_payload({"status": "ok", "articles": None})
    assert envelope.articles == []
    assert envelope.total_results is None


def test_session_state_transitions_keep_modes_exclusive():
    state = SessionState().with_category("sports").next_page()
    assert (state.active_category, state.search_query, state.page) == ("sports", "", 2)

    searched = state.with_search("cats")
    assert (searched.active_category, searched.search_query, searched.page) == ("", "cats", 1)
    # The previous state is untouched.
    assert state.page == 2


def test_session_state_rejects_invalid_combinations():
    with pytest.raises(ValueError):
        SessionState(page=0)
    with pytest.raises(ValueError):
        SessionState(active_category="sports", search_query="cats")


def test_wrongly_typed_fields_fall_back_to_defaults():
    article = Article.from_provider(
        {
            "source": {"name": 42},
            "title": ["x"],
            "description": 123,
            "url": {"href": "https://example.com"},
            "urlToImage": {},
            "publishedAt": 1760000000,
        }
    )
    assert article.source_name == UNKNOWN_SOURCE
    assert article.title == ""
    assert article.description == NO_DESCRIPTION
    assert article.url == ""
    assert article.image_url is None
    assert article.published_at is None


def test_envelope_ignores_non_integer_total():
    assert ResponseEnvelope.from_payload({"status": "ok", "totalResults": "1"}).total_results is None
    assert ResponseEnvelope.from_payload({"status": "ok", "totalResults": True}).total_results is None
