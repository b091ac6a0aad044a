import json

from typer.testing import CliRunner

from news_browser import cli
from news_browser.client import NetworkFailure
from news_browser.config import Settings
from news_browser.feed import NewsFeed
from news_browser.models import Article, ResponseEnvelope
from news_browser.session import NewsSession
from news_browser.view import NewsView

runner = CliRunner()


class _QueueClient:
    def __init__(self, *results):
        self.results = list(results)
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _page(*titles):
    return ResponseEnvelope(
        status="ok", articles=[Article(title=t, source_name="AP") for t in titles]
    )


def _patch_session(monkeypatch, *results):
    fetcher = _QueueClient(*results)

    def fake_build_session(settings=None):
        settings = Settings(_env_file=None, NEWS_API_KEY="k", page_size=2)
        view = NewsView()
        return NewsSession(NewsFeed(fetcher, view, settings), view, settings)

    monkeypatch.setattr(cli, "build_session", fake_build_session)
    return fetcher


def test_headlines_prints_cards(monkeypatch):
    fetcher = _patch_session(monkeypatch, _page("Alpha", "Beta"))
    result = runner.invoke(cli.app, ["headlines", "--category", "sports"])
    assert result.exit_code == 0, result.output
    assert "Alpha" in result.output
    assert "2 articles loaded" in result.output
    assert "category=sports" in fetcher.urls[0]


def test_headlines_loads_multiple_pages_until_exhausted(monkeypatch):
    fetcher = _patch_session(monkeypatch, _page("A", "B"), _page("C"))
    result = runner.invoke(cli.app, ["headlines", "--pages", "5"])
    assert result.exit_code == 0, result.output
    assert len(fetcher.urls) == 2
    assert "page=2" in fetcher.urls[1]
    assert "3 articles loaded" in result.output


def test_headlines_rejects_unknown_category(monkeypatch):
    _patch_session(monkeypatch)
    result = runner.invoke(cli.app, ["headlines", "--category", "weather"])
    assert result.exit_code != 0


def test_search_writes_json_output(monkeypatch, tmp_path):
    _patch_session(monkeypatch, _page("[cats] rule", "Dogs drool"))
    out = tmp_path / "cards.json"
    result = runner.invoke(cli.app, ["search", "cats", "--out", str(out)])
    assert result.exit_code == 0, result.output
    written = json.loads(out.read_text(encoding="utf-8"))
    assert written["query"] == "cats"
    assert written["category"] == ""
    assert [c["title"] for c in written["cards"]] == ["[cats] rule", "Dogs drool"]


def test_search_writes_html_output(monkeypatch, tmp_path):
    _patch_session(monkeypatch, _page("A", "B"))
    out = tmp_path / "cards.html"
    result = runner.invoke(cli.app, ["search", "cats", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert 'class="news-card"' in out.read_text(encoding="utf-8")


def test_blank_search_is_rejected(monkeypatch):
    fetcher = _patch_session(monkeypatch)
    result = runner.invoke(cli.app, ["search", "   "])
    assert result.exit_code != 0
    assert fetcher.urls == []


def test_fetch_failure_exits_nonzero(monkeypatch):
    _patch_session(monkeypatch, NetworkFailure("down"))
    result = runner.invoke(cli.app, ["search", "cats"])
    assert result.exit_code == 1
    assert "Error fetching news" in result.output
