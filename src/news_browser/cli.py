"""Command-line entry points for browsing news from a terminal."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.markup import escape

from .config import get_settings
from .feed import LoadOutcome
from .session import NewsSession, build_session
from .view import Card

app = typer.Typer(help="Browse NewsAPI headlines and search results.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_card(card: Card) -> None:
    data = card.to_dict()
    rprint(f"[bold]{escape(data['title'] or '(untitled)')}[/bold]")
    rprint(f"[dim]{escape(data['source'])} | {escape(data['published'])}[/dim]")
    rprint(escape(data["description"]))
    if data["url"]:
        rprint(f"[cyan]{escape(data['url'])}[/cyan]")
    rprint("")


def _write_output(out_path: Path, session: NewsSession) -> None:
    if out_path.suffix.lower() == ".json":
        payload = {
            "category": session.state.active_category,
            "query": session.state.search_query,
            "pages": session.state.page,
            "cards": [card.to_dict() for card in session.view.cards],
        }
        out_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    else:
        out_path.write_text(
            session.view.render_page(search_query=session.state.search_query),
            encoding="utf-8",
        )


def _load_pages(session: NewsSession, first: LoadOutcome, pages: int) -> None:
    """Keep appending pages until `pages` are loaded or the feed runs dry."""
    outcome = first
    while (
        outcome is LoadOutcome.RENDERED
        and session.state.page < pages
        and not session.feed.exhausted
    ):
        session.state = session.state.next_page()
        outcome = session.feed.load_news(session.state, append=True)


def _finish(session: NewsSession, out: Optional[Path]) -> None:
    for card in session.view.cards:
        _print_card(card)

    if session.view.error_message:
        rprint(f"[red]{escape(session.view.error_message)}[/red]")
        raise typer.Exit(code=1)

    rprint(f"[green]{len(session.view.cards)} articles loaded.[/green]")
    if out:
        _write_output(out, session)
        rprint(f"[cyan]Wrote output to {out}[/cyan]")


def _check_pages(pages: int) -> None:
    if pages < 1:
        raise typer.BadParameter("pages must be >= 1.")


@app.callback()
def main_options(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level for diagnostics."
    ),
):
    _configure_logging(log_level)


@app.command("headlines")
def headlines_command(
    category: Optional[str] = typer.Option(
        None,
        "--category",
        "-c",
        help="Category to browse; defaults to the configured default category.",
    ),
    pages: int = typer.Option(1, "--pages", "-p", help="Number of pages to load."),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to write output (.json for data, anything else for HTML).",
    ),
):
    """Show top headlines for one category."""
    _check_pages(pages)
    session = build_session(get_settings())
    try:
        first = session.select_category(category or session.settings.default_category)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _load_pages(session, first, pages)
    _finish(session, out)


@app.command("search")
def search_command(
    query: str = typer.Argument(..., help="Keywords to search for."),
    pages: int = typer.Option(1, "--pages", "-p", help="Number of pages to load."),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Optional path to write output (.json for data, anything else for HTML).",
    ),
):
    """Search all sources for matching articles."""
    _check_pages(pages)
    session = build_session(get_settings())
    first = session.submit_search(query)
    if first is None:
        raise typer.BadParameter("query must not be blank.")
    _load_pages(session, first, pages)
    _finish(session, out)


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
):
    """Run the web UI."""
    from .server import run

    run(host=host, port=port, reload=reload or None)


def main():
    app()


if __name__ == "__main__":
    main()
