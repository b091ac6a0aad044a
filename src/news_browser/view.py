"""Render layer: article cards, loader, error banner and the page shell."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from html import escape
from pathlib import Path
from string import Template
from typing import Any, Dict, Iterable, List, Optional

from .models import CATEGORIES, Article

PLACEHOLDER_TEXT = "Image not available"
UNKNOWN_DATE = "Unknown date"


def format_published(value: Optional[datetime]) -> str:
    """Long US form, e.g. 'October 18, 2026'."""
    if value is None:
        return UNKNOWN_DATE
    return f"{value:%B} {value.day}, {value.year}"


def _placeholder_html() -> str:
    return f'<div class="news-image placeholder">{PLACEHOLDER_TEXT}</div>'


@dataclass
class Card:
    """Display unit for one article."""

    index: int
    article: Article
    image_failed: bool = False

    @property
    def shows_image(self) -> bool:
        return bool(self.article.image_url) and not self.image_failed

    def to_html(self) -> str:
        a = self.article
        if self.shows_image:
            # The inline swap keeps the card usable before the server hears about it.
            media = (
                f'<img src="{escape(a.image_url)}" alt="{escape(a.title)}" '
                f'class="news-image" data-index="{self.index}" '
                "onerror=\"this.onerror=null; reportImageError(this.dataset.index); "
                f"this.outerHTML='{escape(_placeholder_html())}';\">"
            )
        else:
            media = _placeholder_html()
        return (
            f'<div class="news-card" data-index="{self.index}">'
            f"{media}"
            '<div class="news-content">'
            f'<div class="news-source">{escape(a.source_name)}</div>'
            f'<h3 class="news-title">{escape(a.title)}</h3>'
            f'<p class="news-description">{escape(a.description)}</p>'
            f'<div class="news-date">{escape(format_published(a.published_at))}</div>'
            f'<a href="{escape(a.url)}" class="read-more" target="_blank" '
            'rel="noopener noreferrer">Read More</a>'
            "</div></div>"
        )

    def to_dict(self) -> Dict[str, Any]:
        a = self.article
        return {
            "index": self.index,
            "source": a.source_name,
            "title": a.title,
            "description": a.description,
            "image_url": a.image_url if self.shows_image else None,
            "url": a.url,
            "published": format_published(a.published_at),
        }


class NewsView:
    """
    Everything the user sees.

    Cards are only ever appended by render() or dropped wholesale by clear();
    the loader and error banner are simple visibility flags.
    """

    def __init__(self, categories: Iterable[str] = CATEGORIES):
        self.categories = tuple(categories)
        self.cards: List[Card] = []
        self.loader_visible = False
        self.error_message: Optional[str] = None
        self.active_category = ""

    def show_loader(self) -> None:
        self.loader_visible = True

    def hide_loader(self) -> None:
        self.loader_visible = False

    def show_error(self, message: str) -> None:
        self.error_message = message

    def hide_error(self) -> None:
        self.error_message = None

    def clear(self) -> None:
        self.cards = []

    def render(self, articles: Iterable[Article]) -> None:
        for article in articles:
            self.cards.append(Card(index=len(self.cards), article=article))

    def mark_image_failed(self, index: int) -> bool:
        """Swap a card's image for the placeholder; repeated calls change nothing."""
        if index < 0 or index >= len(self.cards):
            return False
        self.cards[index].image_failed = True
        return True

    def cards_html(self) -> str:
        return "\n".join(card.to_html() for card in self.cards)

    def controls_html(self) -> str:
        buttons = []
        for category in self.categories:
            css = "category-btn active" if category == self.active_category else "category-btn"
            buttons.append(
                f'<button class="{css}" data-category="{escape(category)}">'
                f"{escape(category.capitalize())}</button>"
            )
        return "\n".join(buttons)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "active_category": self.active_category,
            "loader_visible": self.loader_visible,
            "error_message": self.error_message,
            "cards": [card.to_dict() for card in self.cards],
            "cards_html": self.cards_html(),
            "controls_html": self.controls_html(),
        }

    def render_page(self, search_query: str = "", scroll_tolerance: int = 5) -> str:
        return _page_template().substitute(
            search_query=escape(search_query),
            scroll_tolerance=int(scroll_tolerance),
            controls=self.controls_html(),
            loader_class="loader" if self.loader_visible else "loader hidden",
            error_class="error-message" if self.error_message else "error-message hidden",
            error_message=escape(self.error_message or ""),
            cards=self.cards_html(),
        )


def _page_template() -> Template:
    path = Path(__file__).resolve().parent / "templates" / "index.html"
    return Template(path.read_text(encoding="utf-8"))
