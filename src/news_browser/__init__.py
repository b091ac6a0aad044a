"""Browse NewsAPI headlines and search results as an infinite-scroll card list."""

__all__ = ["config", "models", "feed", "session", "view"]
