"""FastAPI service that serves the news page and its event endpoints."""

from __future__ import annotations

import os
from threading import Lock
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .feed import LoadOutcome
from .session import NewsSession, build_session


app = FastAPI(title="News Browser")


def _add_cors(app: FastAPI) -> None:
    """Let pages served from other origins drive the event endpoints (CORS_* env vars)."""
    allow_all = os.getenv("CORS_ALLOW_ALL", "true").lower() == "true"
    origins_env = os.getenv("CORS_ALLOW_ORIGINS", "")
    origins = [o.strip() for o in origins_env.split(",") if o.strip()]
    allow_credentials = (
        os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"
    )
    if allow_all or not origins:
        origins = ["*"]
    if origins == ["*"] and allow_credentials:
        # A wildcard origin cannot be combined with credentialed requests.
        allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


_add_cors(app)

_SESSION: Optional[NewsSession] = None
_SESSION_GUARD = Lock()


def get_session() -> NewsSession:
    """Process-wide session, built on first use; its initial load runs once."""
    global _SESSION
    with _SESSION_GUARD:
        if _SESSION is None:
            _SESSION = build_session()
        session = _SESSION
    session.start()
    return session


class SearchRequest(BaseModel):
    query: str


class ScrollPosition(BaseModel):
    scroll_top: float
    client_height: float
    scroll_height: float


def _feed_body(session: NewsSession, outcome: Optional[LoadOutcome] = None) -> Dict[str, Any]:
    body = session.view.snapshot()
    body.update(
        {
            "category": session.state.active_category,
            "query": session.state.search_query,
            "page": session.state.page,
            "exhausted": session.feed.exhausted,
            "fetched": outcome is not None,
            "outcome": outcome.value if outcome else None,
        }
    )
    return body


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def index(session: NewsSession = Depends(get_session)) -> HTMLResponse:
    page = session.view.render_page(
        search_query=session.state.search_query,
        scroll_tolerance=session.settings.scroll_tolerance,
    )
    return HTMLResponse(page)


@app.get("/api/feed")
def feed(session: NewsSession = Depends(get_session)) -> Dict[str, Any]:
    return _feed_body(session)


@app.post("/api/category/{category}")
def select_category(
    category: str, session: NewsSession = Depends(get_session)
) -> Dict[str, Any]:
    try:
        outcome = session.select_category(category)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return _feed_body(session, outcome)


@app.post("/api/search")
def search(
    payload: SearchRequest, session: NewsSession = Depends(get_session)
) -> Dict[str, Any]:
    outcome = session.submit_search(payload.query)
    return _feed_body(session, outcome)


@app.post("/api/scroll")
def scroll(
    payload: ScrollPosition, session: NewsSession = Depends(get_session)
) -> Dict[str, Any]:
    outcome = session.scroll(
        payload.scroll_top, payload.client_height, payload.scroll_height
    )
    return _feed_body(session, outcome)


@app.post("/api/cards/{index}/image-error")
def image_error(index: int, session: NewsSession = Depends(get_session)) -> Dict[str, bool]:
    return {"replaced": session.report_image_error(index)}


def run(host: Optional[str] = None, port: Optional[int] = None, reload: Optional[bool] = None) -> None:
    import uvicorn

    uvicorn.run(
        "news_browser.server:app",
        host=host or os.getenv("NEWS_BROWSER_HOST", "127.0.0.1"),
        port=port or int(os.getenv("NEWS_BROWSER_PORT", "8000")),
        reload=(
            reload
            if reload is not None
            else os.getenv("NEWS_BROWSER_RELOAD", "false").lower() == "true"
        ),
    )


if __name__ == "__main__":
    run()
