"""Single-page HTML frontend for the live search UI."""

from __future__ import annotations

from functools import lru_cache
from importlib.resources import files

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

LIVE_SEARCH_PATH = "/ws/search"

router = APIRouter()


@lru_cache(maxsize=1)
def _load_template() -> str:
    template = files("simplesearch.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def render_index() -> str:
    """Fill in the WebSocket endpoint the page connects to."""
    return _load_template().replace("{{ live_search_path }}", LIVE_SEARCH_PATH)


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(content=render_index())
