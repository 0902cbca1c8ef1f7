"""FastAPI application backing the SimpleSearch web UI."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, List, Sequence

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simplesearch.config import AppConfig
from simplesearch.exceptions import DocumentReadError, VaultNotFoundError
from simplesearch.models import Document, MatchRecord
from simplesearch.search.scanner import CancellationToken, Scanner
from simplesearch.search.session import ResultSink, SearchSession
from simplesearch.search.snippet import build_snippet
from simplesearch.utils.files import is_within
from simplesearch.vault import FileVault
from simplesearch.web.frontend import LIVE_SEARCH_PATH, router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="SimpleSearch Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)


class SearchPayload(BaseModel):
    query: str
    vault: Path | None = None


class OpenRequest(BaseModel):
    path: str
    vault: Path | None = None


def _resolve_vault_path(vault: Path | None) -> Path:
    if vault is None:
        vault = getattr(app.state, "vault_path", None)
    config = AppConfig(vault_path=vault if vault is not None else AppConfig().vault_path)
    return config.resolve_vault_path(Path.cwd())


def _extensions() -> Sequence[str]:
    return getattr(app.state, "extensions", None) or AppConfig().extensions


def _open_vault(vault: Path | None) -> FileVault:
    resolved = _resolve_vault_path(vault)
    try:
        return FileVault(resolved, extensions=_extensions())
    except VaultNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _serialize_record(record: MatchRecord) -> dict[str, Any]:
    return {
        "name": record.document.name,
        "path": record.document.path,
        "title": build_snippet(record.document.path, record.query).to_html(),
        "lines": [snippet.to_html() for snippet in record.matching_lines],
    }


class WebSocketSink(ResultSink):
    """Queues session events for delivery over a WebSocket."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def on_match(self, record: MatchRecord) -> None:
        self.queue.put_nowait({"type": "match", **_serialize_record(record)})

    def on_search_started(self) -> None:
        self.queue.put_nowait({"type": "started"})

    def on_search_empty(self) -> None:
        self.queue.put_nowait({"type": "empty"})

    def on_search_cleared(self) -> None:
        self.queue.put_nowait({"type": "cleared"})

    def on_notice(self, message: str) -> None:
        self.queue.put_nowait({"type": "notice", "message": message})

    def on_search_failed(self, error: Exception) -> None:
        self.queue.put_nowait({"type": "failed", "message": str(error)})


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
async def search_documents(payload: SearchPayload) -> dict[str, Any]:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Empty query")

    file_vault = _open_vault(payload.vault)
    config = AppConfig()
    scanner = Scanner(file_vault.read_content, context=config.context_chars)

    results: List[dict[str, Any]] = []
    skipped: List[str] = []

    def on_skip(document: Document, error: DocumentReadError) -> None:
        skipped.append(document.path)

    await scanner.scan(
        file_vault.enumerate_documents(),
        query,
        lambda record: results.append(_serialize_record(record)),
        CancellationToken(),
        on_skip=on_skip,
    )
    return {"results": results, "skipped": skipped}


@app.get("/documents")
async def list_documents(vault: Path | None = None) -> dict[str, Any]:
    """List the documents in the vault."""
    file_vault = _open_vault(vault)
    documents = file_vault.enumerate_documents()
    return {
        "documents": [{"name": doc.name, "path": doc.path} for doc in documents],
        "count": len(documents),
    }


@app.post("/open")
async def open_document(payload: OpenRequest) -> dict[str, str]:
    file_vault = _open_vault(payload.vault)
    candidate = file_vault.root / payload.path
    if not is_within(candidate, file_vault.root):
        raise HTTPException(status_code=403, detail="Access denied: path is outside the vault")
    document = file_vault.get_document(payload.path)
    if document is None:
        raise HTTPException(status_code=404, detail=f"File not found: {payload.path}")

    path = document.location or candidate
    try:
        if os.name == "posix":  # macOS/Linux
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.Popen([opener, str(path)])
        else:
            os.startfile(path)  # type: ignore[attr-defined]
    except Exception as exc:  # pragma: no cover - defensive
        LOGGER.error("Unable to open %s: %s", path, exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"status": "ok"}


async def _pump(websocket: WebSocket, sink: WebSocketSink) -> None:
    while True:
        message = await sink.queue.get()
        await websocket.send_json(message)


@app.websocket(LIVE_SEARCH_PATH)
async def live_search(websocket: WebSocket, vault: Path | None = None, q: str = "") -> None:
    """One search session per connection; each message is the current input.

    ``q`` pre-fills the session, so a reloaded page picks up where it left off.
    """
    await websocket.accept()
    try:
        file_vault = FileVault(_resolve_vault_path(vault), extensions=_extensions())
    except VaultNotFoundError as exc:
        await websocket.send_json({"type": "failed", "message": str(exc)})
        await websocket.close(code=1008)
        return

    config = AppConfig()
    sink = WebSocketSink()
    session = SearchSession(
        file_vault,
        sink,
        debounce=config.debounce_seconds,
        context=config.context_chars,
    )
    sender = asyncio.create_task(_pump(websocket, sink))
    try:
        session.open(q)
        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
            except ValueError:
                LOGGER.debug("Ignoring malformed live search message: %r", text)
                sink.on_notice("Ignored a malformed message")
                continue
            query = data.get("query") if isinstance(data, dict) else None
            session.input_changed(query if isinstance(query, str) else "")
    except WebSocketDisconnect:
        LOGGER.debug("Live search client disconnected")
    finally:
        await session.aclose()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
