"""Interactive search session: debounced input, superseding scans.

A session turns a stream of input changes into search passes. Each change
restarts a debounce timer; when it fires, any running pass is cancelled and
a new one starts with its own cancellation token. Results are pushed to a
``ResultSink`` as they are found, and results from a superseded pass are
dropped by checking that pass's token.

All methods must be called from the thread running the session's event loop.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Coroutine, Optional, Set

from simplesearch.exceptions import DocumentReadError
from simplesearch.models import Document, MatchRecord
from simplesearch.search.scanner import CancellationToken, Scanner
from simplesearch.search.snippet import DEFAULT_CONTEXT
from simplesearch.vault import DocumentSource

LOGGER = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.2


class SessionState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SCANNING = "scanning"
    DISPLAYING = "displaying"
    EMPTY = "empty"
    FAILED = "failed"
    CLOSED = "closed"


class ResultSink:
    """Receives search progress. Subclasses override what they display."""

    def on_match(self, record: MatchRecord) -> None:
        pass

    def on_search_started(self) -> None:
        pass

    def on_search_empty(self) -> None:
        pass

    def on_search_cleared(self) -> None:
        pass

    def on_notice(self, message: str) -> None:
        pass

    def on_search_failed(self, error: Exception) -> None:
        pass


class SearchSession:
    """Owns the lifecycle of one interactive search."""

    def __init__(
        self,
        source: DocumentSource,
        sink: ResultSink,
        *,
        debounce: float = DEFAULT_DEBOUNCE,
        context: int = DEFAULT_CONTEXT,
    ) -> None:
        self.source = source
        self.sink = sink
        self.debounce = debounce
        self.scanner = Scanner(source.read_content, context=context)
        self.state = SessionState.IDLE
        self._query = ""
        self._timer: Optional[asyncio.Task] = None
        self._token: Optional[CancellationToken] = None
        self._tasks: Set[asyncio.Task] = set()

    async def __aenter__(self) -> "SearchSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def open(self, initial_query: str = "") -> None:
        """Show the prompt, or start searching for a pre-filled query."""
        if initial_query.strip():
            self.input_changed(initial_query)
        else:
            self.sink.on_search_cleared()

    def input_changed(self, text: str) -> None:
        if self.state is SessionState.CLOSED:
            return
        self._cancel_timer()

        query = text.strip()
        if not query:
            self._cancel_scan()
            self._query = ""
            self.state = SessionState.IDLE
            self.sink.on_search_cleared()
            return

        self._query = query
        self.state = SessionState.DEBOUNCING
        self._timer = self._spawn(self._debounce())

    def close(self) -> None:
        """Cancel the timer and any running pass. Safe to call repeatedly."""
        if self.state is SessionState.CLOSED:
            return
        self._cancel_timer()
        self._cancel_scan()
        for task in list(self._tasks):
            task.cancel()
        self.state = SessionState.CLOSED

    async def aclose(self) -> None:
        pending = list(self._tasks)
        self.close()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def wait(self) -> None:
        """Wait until no timer is pending and no pass is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _cancel_scan(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce)
        self._timer = None
        self._start_scan()

    def _start_scan(self) -> None:
        query = self._query
        if not query:
            return
        self._cancel_scan()
        token = CancellationToken()
        self._token = token
        self.state = SessionState.SCANNING
        LOGGER.debug("Starting search for %r", query)
        self.sink.on_search_started()
        self._spawn(self._run_scan(query, token))

    async def _run_scan(self, query: str, token: CancellationToken) -> None:
        found = False

        def deliver(record: MatchRecord) -> None:
            nonlocal found
            if token.cancelled:
                return
            found = True
            self.sink.on_match(record)

        def notice(document: Document, error: DocumentReadError) -> None:
            if not token.cancelled:
                self.sink.on_notice(str(error))

        try:
            documents = self.source.enumerate_documents()
            await self.scanner.scan(documents, query, deliver, token, on_skip=notice)
        except Exception as exc:
            if token.cancelled:
                LOGGER.debug("Superseded search for %r failed: %s", query, exc)
                return
            LOGGER.exception("Search for %r failed", query)
            if self.state is SessionState.SCANNING:
                self.state = SessionState.FAILED
                self.sink.on_search_failed(exc)
            return

        if token.cancelled:
            LOGGER.debug("Search for %r was superseded", query)
            return
        if found:
            if self.state is SessionState.SCANNING:
                self.state = SessionState.DISPLAYING
            return
        # Only the pass that still owns the display reports an empty result.
        if self.state is SessionState.SCANNING:
            self.state = SessionState.EMPTY
            self.sink.on_search_empty()
