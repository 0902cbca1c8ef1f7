"""Sequential, cancellable scan of documents for a substring query."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from simplesearch.exceptions import DocumentReadError
from simplesearch.models import Document, MatchRecord, ScanStats, Snippet
from simplesearch.search.snippet import DEFAULT_CONTEXT, build_snippet
from simplesearch.utils.text import iter_lines, matches, normalize

LOGGER = logging.getLogger(__name__)

ReadContent = Callable[[Document], Awaitable[str]]
MatchCallback = Callable[[MatchRecord], None]
SkipCallback = Callable[[Document, DocumentReadError], None]


class CancellationToken:
    """Flag shared between a search pass and whoever may supersede it."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def find_matching_lines(
    content: str, raw_query: str, *, context: int = DEFAULT_CONTEXT
) -> List[Snippet]:
    """Return a snippet for every line of ``content`` containing the query."""
    needle = normalize(raw_query)
    return [
        build_snippet(line, raw_query, context=context)
        for line in iter_lines(content)
        if matches(line, needle)
    ]


class Scanner:
    """Runs search passes over documents supplied by a document source."""

    def __init__(self, read_content: ReadContent, *, context: int = DEFAULT_CONTEXT) -> None:
        self.read_content = read_content
        self.context = context

    async def scan(
        self,
        documents: Sequence[Document],
        raw_query: str,
        on_match: MatchCallback,
        token: CancellationToken,
        *,
        on_skip: Optional[SkipCallback] = None,
    ) -> ScanStats:
        """Scan ``documents`` in order, reporting each match as it is found.

        Cancellation is checked around every content read; a cancelled pass
        returns quietly with ``stats.cancelled`` set. Documents the source
        cannot read are skipped.
        """
        stats = ScanStats()
        needle = normalize(raw_query)
        if not needle:
            return stats

        for document in documents:
            if token.cancelled:
                stats.cancelled = True
                return stats
            try:
                content = await self.read_content(document)
            except DocumentReadError as exc:
                LOGGER.warning("Skipping %s: %s", document.path, exc.reason)
                stats.skip(document)
                if on_skip is not None:
                    on_skip(document, exc)
                continue
            if token.cancelled:
                stats.cancelled = True
                return stats

            stats.scanned += 1
            name_matches = matches(document.name, needle)
            matching_lines = find_matching_lines(content, raw_query, context=self.context)
            if name_matches or matching_lines:
                stats.matched += 1
                on_match(
                    MatchRecord(document=document, matching_lines=matching_lines, query=raw_query)
                )

        LOGGER.debug(
            "Scan for %r finished: scanned=%d matched=%d skipped=%d",
            raw_query,
            stats.scanned,
            stats.matched,
            stats.skipped,
        )
        return stats
