"""Build highlighted excerpts around the first match in a line."""

from __future__ import annotations

import logging

from simplesearch.models import Snippet
from simplesearch.utils.text import locate, normalize

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTEXT = 50


def build_snippet(raw_line: str, raw_query: str, *, context: int = DEFAULT_CONTEXT) -> Snippet:
    """Cut a window of ``context`` characters on each side of the first match.

    The match offset is found on the normalized line and applied to the raw
    line, which is only valid because normalization preserves length. The
    highlighted span is ``len(raw_query)`` raw characters long.
    """
    index = locate(normalize(raw_line), normalize(raw_query))
    if index == -1:
        LOGGER.debug("Query %r not found in line while building snippet", raw_query)
        return Snippet(before=raw_line, found=False)

    match_end = min(len(raw_line), index + len(raw_query))
    start = max(0, index - context)
    end = min(len(raw_line), match_end + context)

    return Snippet(
        before=raw_line[start:index],
        matched=raw_line[index:match_end],
        after=raw_line[match_end:end],
    )
