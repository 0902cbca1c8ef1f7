"""Text helpers for whitespace- and case-insensitive substring matching."""

from __future__ import annotations

from typing import Iterator

PLACEHOLDER = "_"


def _fold(char: str) -> str:
    if char.isspace():
        return PLACEHOLDER
    lowered = char.lower()
    # Some characters expand when lowercased (e.g. "İ"); keep offsets aligned.
    return lowered if len(lowered) == 1 else char


def normalize(text: str) -> str:
    """Return the comparison form of ``text``.

    Every character is lowercased and every whitespace character is replaced
    by ``PLACEHOLDER``, one for one, so ``len(normalize(text)) == len(text)``
    and offsets found in the normalized string are valid in the original.
    """
    return "".join(_fold(char) for char in text)


def locate(haystack_normalized: str, needle_normalized: str) -> int:
    """Return the first index of the needle in the haystack, or -1."""
    if not needle_normalized:
        return -1
    return haystack_normalized.find(needle_normalized)


def matches(haystack_raw: str, needle_normalized: str) -> bool:
    """Check whether a raw string contains an already normalized needle.

    An empty needle never matches: an empty query means "no search".
    """
    if not needle_normalized:
        return False
    return needle_normalized in normalize(haystack_raw)


def iter_lines(content: str) -> Iterator[str]:
    """Split document content on newline characters."""
    yield from content.split("\n")
