"""Core SimpleSearch data models."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List


@dataclass(frozen=True, slots=True)
class Document:
    """Handle to a document owned by a document source."""

    name: str
    path: str
    location: Path | None = None


@dataclass(frozen=True, slots=True)
class Snippet:
    """Bounded excerpt of a raw line split around the matched span."""

    before: str
    matched: str = ""
    after: str = ""
    found: bool = True

    @property
    def text(self) -> str:
        return self.before + self.matched + self.after

    def render(
        self,
        opening: str,
        closing: str,
        escape: Callable[[str], str] = lambda value: value,
    ) -> str:
        """Join the segments, wrapping the matched span in the given markers."""
        if not self.found:
            return escape(self.text)
        return escape(self.before) + opening + escape(self.matched) + closing + escape(self.after)

    def to_html(self, tag: str = "strong") -> str:
        return self.render(f"<{tag}>", f"</{tag}>", escape=lambda value: html.escape(value, quote=False))


@dataclass(slots=True)
class MatchRecord:
    """A document that matched a query, with a snippet per matching line."""

    document: Document
    matching_lines: List[Snippet] = field(default_factory=list)
    query: str = ""


@dataclass(slots=True)
class ScanStats:
    scanned: int = 0
    matched: int = 0
    skipped: int = 0
    cancelled: bool = False
    skipped_paths: list[str] = field(default_factory=list)

    def skip(self, document: Document) -> None:
        self.skipped += 1
        self.skipped_paths.append(document.path)
