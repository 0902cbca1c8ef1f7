"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def is_document(path: Path, root: Path, extensions: Iterable[str]) -> bool:
    """Check that ``path`` is a visible file under ``root`` with one of ``extensions``."""
    suffixes = {ext.lower() for ext in extensions}
    return path.is_file() and path.suffix.lower() in suffixes and not _is_hidden(path, root)


def iter_document_paths(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield files under ``root`` with one of ``extensions``, skipping hidden entries."""
    extensions = tuple(extensions)
    for item in sorted(root.rglob("*")):
        if is_document(item, root, extensions):
            yield item


def is_within(path: Path, root: Path) -> bool:
    """Check that ``path`` resolves to a location inside ``root``."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True
