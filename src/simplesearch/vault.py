"""Filesystem-backed document source."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Protocol, Sequence

from simplesearch.exceptions import DocumentReadError, VaultNotFoundError
from simplesearch.models import Document
from simplesearch.utils.files import is_document, is_within, iter_document_paths

LOGGER = logging.getLogger(__name__)


class DocumentSource(Protocol):
    """What the search engine needs from whoever owns the documents."""

    def enumerate_documents(self) -> Sequence[Document]:
        ...

    async def read_content(self, document: Document) -> str:
        ...


class FileVault:
    """A folder of text notes, enumerated recursively."""

    def __init__(self, root: Path, *, extensions: Sequence[str] = (".md",)) -> None:
        self.root = Path(root)
        self.extensions = tuple(extensions)
        if not self.root.is_dir():
            raise VaultNotFoundError(self.root)

    def enumerate_documents(self) -> List[Document]:
        documents = [
            Document(
                name=path.name,
                path=path.relative_to(self.root).as_posix(),
                location=path,
            )
            for path in iter_document_paths(self.root, self.extensions)
        ]
        LOGGER.debug("Found %d documents in %s", len(documents), self.root)
        return documents

    def get_document(self, path: str) -> Document | None:
        """Resolve a vault-relative path to a document that enumeration would yield."""
        location = self.root / path
        if not is_within(location, self.root):
            return None
        if not is_document(location, self.root, self.extensions):
            return None
        return Document(name=location.name, path=Path(path).as_posix(), location=location)

    def _read(self, document: Document) -> str:
        location = document.location or self.root / document.path
        try:
            return location.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentReadError(document, str(exc)) from exc

    async def read_content(self, document: Document) -> str:
        return await asyncio.to_thread(self._read, document)
