"""Exception hierarchy for SimpleSearch.

Document sources raise these so the scanner can tell a recoverable,
per-document failure apart from a fault that should abort a search pass.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simplesearch.models import Document


class SimpleSearchError(Exception):
    """Base class for all SimpleSearch exceptions."""


class ConfigError(SimpleSearchError):
    """Raised when configuration values are invalid."""


class VaultNotFoundError(SimpleSearchError):
    """Raised when the vault directory does not exist."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Vault not found: {root}")
        self.root = root


class DocumentReadError(SimpleSearchError):
    """Raised when a single document's content cannot be read."""

    def __init__(self, document: "Document", reason: str) -> None:
        super().__init__(f"Unable to read {document.path}: {reason}")
        self.document = document
        self.reason = reason
