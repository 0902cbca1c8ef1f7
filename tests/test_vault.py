"""Tests for the filesystem document source."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from simplesearch.exceptions import DocumentReadError, VaultNotFoundError
from simplesearch.models import Document
from simplesearch.vault import FileVault


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    (tmp_path / "Shopping List.md").write_text("eggs\nmilk", encoding="utf-8")
    projects = tmp_path / "projects"
    projects.mkdir()
    (projects / "plan.md").write_text("The cat sat", encoding="utf-8")
    (projects / "image.png").write_bytes(b"\x89PNG")
    hidden = tmp_path / ".obsidian"
    hidden.mkdir()
    (hidden / "workspace.md").write_text("internal", encoding="utf-8")
    return tmp_path


class TestFileVault:
    """Test FileVault class."""

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        """Should refuse a vault directory that does not exist."""
        with pytest.raises(VaultNotFoundError) as excinfo:
            FileVault(tmp_path / "missing")
        assert "Vault not found" in str(excinfo.value)

    def test_enumerate_documents(self, vault_dir: Path) -> None:
        """Should list markdown notes with vault-relative paths."""
        documents = FileVault(vault_dir).enumerate_documents()

        paths = {doc.path for doc in documents}
        assert paths == {"Shopping List.md", "projects/plan.md"}
        names = {doc.name for doc in documents}
        assert names == {"Shopping List.md", "plan.md"}

    def test_enumerate_custom_extensions(self, vault_dir: Path) -> None:
        """Should honour the configured extensions."""
        (vault_dir / "notes.txt").write_text("text", encoding="utf-8")
        documents = FileVault(vault_dir, extensions=(".txt",)).enumerate_documents()

        assert [doc.path for doc in documents] == ["notes.txt"]

    def test_read_content(self, vault_dir: Path) -> None:
        """Should read a document's text."""
        vault = FileVault(vault_dir)
        document = next(doc for doc in vault.enumerate_documents() if doc.name == "plan.md")

        assert asyncio.run(vault.read_content(document)) == "The cat sat"

    def test_read_missing_file_raises_read_error(self, vault_dir: Path) -> None:
        """A vanished file is reported as unreadable."""
        vault = FileVault(vault_dir)
        document = Document(name="gone.md", path="gone.md", location=vault_dir / "gone.md")

        with pytest.raises(DocumentReadError) as excinfo:
            asyncio.run(vault.read_content(document))
        assert excinfo.value.document is document

    def test_read_invalid_utf8_raises_read_error(self, vault_dir: Path) -> None:
        """Undecodable content is reported as unreadable."""
        bad = vault_dir / "bad.md"
        bad.write_bytes(b"\xff\xfe\xfa")
        vault = FileVault(vault_dir)
        document = Document(name="bad.md", path="bad.md", location=bad)

        with pytest.raises(DocumentReadError):
            asyncio.run(vault.read_content(document))

    def test_read_os_error_raises_read_error(self, vault_dir: Path) -> None:
        """OS-level failures are wrapped."""
        vault = FileVault(vault_dir)
        document = vault.enumerate_documents()[0]

        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(DocumentReadError) as excinfo:
                asyncio.run(vault.read_content(document))
        assert "denied" in excinfo.value.reason

    def test_get_document(self, vault_dir: Path) -> None:
        """Should resolve a relative path inside the vault."""
        document = FileVault(vault_dir).get_document("projects/plan.md")

        assert document is not None
        assert document.name == "plan.md"
        assert document.location == vault_dir / "projects" / "plan.md"

    def test_get_document_outside_vault(self, vault_dir: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
        """Should refuse paths escaping the vault."""
        outside = tmp_path_factory.mktemp("outside") / "secret.md"
        outside.write_text("secret", encoding="utf-8")

        vault = FileVault(vault_dir)
        assert vault.get_document(f"../{outside.parent.name}/secret.md") is None

    def test_get_document_missing(self, vault_dir: Path) -> None:
        """Unknown paths return None."""
        assert FileVault(vault_dir).get_document("nope.md") is None

    def test_get_document_hidden(self, vault_dir: Path) -> None:
        """Files under hidden folders are not documents."""
        (vault_dir / ".obsidian" / "run.sh").write_text("echo hi", encoding="utf-8")

        vault = FileVault(vault_dir)
        assert vault.get_document(".obsidian/workspace.md") is None
        assert vault.get_document(".obsidian/run.sh") is None

    def test_get_document_other_extension(self, vault_dir: Path) -> None:
        """Files outside the configured extensions are not documents."""
        assert FileVault(vault_dir).get_document("projects/image.png") is None
        assert FileVault(vault_dir, extensions=(".png",)).get_document("projects/image.png") is not None
