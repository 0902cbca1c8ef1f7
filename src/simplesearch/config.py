"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from simplesearch.exceptions import ConfigError


def _get_default_vault_path() -> Path:
    """Get the default vault path based on the working directory."""
    # When running from a checkout, prefer a local vault/ folder if it exists
    local_vault = Path("vault")
    if local_vault.exists():
        return local_vault

    return Path.home() / "Documents" / "Vault"


@dataclass(slots=True)
class AppConfig:
    vault_path: Path | None = None
    extensions: tuple[str, ...] = (".md",)
    debounce_ms: int = 200
    context_chars: int = 50

    def __post_init__(self) -> None:
        if self.vault_path is None:
            self.vault_path = _get_default_vault_path()
        if self.debounce_ms < 0:
            raise ConfigError(f"debounce_ms must be >= 0, got {self.debounce_ms}")
        if self.context_chars < 0:
            raise ConfigError(f"context_chars must be >= 0, got {self.context_chars}")
        if not self.extensions:
            raise ConfigError("At least one document extension is required")
        self.extensions = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in self.extensions
        )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    def resolve_vault_path(self, base_dir: Path | None = None) -> Path:
        if self.vault_path is None:
            self.vault_path = _get_default_vault_path()
        if Path(self.vault_path).is_absolute() or base_dir is None:
            return Path(self.vault_path)
        return base_dir / self.vault_path
