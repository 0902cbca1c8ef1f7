"""Command line interface for SimpleSearch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simplesearch.config import AppConfig
from simplesearch.exceptions import DocumentReadError, VaultNotFoundError
from simplesearch.models import Document, MatchRecord, ScanStats, Snippet
from simplesearch.search.scanner import CancellationToken, Scanner
from simplesearch.search.snippet import build_snippet
from simplesearch.vault import FileVault
from simplesearch.web.app import app as web_app


console = Console()
app = typer.Typer(help="SimpleSearch - live substring search over a folder of notes")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _highlight(snippet: Snippet) -> str:
    return snippet.render("[bold yellow]", "[/bold yellow]", escape=escape)


def _open_vault(vault: Optional[Path], extensions: Optional[List[str]] = None) -> tuple[AppConfig, FileVault]:
    config = AppConfig(
        vault_path=vault if vault is not None else AppConfig().vault_path,
        extensions=tuple(extensions) if extensions else AppConfig().extensions,
    )
    resolved = config.resolve_vault_path(Path.cwd())
    try:
        return config, FileVault(resolved, extensions=config.extensions)
    except VaultNotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _print_record(record: MatchRecord) -> None:
    title = build_snippet(record.document.path, record.query)
    console.print(_highlight(title))
    for line in record.matching_lines:
        console.print(f"  {_highlight(line)}")


def _print_skip(document: Document, error: DocumentReadError) -> None:
    console.print(f"[yellow]Skipped {escape(document.path)}: {escape(error.reason)}[/yellow]")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for"),
    vault: Path = typer.Option(None, "--vault", help="Folder containing the notes"),
    ext: List[str] = typer.Option(None, "--ext", help="Document extensions to include"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search every note for a substring, printing matches as they are found."""
    _setup_logging(verbose)
    config, file_vault = _open_vault(vault, ext)

    query = query.strip()
    if not query:
        console.print("[yellow]Empty query, nothing to search.[/yellow]")
        return

    scanner = Scanner(file_vault.read_content, context=config.context_chars)
    stats: ScanStats = asyncio.run(
        scanner.scan(
            file_vault.enumerate_documents(),
            query,
            _print_record,
            CancellationToken(),
            on_skip=_print_skip,
        )
    )
    if not stats.matched:
        console.print("[yellow]No matches found.[/yellow]")


@app.command()
def documents(
    vault: Path = typer.Option(None, "--vault", help="Folder containing the notes"),
    ext: List[str] = typer.Option(None, "--ext", help="Document extensions to include"),
) -> None:
    """List the documents a search would scan."""
    _, file_vault = _open_vault(vault, ext)
    docs = file_vault.enumerate_documents()
    if not docs:
        console.print("[yellow]No documents found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Path")
    for document in docs:
        table.add_row(document.name, document.path)
    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    vault: Path = typer.Option(None, "--vault", help="Folder containing the notes"),
    ext: List[str] = typer.Option(None, "--ext", help="Document extensions to include"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig(
        vault_path=vault if vault is not None else AppConfig().vault_path,
        extensions=tuple(ext) if ext else AppConfig().extensions,
    )
    resolved_vault = config.resolve_vault_path(Path.cwd())
    if not resolved_vault.is_dir():
        console.print("[yellow]Warning: vault not found, searches will fail.[/yellow]")

    web_app.state.vault_path = resolved_vault
    web_app.state.extensions = config.extensions
    console.print(f"Starting web interface on http://{host}:{port} (vault: {resolved_vault})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
