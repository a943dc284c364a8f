"""Shared helpers for the shipyard CLI."""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

console = Console()

STATUS_STYLES = {
    "success": "green",
    "skipped": "yellow",
    "failed": "red",
    "ok": "green",
    "error": "red",
}


def exit_error(message: str, code: int = 1) -> NoReturn:
    """Print an error and exit with ``code``."""
    console.print(f"[red]Error:[/] {escape(message)}")
    raise typer.Exit(code=code)


def styled_status(status: str) -> str:
    """Wrap a status word in its Rich style."""
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/]"


__all__ = [
    "console",
    "exit_error",
    "styled_status",
]
