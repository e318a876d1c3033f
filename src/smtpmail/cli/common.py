"""Shared console helpers for the smtpmail CLI."""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def exit_error(message: str, *, code: int = 1) -> NoReturn:
    """Print *message* in red on stderr and exit with *code*."""
    err_console.print(f"[red]{escape(message)}[/]")
    raise typer.Exit(code=code)


__all__ = ["console", "err_console", "exit_error"]
