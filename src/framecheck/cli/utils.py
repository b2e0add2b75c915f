"""
CLI utility helpers: consoles and error output.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from framecheck.errors import FramecheckError

console = Console()
err_console = Console(stderr=True)

#: Exit codes
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def fail(message: str) -> typer.Exit:
    """Print a red error line to stderr and return the usage-error exit."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    return typer.Exit(code=EXIT_USAGE)


def fail_from(error: FramecheckError) -> typer.Exit:
    """Like :func:`fail`, adding the error's category."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}"
    )
    return typer.Exit(code=EXIT_USAGE)
