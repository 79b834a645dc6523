"""Terminal chrome for the CLI (Rich).

Messages, spinner and the logging handler live here so command modules only
deal with requests and tables.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

_console = Console()
_err_console = Console(stderr=True)

LOG_LEVEL_ENV = "SHUTTLE_LOG_LEVEL"


def get_console() -> Console:
    return _console


def get_error_console() -> Console:
    return _err_console


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through Rich.

    WARNING by default; DEBUG with ``--verbose``; ``SHUTTLE_LOG_LEVEL``
    overrides both.
    """

    level_name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else None
    if not isinstance(level, int):
        level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False, rich_tracebacks=False)],
        force=True,
    )


def success(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        _console.print(f"[green]✔[/green] {escape(message)}")


def info(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        _console.print(f"[blue]ℹ[/blue] {escape(message)}")


def warning(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        _err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str, *, hint: str | None = None) -> None:
    """Errors are printed even in quiet mode."""

    _err_console.print(f"[bold red]✖ {escape(message)}[/bold red]")
    if hint:
        _err_console.print(f"  [dim]{escape(hint)}[/dim]")


@contextlib.contextmanager
def spinner(message: str, *, quiet: bool = False) -> Iterator[None]:
    """Show a Rich status spinner on stderr unless ``quiet``."""

    if quiet or not _err_console.is_terminal:
        yield
        return
    with _err_console.status(message):
        yield
