"""Shared utilities for ocpinit CLI commands."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ocpinit.project import PROJECT_FILE


def resolve_project_file(project_dir: Path, project_file: Optional[str] = None) -> Path:
    """Locate the PROJECT file for a generated project.

    Relative paths given explicitly are taken relative to the current
    directory, matching how the shell completes them.
    """
    if project_file:
        return Path(project_file)
    return project_dir / PROJECT_FILE


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from ocpinit.core.logger import set_verbose, setup_file_logging as _setup_file_logging

    set_verbose(verbose)
    if log_file:
        _setup_file_logging(log_file=log_file, verbose=verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {escape(message)}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {escape(message)}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    console.print(f"[cyan]{prefix}[/cyan] {escape(message)}")
