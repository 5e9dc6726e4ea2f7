"""User-facing console output for CLI operations.

Usage::

    from nodemod.core.progress import status, pluralize

    status("Scanning src/...")
    status("Rewrote 3 files", style="success")  # ✓ Rewrote 3 files
    status("Cannot decode a.js", style="error")  # ✗ Cannot decode a.js
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

# Console for output
_console = Console(stderr=True)

# Style prefixes
_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from nodemod.core.logging import get_logger

    return get_logger("progress")


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    # Log at DEBUG for observability (lazy to respect runtime config)
    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "file")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 file" or "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def print_diff(diff: str, *, console: Console | None = None) -> None:
    """Print a unified diff with syntax highlighting."""
    c = console or _console
    c.print(Syntax(diff, "diff", theme="ansi_dark", background_color="default"))


def make_recipe_table(rows: list[tuple[str, str, str]]) -> Table:
    """Create a Rich Table of (name, modules, description) rows."""
    table = Table(show_header=True, box=None, padding=(0, 2), pad_edge=False)
    table.add_column("recipe", style="cyan", no_wrap=True)
    table.add_column("modules", style="dim")
    table.add_column("description")
    for name, modules, description in rows:
        table.add_row(name, modules, description)
    return table
