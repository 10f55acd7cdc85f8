"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from fileadopt.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Use truecolor on interactive terminals, let Rich decide otherwise."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_file_table(title: str) -> Table:
    """Create a pre-configured table for file listings.

    Args:
        title: Table title.

    Returns:
        Rich Table with status and URI columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("URI", no_wrap=True)
    table.add_column("Status", style="muted")
    return table


def format_status(is_managed: bool, is_ignored: bool) -> tuple[str, str]:
    """Return (icon, label) markup for a file's index flags."""
    if is_ignored:
        return "[ignored]–[/]", "[ignored]ignored[/]"
    if is_managed:
        return "[managed]●[/]", "[managed]managed[/]"
    return "[orphan]○[/]", "[orphan]orphan[/]"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
