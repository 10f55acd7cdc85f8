"""Index maintenance and reporting commands."""

from typing import Annotated

import typer
from rich.table import Table

from fileadopt.cli.context import get_config, open_services
from fileadopt.utils.formatting import (
    console,
    create_file_table,
    format_status,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Build and inspect the file index.",
    no_args_is_help=True,
)


@app.command()
def build(ctx: typer.Context) -> None:
    """Rebuild the index from scratch (use after changing ignore patterns)."""
    with open_services(ctx) as services:
        if not services.config.public_root.is_dir():
            print_warning(f"Public root {services.config.public_root} is not a directory.")
        count = services.engine.build_index()
    print_success(f"Indexed {count} file(s).")


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Update the index in place and drop rows for deleted files."""
    with open_services(ctx) as services:
        count = services.engine.scan_public_files()
    print_success(f"Indexed {count} file(s).")


@app.command()
def status(
    ctx: typer.Context,
    ignored: Annotated[
        bool,
        typer.Option("--ignored", help="Only list ignored files."),
    ] = False,
    unmanaged: Annotated[
        bool,
        typer.Option("--unmanaged", help="Only list unmanaged files."),
    ] = False,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of files listed."),
    ] = 50,
) -> None:
    """Show index totals and list indexed files."""
    with open_services(ctx) as services:
        summary = services.inventory.summary()
        uris = services.inventory.list_files(ignored=ignored, unmanaged=unmanaged, limit=limit)
        total = services.inventory.count_files(ignored=ignored, unmanaged=unmanaged)
        rows = [services.index.get(uri) for uri in uris]

    console.print(
        f"Total [info]{summary.total}[/]  managed [managed]{summary.managed}[/]  "
        f"ignored [ignored]{summary.ignored}[/]  orphans [orphan]{summary.orphans}[/]"
    )
    if not uris:
        print_info("No matching files in the index.")
        return

    table = create_file_table("Indexed Files")
    for row in rows:
        if row is not None:
            table.add_row(*_status_row(row.uri, row.is_managed, row.is_ignored))
    console.print(table)
    if total > len(uris):
        console.print(f"[dim](showing {len(uris)} of {total})[/dim]")


@app.command()
def dirs(
    ctx: typer.Context,
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", help="Deepest level shown (default: directory_depth)."),
    ] = None,
) -> None:
    """Summarize indexed files per directory."""
    max_depth = get_config(ctx).directory_depth if depth is None else depth
    with open_services(ctx) as services:
        directories = services.inventory.list_directories(max_depth)

    if not directories:
        print_info("No directories in the index.")
        return

    table = Table(title="Directories", header_style="bold_header", border_style="border")
    table.add_column("Directory", no_wrap=True)
    table.add_column("Files", justify="right", style="info")
    table.add_column("Orphans", justify="right", style="orphan")
    for info in directories:
        table.add_row("  " * info.depth + info.path + "/", str(info.files), str(info.orphans))
    console.print(table)


@app.command()
def cleanup(
    ctx: typer.Context,
    batch: Annotated[
        int,
        typer.Option("--batch", "-b", min=1, help="Rows checked per batch."),
    ] = 100,
) -> None:
    """Remove index rows whose files no longer exist."""
    with open_services(ctx) as services:
        removed = services.inventory.cleanup_stale(batch)
    if removed:
        print_success(f"Removed {removed} stale row(s).")
    else:
        print_info("No stale rows found.")


def _status_row(uri: str, managed: bool, ignored: bool) -> tuple[str, str, str]:
    icon, label = format_status(managed, ignored)
    return icon, uri, label
