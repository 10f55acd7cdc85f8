"""Hard-coded file link commands."""

from pathlib import Path
from typing import Annotated

import typer

from fileadopt.cli.context import open_services
from fileadopt.links.scanner import TextSource
from fileadopt.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Record files linked directly from text content.",
    no_args_is_help=True,
)


@app.command()
def scan(
    ctx: typer.Context,
    files: Annotated[
        list[Path],
        typer.Argument(help="Text or HTML files to scan; each file is one source."),
    ],
) -> None:
    """Rebuild the link table from the given files."""
    sources: list[TextSource] = []
    for path in files:
        try:
            sources.append(TextSource(str(path), path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError) as e:
            print_error(f"Cannot read {path}: {e}")
            raise typer.Exit(code=1) from e

    with open_services(ctx) as services:
        recorded = services.links.refresh(sources)
    print_success(f"Recorded {recorded} link(s) from {len(sources)} source(s).")


@app.command("list")
def list_links(ctx: typer.Context) -> None:
    """List recorded links."""
    with open_services(ctx) as services:
        records = services.links.list_references()
    if not records:
        print_info("No links recorded.")
        return
    for record in records:
        console.print(f"  {record.uri} [dim]<- {record.source_id}[/dim]")
