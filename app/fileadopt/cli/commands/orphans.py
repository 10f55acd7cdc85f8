"""List recorded orphan files."""

from typing import Annotated

import typer

from fileadopt.cli.context import clamp_limit, open_services
from fileadopt.utils.formatting import console, print_info

app = typer.Typer(
    help="List orphan files recorded by previous scans.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def orphans(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Maximum number of orphans listed (0-500)."),
    ] = 50,
) -> None:
    """List recorded orphans, oldest discovery first."""
    if ctx.invoked_subcommand is not None:
        return

    with open_services(ctx) as services:
        uris = services.orphans.list_all(limit=clamp_limit(limit))
        total = services.orphans.count()

    if not uris:
        print_info("No orphans recorded.")
        return
    for uri in uris:
        console.print(f"  [orphan]○[/] {uri}")
    console.print(f"\n[dim]{total} orphan(s) recorded[/dim]")
