"""Scan command implementation.

Walks the public root, reports orphaned files and optionally adopts them.
"""

from typing import Annotated

import typer

from fileadopt.cli.context import clamp_limit, get_config, open_services
from fileadopt.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Scan the public root for orphaned files.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def scan(
    ctx: typer.Context,
    adopt: Annotated[
        bool,
        typer.Option("--adopt", "-a", help="Adopt orphans as they are found."),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            help="Orphans listed, or adopted with --adopt (0-500, default: items_per_run).",
        ),
    ] = None,
) -> None:
    """Scan the public root and list or adopt orphaned files.

    Examples:
        fileadopt scan                 # List orphans
        fileadopt scan --adopt -l 50   # Adopt up to 50 orphans
    """
    if ctx.invoked_subcommand is not None:
        return

    config = get_config(ctx)
    effective = clamp_limit(config.items_per_run if limit is None else limit)
    if limit is not None and effective != limit:
        print_warning(f"Limit {limit} clamped to {effective}.")

    with open_services(ctx) as services:
        if adopt:
            counts = services.engine.scan_and_process(adopt=True, limit=effective)
            console.print(
                f"Scanned [info]{counts.files}[/] file(s), "
                f"found [orphan]{counts.orphans}[/] orphan(s)."
            )
            if counts.adopted:
                print_success(f"Adopted {counts.adopted} file(s).")
            else:
                print_info("No files adopted.")
            return

        lists = services.engine.scan_with_lists(limit=effective)

    for uri in lists.to_manage:
        console.print(f"  [orphan]○[/] {uri}")
    console.print(
        f"\nScanned [info]{lists.files}[/] file(s), found [orphan]{lists.orphans}[/] orphan(s)."
    )
    if lists.orphans > len(lists.to_manage):
        console.print(f"[dim](showing {len(lists.to_manage)} of {lists.orphans})[/dim]")


@app.command()
def chunk(
    ctx: typer.Context,
    resume: Annotated[
        str,
        typer.Option("--resume", "-r", help="Resume token from the previous chunk."),
    ] = "",
    batch: Annotated[
        int | None,
        typer.Option("--batch", "-b", help="Orphans per chunk (default: items_per_run)."),
    ] = None,
    time_limit: Annotated[
        float | None,
        typer.Option("--time-limit", "-t", help="Seconds per chunk."),
    ] = None,
) -> None:
    """Scan one resumable chunk and print the next resume token."""
    if batch is not None and batch < 1:
        raise typer.BadParameter("must be at least 1", param_hint="--batch")

    with open_services(ctx) as services:
        result = services.engine.scan_chunk(resume, batch_size=batch, time_limit=time_limit)

    for uri in result.to_manage:
        console.print(f"  [orphan]○[/] {uri}")
    print_info(f"Found {len(result.to_manage)} orphan(s) in this chunk.")
    if result.is_complete:
        print_success("Scan complete.")
    else:
        console.print(f"Resume token: [bold]{result.resume}[/]")
