"""Adopt command implementation."""

from typing import Annotated

import typer

from fileadopt.cli.context import clamp_limit, open_services
from fileadopt.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Adopt files into the managed registry.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def adopt(
    ctx: typer.Context,
    uris: Annotated[
        list[str] | None,
        typer.Argument(help="public:// URIs to adopt."),
    ] = None,
    unmanaged: Annotated[
        int | None,
        typer.Option(
            "--unmanaged",
            "-u",
            help="Adopt up to N unmanaged files from the index (0-500).",
        ),
    ] = None,
) -> None:
    """Adopt specific files, or unmanaged files recorded in the index.

    Examples:
        fileadopt adopt public://a/b.txt
        fileadopt adopt --unmanaged 100
    """
    if ctx.invoked_subcommand is not None:
        return
    if not uris and unmanaged is None:
        print_error("Pass URIs to adopt or --unmanaged N.")
        raise typer.Exit(code=2)

    with open_services(ctx) as services:
        if unmanaged is not None:
            adopted = services.engine.adopt_unmanaged(clamp_limit(unmanaged))
            if adopted:
                print_success(f"Adopted {adopted} file(s).")
            else:
                print_info("No files adopted.")
            return

        summary = services.engine.adopt_batch(uris or [])

    for result in summary.results:
        if result.success:
            console.print(f"  [success]✓[/] {result.uri}")
        else:
            console.print(f"  [error]✗[/] {result.uri} [dim]({result.error})[/dim]")
    print_info(f"Adopted {summary.adopted} of {summary.attempted} file(s).")
    if summary.adopted == 0:
        raise typer.Exit(code=1)
