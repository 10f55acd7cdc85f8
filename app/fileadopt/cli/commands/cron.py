"""Scheduled-run command, meant to be invoked by cron or a systemd timer."""

from typing import Annotated

import typer

from fileadopt.cli.context import open_services
from fileadopt.core.state import StateManager
from fileadopt.utils.formatting import print_info, print_success

app = typer.Typer(
    help="Run the scheduled scan and adoption work.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def cron(
    ctx: typer.Context,
    initial: Annotated[
        bool,
        typer.Option("--initial", help="Force a full scan on this run."),
    ] = False,
) -> None:
    """Run one scheduled pass: full scan when due, then adoption if enabled."""
    if ctx.invoked_subcommand is not None:
        return

    with open_services(ctx) as services:
        runner = services.runner(StateManager())
        if initial:
            runner.mark_initial_scan()
        report = runner.run()

    if report.scanned:
        print_info(f"Full scan indexed {report.indexed} file(s).")
    if report.adopted:
        print_success(f"Adopted {report.adopted} file(s).")
    if not report.scanned and not report.adopted:
        print_info("Nothing to do.")
