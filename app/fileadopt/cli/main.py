"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from fileadopt import __version__
from fileadopt.cli.commands import adopt, config, cron, index, links, orphans, scan
from fileadopt.utils.logging import configure_logging

app = typer.Typer(
    name="fileadopt",
    help="Find public files missing from the managed-file registry and adopt them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fileadopt version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file (default: ~/.config/fileadopt/config.toml).",
            envvar="FILEADOPT_CONFIG",
        ),
    ] = None,
    db_path: Annotated[
        Path | None,
        typer.Option(
            "--database",
            help="Database file (default: ~/.local/state/fileadopt/fileadopt.db).",
            envvar="FILEADOPT_DATABASE",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-essential output."),
    ] = False,
) -> None:
    """fileadopt - reconcile the public file tree with the managed registry."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["db_path"] = db_path
    configure_logging(verbose=verbose, quiet=quiet)


app.add_typer(scan.app, name="scan")
app.add_typer(index.app, name="index")
app.add_typer(adopt.app, name="adopt")
app.add_typer(orphans.app, name="orphans")
app.add_typer(cron.app, name="cron")
app.add_typer(config.app, name="config")
app.add_typer(links.app, name="links")


if __name__ == "__main__":
    app()
