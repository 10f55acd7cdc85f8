"""Configuration commands."""

from typing import Annotated

import typer

from fileadopt.cli.context import get_config, get_config_path
from fileadopt.core.config import get_default_config, save_config
from fileadopt.core.paths import get_config_path as default_config_path
from fileadopt.errors import ConfigError
from fileadopt.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize configuration.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    config = get_config(ctx)
    console.print(f"[dim]# {get_config_path(ctx) or default_config_path()}[/dim]")
    for key, value in config.model_dump().items():
        if key == "ignore_patterns":
            continue
        console.print(f"[header]{key}[/] = {value}")
    console.print("[header]ignore_patterns[/] =")
    for pattern in config.patterns:
        console.print(f"  {pattern}")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a default config file."""
    path = get_config_path(ctx) or default_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists at {path} (use --force to overwrite).")
        return
    try:
        written = save_config(get_default_config(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Wrote default config to {written}")


@app.command()
def patterns(ctx: typer.Context) -> None:
    """List the active ignore patterns in order."""
    config = get_config(ctx)
    if not config.patterns:
        print_info("No ignore patterns configured.")
        return
    for pattern in config.patterns:
        console.print(pattern)
