"""Shared helpers for CLI commands.

Global options from the main callback live in ``ctx.obj``. Commands load
the configuration and open the services through these helpers so errors
are reported the same way everywhere.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from fileadopt.core.config import MAX_ITEMS_PER_RUN, AdoptionConfig, load_config_or_default
from fileadopt.errors import ConfigError, FileAdoptError
from fileadopt.services import Services, build_services
from fileadopt.utils.formatting import print_error
from fileadopt.utils.logging import configure_logging


def _options(ctx: typer.Context) -> dict[str, object]:
    root = ctx.find_root()
    root.ensure_object(dict)
    return root.obj


def get_config_path(ctx: typer.Context) -> Path | None:
    """Config file chosen with ``--config``, or None for the default."""
    path = _options(ctx).get("config_path")
    return path if isinstance(path, Path) else None


def get_config(ctx: typer.Context) -> AdoptionConfig:
    """Load the configuration, exiting with code 1 if it is invalid.

    Enables debug logging when ``verbose_logging`` is set in the file.
    """
    options = _options(ctx)
    cached = options.get("config")
    if isinstance(cached, AdoptionConfig):
        return cached
    try:
        config = load_config_or_default(get_config_path(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if config.verbose_logging and not options.get("quiet"):
        configure_logging(verbose=True)
    options["config"] = config
    return config


@contextmanager
def open_services(ctx: typer.Context) -> Iterator[Services]:
    """Yield connected services and close them afterwards.

    Library errors are printed and turned into exit code 1.
    """
    config = get_config(ctx)
    db_path = _options(ctx).get("db_path")
    try:
        services = build_services(config, db_path if isinstance(db_path, Path) else None)
    except FileAdoptError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    try:
        yield services
    except FileAdoptError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    finally:
        services.close()


def clamp_limit(limit: int) -> int:
    """Clamp a user supplied item limit to 0..MAX_ITEMS_PER_RUN."""
    return max(0, min(limit, MAX_ITEMS_PER_RUN))
