"""CLI package for fileadopt.

This package contains the Typer application and all subcommands.
"""

from fileadopt.cli.main import app

__all__ = ["app"]
