"""Logging setup for the command line."""

import logging

from rich.logging import RichHandler

from fileadopt.utils.formatting import err_console


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route ``fileadopt`` loggers through a Rich handler on stderr.

    Args:
        verbose: Log at DEBUG level.
        quiet: Only log errors. Ignored when ``verbose`` is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    root = logging.getLogger("fileadopt")
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
