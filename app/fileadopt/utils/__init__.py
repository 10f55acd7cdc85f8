"""Utility modules for fileadopt.

This module exports commonly used console helpers.
"""

from fileadopt.utils.formatting import (
    console,
    create_file_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from fileadopt.utils.logging import configure_logging

__all__ = [
    "configure_logging",
    "console",
    "create_file_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
