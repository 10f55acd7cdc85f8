"""CLI commands for fileadopt.

This package contains all subcommand implementations.
"""

from fileadopt.cli.commands import adopt, config, cron, index, links, orphans, scan

__all__ = ["adopt", "config", "cron", "index", "links", "orphans", "scan"]
