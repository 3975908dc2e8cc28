"""CLI command modules."""

from lockpilot.cli.commands import config, serve, timers

__all__ = [
    "config",
    "serve",
    "timers",
]
