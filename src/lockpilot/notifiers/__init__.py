"""Notifiers perform the effect of a fired timer."""

import sys

from lockpilot.config.models import NotifierConfig
from lockpilot.notifiers.base import LoggingNotifier, Notifier
from lockpilot.notifiers.macos import MacOSNotifier

__all__ = [
    "LoggingNotifier",
    "MacOSNotifier",
    "Notifier",
    "create_notifier",
]


def create_notifier(config: NotifierConfig | None = None) -> Notifier:
    """Build the notifier selected by config.

    ``auto`` picks the macOS notifier on Darwin and logging elsewhere.
    """
    config = config or NotifierConfig()
    kind = config.kind
    if kind == "auto":
        kind = "macos" if _is_macos() else "log"
    if kind == "macos":
        return MacOSNotifier(dialog_title=config.dialog_title)
    return LoggingNotifier()


def _is_macos() -> bool:
    return sys.platform == "darwin"
