"""Notifier contract and the logging fallback notifier."""

import logging
from typing import Protocol

from lockpilot.timers.types import TimerAction

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Performs the user-visible effect of a fired timer.

    Implementations may block; the scheduler calls them from a worker thread.
    Failures are signalled by raising (preferably ``NotifierError``).
    """

    def notify(self, action: TimerAction, message: str | None) -> None: ...


class LoggingNotifier:
    """Notifier that only records the fired action in the log."""

    def notify(self, action: TimerAction, message: str | None) -> None:
        if message:
            logger.info(
                f"Timer fired: {action.value}: {message}",
                extra={"timer.action": action.value},
            )
        else:
            logger.info(
                f"Timer fired: {action.value}", extra={"timer.action": action.value}
            )
