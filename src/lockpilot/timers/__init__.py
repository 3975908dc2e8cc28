"""Timer subsystem: one-shot timers that fire an action at a target instant.

Public API:
- TimerService: Validates, creates, lists, cancels and takes due timers
- TimerScheduler: Polling loop that dispatches due timers to a notifier
- MemoryTimerStore / FileTimerStore: TimerStore implementations

Types:
- TimerRecord: A pending timer
- TimerAction: popup, lock, shutdown, reboot
- CreateTimerRequest: Raw create input
"""

from lockpilot.timers.errors import (
    ConflictError,
    NotFoundError,
    NotifierError,
    TimerError,
    ValidationError,
)
from lockpilot.timers.scheduler import TimerScheduler
from lockpilot.timers.service import TimerService
from lockpilot.timers.store import FileTimerStore, MemoryTimerStore, TimerStore
from lockpilot.timers.types import CreateTimerRequest, TimerAction, TimerRecord

__all__ = [
    "ConflictError",
    "CreateTimerRequest",
    "FileTimerStore",
    "MemoryTimerStore",
    "NotFoundError",
    "NotifierError",
    "TimerAction",
    "TimerError",
    "TimerRecord",
    "TimerScheduler",
    "TimerService",
    "TimerStore",
    "ValidationError",
]
