"""Timer service: validation and lifecycle operations over a TimerStore."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from lockpilot.clock import Clock, SystemClock
from lockpilot.timers.errors import ConflictError, NotFoundError, ValidationError
from lockpilot.timers.store import MemoryTimerStore, TimerStore
from lockpilot.timers.types import (
    CreateTimerRequest,
    TimerAction,
    TimerRecord,
    parse_instant,
)

logger = logging.getLogger(__name__)


class TimerService:
    """Creates, lists, cancels and fires timers.

    The service owns no state of its own; every mutation goes through the
    store's exclusive section, so ``cancel`` and ``take_due`` racing on one
    id have exactly one winner.

    Example:
        service = TimerService(MemoryTimerStore())
        record = service.create(
            CreateTimerRequest(action="popup", target_time="2030-01-01T00:00:00Z", message="hi")
        )
        service.cancel(record.id)
    """

    def __init__(self, store: TimerStore | None = None, clock: Clock | None = None):
        self._store = store if store is not None else MemoryTimerStore()
        self._clock = clock or SystemClock()

    @property
    def store(self) -> TimerStore:
        return self._store

    @property
    def clock(self) -> Clock:
        return self._clock

    def create(self, request: CreateTimerRequest) -> TimerRecord:
        """Validate a request and store a new pending timer.

        Target times in the past are accepted and become due immediately.

        Raises:
            ValidationError: If any request field is missing or inconsistent.
            ConflictError: If the store already holds the generated id.
        """
        target_time = parse_instant(request.target_time)
        action = _parse_action(request.action)
        message = _validate_message(action, request.message)

        record = TimerRecord(
            id=uuid.uuid4().hex,
            action=action,
            target_time=target_time,
            message=message,
            created_at=self._clock.now(),
        )
        try:
            self._store.insert(record)
        except ConflictError:
            logger.error("timer_id_conflict", extra={"timer.id": record.id})
            raise

        logger.info(
            "timer_created",
            extra={
                "timer.id": record.id,
                "timer.action": record.action.value,
                "timer.target_time": record.target_time.isoformat(),
            },
        )
        return record

    def list(self) -> list[TimerRecord]:
        """Return all pending timers in creation order."""
        return self._store.list_all()

    def get(self, timer_id: str) -> TimerRecord:
        record = self._store.get(timer_id)
        if record is None:
            raise NotFoundError(timer_id)
        return record

    def cancel(self, timer_id: str) -> None:
        """Remove a pending timer.

        Raises:
            NotFoundError: If the id is unknown, already fired or already canceled.
        """
        if not self._store.remove(timer_id):
            raise NotFoundError(timer_id)
        logger.info("timer_canceled", extra={"timer.id": timer_id})

    def take_due(self, now: datetime | None = None) -> list[TimerRecord]:
        """Atomically remove and return every timer due at ``now``.

        Returned records are considered fired: they no longer list and can no
        longer be canceled.
        """
        if now is None:
            now = self._clock.now()
        due = self._store.remove_where(lambda record: record.is_due(now))
        if due:
            logger.debug(
                f"Took {len(due)} due timer(s) at {now.isoformat()}: "
                + ", ".join(record.id for record in due)
            )
        return due

    # ------------------------------------------------------------------
    # View-facing adapters (plain dicts in, plain dicts out)
    # ------------------------------------------------------------------

    def create_timer(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self.create(CreateTimerRequest.from_dict(payload)).to_dict()

    def list_timers(self) -> list[dict[str, Any]]:
        return [record.to_dict() for record in self.list()]

    def cancel_timer(self, timer_id: str) -> None:
        self.cancel(timer_id)


def _parse_action(value: str | TimerAction | None) -> TimerAction:
    if value is None or value == "":
        raise ValidationError("action is required")
    try:
        return TimerAction(value)
    except ValueError:
        valid = ", ".join(action.value for action in TimerAction)
        raise ValidationError(f"Unknown action {value!r} (expected one of: {valid})") from None


def _validate_message(action: TimerAction, message: Any) -> str | None:
    if action.requires_message:
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Popup timers require a message")
        return message.strip()

    if message is not None:
        raise ValidationError(f"{action.value} timers do not take a message")
    return None
