"""Timer types.

Public types:
- TimerAction: What a timer does when it fires
- TimerRecord: A pending timer as stored and as shown to views
- CreateTimerRequest: Unvalidated input to TimerService.create
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from lockpilot.timers.errors import ValidationError

logger = logging.getLogger(__name__)


class TimerAction(StrEnum):
    """Actions a timer can perform when it fires."""

    POPUP = "popup"
    LOCK = "lock"
    SHUTDOWN = "shutdown"
    REBOOT = "reboot"

    @property
    def requires_message(self) -> bool:
        return self is TimerAction.POPUP


@dataclass(frozen=True)
class TimerRecord:
    """A single pending one-shot timer."""

    id: str
    action: TimerAction
    target_time: datetime
    created_at: datetime
    message: str | None = None

    def is_due(self, now: datetime) -> bool:
        return self.target_time <= now

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the shape handed to views."""
        return {
            "id": self.id,
            "action": self.action.value,
            "targetTime": format_instant(self.target_time),
            "message": self.message,
            "createdAt": format_instant(self.created_at),
        }

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerRecord:
        """Rebuild a stored record.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the action is unknown.
            ValidationError: If a stored instant cannot be parsed.
        """
        return cls(
            id=str(data["id"]),
            action=TimerAction(data["action"]),
            target_time=parse_instant(data["targetTime"]),
            message=data.get("message"),
            created_at=parse_instant(data["createdAt"]),
        )

    @classmethod
    def from_line(cls, line: str) -> TimerRecord | None:
        """Parse a JSONL line, skipping blanks, comments and malformed data."""
        line = line.strip()
        if not line or line.startswith("#"):
            return None
        try:
            return cls.from_dict(json.loads(line))
        except (json.JSONDecodeError, KeyError, ValueError, TypeError, ValidationError):
            logger.warning("timer_parse_failed", exc_info=True)
            return None


@dataclass
class CreateTimerRequest:
    """Raw create input. Validated by TimerService.create."""

    action: str | TimerAction | None
    target_time: str | datetime | None
    message: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CreateTimerRequest:
        """Accept both the view's camelCase keys and snake_case keys."""
        target = data.get("targetTime", data.get("target_time"))
        return cls(
            action=data.get("action"),
            target_time=target,
            message=data.get("message"),
        )


def parse_instant(value: str | datetime | None) -> datetime:
    """Parse an absolute instant and normalize it to UTC.

    Accepts ISO-8601 strings (a trailing ``Z`` is allowed) and aware
    datetimes. Naive values are rejected since they do not name an instant.

    Raises:
        ValidationError: If the value is missing, unparsable, naive or outside
            the representable UTC range.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("targetTime is required")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid date/time format: {value!r}") from e
    else:
        raise ValidationError(f"Invalid date/time format: {value!r}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise ValidationError(
            f"targetTime must include a UTC offset (e.g. 'Z' or '+02:00'): {value!r}"
        )
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        raise ValidationError(f"Instant out of range: {value!r}") from None


def format_instant(value: datetime) -> str:
    return value.astimezone(UTC).isoformat()
