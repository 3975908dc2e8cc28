"""Timer error taxonomy.

- ValidationError: malformed or inconsistent create request
- NotFoundError: id is not (or no longer) pending
- ConflictError: store-level id collision
- NotifierError: a fired timer's action could not be delivered
"""


class TimerError(Exception):
    """Base class for timer lifecycle errors."""


class ValidationError(TimerError):
    """Create request failed validation."""


class NotFoundError(TimerError):
    """No pending timer has the requested id."""

    def __init__(self, timer_id: str) -> None:
        super().__init__(f"Timer not found: {timer_id}")
        self.timer_id = timer_id


class ConflictError(TimerError):
    """A record with the same id is already stored."""

    def __init__(self, timer_id: str) -> None:
        super().__init__(f"Timer already exists: {timer_id}")
        self.timer_id = timer_id


class NotifierError(TimerError):
    """Delivering a fired timer's action failed."""
