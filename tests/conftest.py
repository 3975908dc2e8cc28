"""Shared test fixtures and factories."""

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from lockpilot.clock import ManualClock
from lockpilot.config.paths import ENV_VAR, get_lockpilot_home
from lockpilot.timers import (
    CreateTimerRequest,
    MemoryTimerStore,
    TimerAction,
    TimerService,
)

START = datetime(2030, 1, 1, 12, 0, 0, tzinfo=UTC)


class RecordingNotifier:
    """Notifier double that records calls and can fail on demand."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[TimerAction, str | None]] = []
        self._fail_on = fail_on or set()

    def notify(self, action: TimerAction, message: str | None) -> None:
        self.calls.append((action, message))
        if message in self._fail_on:
            raise RuntimeError(f"delivery failed for {message}")


def popup(target: str | datetime, message: str = "hi") -> CreateTimerRequest:
    return CreateTimerRequest(action="popup", target_time=target, message=message)


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture
def store() -> MemoryTimerStore:
    return MemoryTimerStore()


@pytest.fixture
def service(store: MemoryTimerStore, clock: ManualClock) -> TimerService:
    return TimerService(store, clock=clock)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def lockpilot_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Isolated LOCKPILOT_HOME with no config file in the working directory."""
    home = tmp_path / "home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("LOCKPILOT_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    get_lockpilot_home.cache_clear()
    yield home
    get_lockpilot_home.cache_clear()


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})
