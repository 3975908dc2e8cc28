"""Centralized logging configuration for LockPilot.

All entry points (CLI, server) should call configure_logging() early.

Logging Levels:
- DEBUG: Tick details, due-timer batches
- INFO: Timer created/canceled/fired, scheduler start/stop
- WARNING: Recoverable issues (unparsable store lines, lock fallbacks)
- ERROR: Notifier failures, tick errors, id conflicts
"""

import json
import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TextIO

DEFAULT_LOG_RETENTION_DAYS = 7

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "component"}

NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "uvicorn.access",
]


def prune_old_logs(
    logs_dir: Path,
    retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    suffix: str = ".jsonl",
) -> int:
    """Delete log files older than the retention period.

    Returns:
        Number of files deleted.
    """
    if not logs_dir.exists():
        return 0

    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    for entry in logs_dir.iterdir():
        if not entry.is_file() or not entry.name.endswith(suffix):
            continue
        try:
            mtime = datetime.fromtimestamp(entry.stat().st_mtime, UTC)
            if mtime < cutoff:
                entry.unlink()
                deleted += 1
        except OSError:
            pass  # Ignore errors on individual files

    return deleted


def _component(name: str) -> str:
    parts = name.split(".")
    if len(parts) >= 2 and parts[0] == "lockpilot":
        return parts[1]
    return parts[0]


def record_extra(record: logging.LogRecord) -> dict[str, object]:
    """Return the fields passed via ``extra=`` on a log call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONLHandler(logging.Handler):
    """Writes one JSON object per log record to a daily file.

    Files are named YYYY-MM-DD.jsonl under ``logs_dir`` and pruned on
    rotation according to ``retention_days``.
    """

    def __init__(
        self,
        logs_dir: Path,
        retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    ):
        super().__init__()
        self._logs_dir = logs_dir
        self._logs_dir.mkdir(parents=True, exist_ok=True)
        self._retention_days = retention_days
        self._current_date: str | None = None
        self._file: TextIO | None = None

    def _get_log_file(self) -> TextIO:
        today = datetime.now(UTC).strftime("%Y-%m-%d")
        if self._current_date != today or self._file is None:
            if self._file:
                self._file.close()
            self._current_date = today
            self._file = (self._logs_dir / f"{today}.jsonl").open("a", encoding="utf-8")
            prune_old_logs(self._logs_dir, self._retention_days)
        return self._file

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, object] = {
                "ts": datetime.now(UTC).isoformat(),
                "level": record.levelname,
                "component": _component(record.name),
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                formatter = self.formatter or logging.Formatter()
                entry["exception"] = formatter.formatException(record.exc_info)
            if extra := record_extra(record):
                entry["extra"] = extra

            log_file = self._get_log_file()
            log_file.write(json.dumps(entry, default=str) + "\n")
            log_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
        super().close()


class ComponentFormatter(logging.Formatter):
    """Formatter that shortens logger paths and appends ``extra`` fields.

    - lockpilot.timers.scheduler -> timers
    - lockpilot.server.app -> server
    """

    def format(self, record: logging.LogRecord) -> str:
        record.component = _component(record.name)
        text = super().format(record)
        if extra := record_extra(record):
            fields = " ".join(f"{key}={value}" for key, value in extra.items())
            text = f"{text} [{fields}]"
        return text


def resolve_level(level: str | None = None) -> str:
    """Resolve a log level name from the argument, then LOCKPILOT_LOG_LEVEL."""
    if level is None:
        level = os.environ.get("LOCKPILOT_LOG_LEVEL", "INFO")
    level = level.upper()
    return level if level in LOG_LEVELS else "INFO"


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
    log_to_file: bool = False,
) -> None:
    """Configure logging for LockPilot.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses LOCKPILOT_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful console output.
        log_to_file: Also write logs to JSONL files in ~/.lockpilot/logs/.
    """
    from lockpilot.config.paths import get_logs_path

    log_level = getattr(logging, resolve_level(level))

    handlers: list[logging.Handler] = []

    if use_rich:
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    handlers.append(console_handler)

    if log_to_file:
        file_handler = JSONLHandler(get_logs_path())
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Route uvicorn through our handlers
    for logger_name in ("uvicorn", "uvicorn.error"):
        uv_logger = logging.getLogger(logger_name)
        uv_logger.handlers = handlers
        uv_logger.propagate = False
