"""Timer stores.

Every store serializes mutations through one exclusive section so that
``insert``, ``remove`` and ``remove_where`` are atomic with respect to each
other. Reads return snapshots taken inside the same section.
"""

from __future__ import annotations

import fcntl
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Protocol, TypeVar

from lockpilot.timers.errors import ConflictError
from lockpilot.timers.types import TimerRecord

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

TimerPredicate = Callable[[TimerRecord], bool]


class TimerStore(Protocol):
    """Keyed, insertion-ordered collection of pending timers."""

    def insert(self, record: TimerRecord) -> None: ...

    def remove(self, timer_id: str) -> bool: ...

    def get(self, timer_id: str) -> TimerRecord | None: ...

    def list_all(self) -> list[TimerRecord]: ...

    def remove_where(self, predicate: TimerPredicate) -> list[TimerRecord]: ...


class MemoryTimerStore:
    """In-process store guarded by a single mutex."""

    def __init__(self) -> None:
        # dicts keep insertion order, which is the listing order
        self._records: dict[str, TimerRecord] = {}
        self._lock = threading.Lock()

    def insert(self, record: TimerRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise ConflictError(record.id)
            self._records[record.id] = record

    def remove(self, timer_id: str) -> bool:
        with self._lock:
            return self._records.pop(timer_id, None) is not None

    def get(self, timer_id: str) -> TimerRecord | None:
        with self._lock:
            return self._records.get(timer_id)

    def list_all(self) -> list[TimerRecord]:
        with self._lock:
            return list(self._records.values())

    def remove_where(self, predicate: TimerPredicate) -> list[TimerRecord]:
        with self._lock:
            return _remove_matching(self._records, predicate)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class FileTimerStore:
    """JSONL-backed store shared safely between processes on one host.

    Each operation takes an in-process mutex plus an ``fcntl`` lock on a
    sibling lock file, re-reads the file, and (for mutations) rewrites it
    atomically via a temp file and ``os.replace``.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock_file = path.with_name(f".{path.name}.lock")
        self._thread_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get(self, timer_id: str) -> TimerRecord | None:
        return self._read(lambda records: records.get(timer_id))

    def list_all(self) -> list[TimerRecord]:
        return self._read(lambda records: list(records.values()))

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def insert(self, record: TimerRecord) -> None:
        def mutate(records: dict[str, TimerRecord]) -> None:
            if record.id in records:
                raise ConflictError(record.id)
            records[record.id] = record

        self._mutate(mutate)

    def remove(self, timer_id: str) -> bool:
        def mutate(records: dict[str, TimerRecord]) -> bool:
            return records.pop(timer_id, None) is not None

        return self._mutate(mutate)

    def remove_where(self, predicate: TimerPredicate) -> list[TimerRecord]:
        return self._mutate(lambda records: _remove_matching(records, predicate))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self, *, exclusive: bool) -> Iterator[None]:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._thread_lock, self._lock_file.open("a+") as lockf:
            with self._file_lock(lockf, exclusive=exclusive):
                yield

    @contextmanager
    def _file_lock(self, file: IO, *, exclusive: bool) -> Iterator[None]:
        try:
            fcntl.flock(file.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            yield
        finally:
            fcntl.flock(file.fileno(), fcntl.LOCK_UN)

    def _load(self) -> dict[str, TimerRecord]:
        records: dict[str, TimerRecord] = {}
        if not self._path.exists():
            return records
        with self._path.open(encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                record = TimerRecord.from_line(line)
                if record is None:
                    continue
                if record.id in records:
                    logger.warning(
                        "timer_duplicate_id_skipped",
                        extra={"timer.id": record.id, "file.line": line_number},
                    )
                    continue
                records[record.id] = record
        return records

    def _save(self, records: dict[str, TimerRecord]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for record in records.values():
                    f.write(record.to_json_line() + "\n")
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self, read: Callable[[dict[str, TimerRecord]], _T]) -> _T:
        with self._locked(exclusive=False):
            return read(self._load())

    def _mutate(self, mutate: Callable[[dict[str, TimerRecord]], _T]) -> _T:
        with self._locked(exclusive=True):
            records = self._load()
            before = list(records)
            result = mutate(records)
            if list(records) != before:
                self._save(records)
            return result


def _remove_matching(
    records: dict[str, TimerRecord], predicate: TimerPredicate
) -> list[TimerRecord]:
    matched = [record for record in records.values() if predicate(record)]
    for record in matched:
        del records[record.id]
    return matched
