"""Tests for the memory and file timer stores."""

import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from lockpilot.timers.errors import ConflictError
from lockpilot.timers.store import FileTimerStore, MemoryTimerStore
from lockpilot.timers.types import TimerAction, TimerRecord

BASE = datetime(2030, 1, 1, tzinfo=UTC)


def make_record(timer_id: str, minutes: int = 0) -> TimerRecord:
    return TimerRecord(
        id=timer_id,
        action=TimerAction.LOCK,
        target_time=BASE + timedelta(minutes=minutes),
        created_at=BASE,
    )


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryTimerStore()
    return FileTimerStore(tmp_path / "state" / "timers.jsonl")


class TestStoreContract:
    def test_empty(self, any_store):
        assert any_store.list_all() == []
        assert any_store.get("missing") is None

    def test_insert_keeps_insertion_order(self, any_store):
        for timer_id, minutes in [("c", 5), ("a", 1), ("b", 3)]:
            any_store.insert(make_record(timer_id, minutes))
        assert [r.id for r in any_store.list_all()] == ["c", "a", "b"]

    def test_insert_duplicate_conflicts(self, any_store):
        any_store.insert(make_record("a"))
        with pytest.raises(ConflictError):
            any_store.insert(make_record("a", 10))
        assert any_store.get("a") == make_record("a")

    def test_remove(self, any_store):
        any_store.insert(make_record("a"))
        assert any_store.remove("a") is True
        assert any_store.remove("a") is False
        assert any_store.get("a") is None

    def test_remove_where_returns_matches_in_order(self, any_store):
        for timer_id, minutes in [("late", 30), ("first", 1), ("second", 2)]:
            any_store.insert(make_record(timer_id, minutes))

        cutoff = BASE + timedelta(minutes=2)
        removed = any_store.remove_where(lambda r: r.target_time <= cutoff)

        assert [r.id for r in removed] == ["first", "second"]
        assert [r.id for r in any_store.list_all()] == ["late"]
        assert any_store.remove_where(lambda r: r.target_time <= cutoff) == []

    def test_list_all_is_a_snapshot(self, any_store):
        any_store.insert(make_record("a"))
        snapshot = any_store.list_all()
        any_store.insert(make_record("b"))
        assert [r.id for r in snapshot] == ["a"]

    def test_concurrent_remove_where_hands_out_each_record_once(self, any_store):
        for i in range(40):
            any_store.insert(make_record(f"t{i}"))

        results: list[list[TimerRecord]] = []
        barrier = threading.Barrier(4)

        def worker() -> None:
            barrier.wait()
            results.append(any_store.remove_where(lambda r: True))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        taken = [r.id for batch in results for r in batch]
        assert sorted(taken) == sorted(f"t{i}" for i in range(40))
        assert any_store.list_all() == []


class TestFileTimerStore:
    def test_persists_across_instances(self, tmp_path: Path):
        path = tmp_path / "timers.jsonl"
        FileTimerStore(path).insert(make_record("a", 1))
        FileTimerStore(path).insert(make_record("b", 2))

        reopened = FileTimerStore(path)
        assert [r.id for r in reopened.list_all()] == ["a", "b"]

    def test_skips_malformed_lines(self, tmp_path: Path):
        path = tmp_path / "timers.jsonl"
        path.write_text(
            make_record("good").to_json_line() + "\n" + "garbage\n" + "\n"
        )
        assert [r.id for r in FileTimerStore(path).list_all()] == ["good"]

    def test_skips_duplicate_ids_keeping_first(self, tmp_path: Path):
        path = tmp_path / "timers.jsonl"
        path.write_text(
            make_record("a", 1).to_json_line()
            + "\n"
            + make_record("a", 9).to_json_line()
            + "\n"
        )
        records = FileTimerStore(path).list_all()
        assert records == [make_record("a", 1)]

    def test_rewrite_leaves_no_temp_files(self, tmp_path: Path):
        path = tmp_path / "timers.jsonl"
        store = FileTimerStore(path)
        store.insert(make_record("a"))
        store.remove("a")

        leftovers = [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []
        assert path.read_text() == ""

    def test_failed_insert_does_not_touch_file(self, tmp_path: Path):
        path = tmp_path / "timers.jsonl"
        store = FileTimerStore(path)
        store.insert(make_record("a"))
        before = path.read_text()

        with pytest.raises(ConflictError):
            store.insert(make_record("a", 5))
        assert path.read_text() == before
