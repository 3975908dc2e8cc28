"""Tests for TimerService lifecycle operations."""

import threading
from datetime import UTC, datetime, timedelta

import pytest

from lockpilot.timers import (
    ConflictError,
    CreateTimerRequest,
    NotFoundError,
    TimerAction,
    TimerService,
    ValidationError,
)
from lockpilot.timers.types import TimerRecord

from tests.conftest import START, popup


class TestCreate:
    def test_popup_round_trips_through_list(self, service: TimerService):
        record = service.create(popup("2030-01-01T00:00:00Z", "hi"))

        assert record.action is TimerAction.POPUP
        assert record.target_time == datetime(2030, 1, 1, tzinfo=UTC)
        assert record.message == "hi"
        assert record.created_at == START
        assert service.list() == [record]

    @pytest.mark.parametrize("message", [None, "", "   "])
    def test_popup_requires_message(self, service: TimerService, message):
        with pytest.raises(ValidationError, match="require a message"):
            service.create(popup("2030-01-01T00:00:00Z", message))
        assert service.list() == []

    def test_popup_message_is_trimmed(self, service: TimerService):
        record = service.create(popup("2030-01-01T00:00:00Z", "  stretch  "))
        assert record.message == "stretch"

    @pytest.mark.parametrize("action", ["lock", "shutdown", "reboot"])
    def test_non_popup_without_message(self, service: TimerService, action):
        record = service.create(
            CreateTimerRequest(action=action, target_time="2030-01-01T00:00:00Z")
        )
        assert record.action == action
        assert record.message is None

    @pytest.mark.parametrize("action", ["lock", "shutdown", "reboot"])
    @pytest.mark.parametrize("message", ["hi", ""])
    def test_non_popup_rejects_message(self, service: TimerService, action, message):
        with pytest.raises(ValidationError, match="do not take a message"):
            service.create(
                CreateTimerRequest(
                    action=action, target_time="2030-01-01T00:00:00Z", message=message
                )
            )

    @pytest.mark.parametrize("action", [None, "", "explode", "POPUP"])
    def test_unknown_action(self, service: TimerService, action):
        with pytest.raises(ValidationError, match="action"):
            service.create(
                CreateTimerRequest(
                    action=action, target_time="2030-01-01T00:00:00Z", message="hi"
                )
            )

    @pytest.mark.parametrize(
        "target",
        [
            None,
            "",
            "not-a-date",
            "2030-01-01T00:00:00",
            "0001-01-01T00:00:00+01:00",
            "9999-12-31T23:30:00-01:00",
        ],
    )
    def test_bad_target_time(self, service: TimerService, target):
        with pytest.raises(ValidationError):
            service.create(popup(target))

    def test_past_target_accepted(self, service: TimerService):
        record = service.create(popup(START - timedelta(days=1)))
        assert service.list() == [record]

    def test_ids_are_unique(self, service: TimerService):
        ids = {service.create(popup("2030-01-01T00:00:00Z")).id for _ in range(50)}
        assert len(ids) == 50

    def test_store_conflict_propagates(self, service: TimerService, monkeypatch):
        monkeypatch.setattr(
            "lockpilot.timers.service.uuid.uuid4",
            lambda: type("U", (), {"hex": "fixed"})(),
        )
        service.create(popup("2030-01-01T00:00:00Z"))
        with pytest.raises(ConflictError):
            service.create(popup("2030-01-01T00:00:00Z"))
        assert len(service.list()) == 1


class TestListAndGet:
    def test_insertion_order_not_time_order(self, service: TimerService):
        later = service.create(popup("2031-01-01T00:00:00Z", "later"))
        sooner = service.create(popup("2030-06-01T00:00:00Z", "sooner"))
        assert service.list() == [later, sooner]

    def test_repeated_list_is_identical(self, service: TimerService):
        service.create(popup("2031-01-01T00:00:00Z"))
        service.create(popup("2030-01-01T00:00:00Z"))
        assert service.list() == service.list()

    def test_get(self, service: TimerService):
        record = service.create(popup("2031-01-01T00:00:00Z"))
        assert service.get(record.id) == record
        with pytest.raises(NotFoundError):
            service.get("nope")


class TestCancel:
    def test_cancel_twice(self, service: TimerService):
        record = service.create(popup("2031-01-01T00:00:00Z"))
        service.cancel(record.id)
        with pytest.raises(NotFoundError) as exc_info:
            service.cancel(record.id)
        assert exc_info.value.timer_id == record.id

    def test_cancel_unknown(self, service: TimerService):
        with pytest.raises(NotFoundError):
            service.cancel("does-not-exist")

    def test_cancel_first_keeps_relative_order(self, service: TimerService):
        first = service.create(popup("2031-01-01T00:00:00Z", "one"))
        second = service.create(popup("2031-01-02T00:00:00Z", "two"))
        service.cancel(first.id)
        assert service.list() == [second]

        third = service.create(popup("2030-01-02T00:00:00Z", "three"))
        assert service.list() == [second, third]


class TestTakeDue:
    def test_returns_exactly_due_records_in_creation_order(
        self, service: TimerService, clock
    ):
        due_late = service.create(popup(START - timedelta(minutes=1), "a"))
        future = service.create(popup(START + timedelta(minutes=1), "b"))
        due_early = service.create(popup(START - timedelta(hours=1), "c"))
        exactly_now = service.create(popup(START, "d"))

        taken = service.take_due(START)

        assert taken == [due_late, due_early, exactly_now]
        assert service.list() == [future]

    def test_defaults_to_clock(self, service: TimerService, clock):
        record = service.create(popup(START + timedelta(seconds=30)))
        assert service.take_due() == []
        clock.advance(seconds=30)
        assert service.take_due() == [record]

    def test_fired_records_cannot_be_canceled(self, service: TimerService):
        record = service.create(popup(START - timedelta(seconds=1)))
        assert service.take_due(START) == [record]
        assert service.take_due(START) == []
        with pytest.raises(NotFoundError):
            service.cancel(record.id)

    def test_cancel_and_take_due_race_has_one_winner(self, service: TimerService):
        for _ in range(25):
            record = service.create(popup(START - timedelta(seconds=1)))
            outcomes: dict[str, object] = {}
            barrier = threading.Barrier(2)

            def cancel(timer_id: str = record.id) -> None:
                barrier.wait()
                try:
                    service.cancel(timer_id)
                    outcomes["cancel"] = True
                except NotFoundError:
                    outcomes["cancel"] = False

            def take() -> None:
                barrier.wait()
                outcomes["taken"] = service.take_due(START)

            threads = [threading.Thread(target=cancel), threading.Thread(target=take)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

            taken = outcomes["taken"]
            assert isinstance(taken, list)
            assert outcomes["cancel"] != (taken == [record])
            assert service.list() == []


class TestViewAdapters:
    def test_create_list_cancel_timer(self, service: TimerService):
        created = service.create_timer(
            {"action": "popup", "targetTime": "2030-01-01T00:00:00Z", "message": "hi"}
        )
        assert created["action"] == "popup"
        assert created["targetTime"] == "2030-01-01T00:00:00+00:00"
        assert service.list_timers() == [created]

        service.cancel_timer(created["id"])
        assert service.list_timers() == []

    def test_create_timer_validation_error(self, service: TimerService):
        with pytest.raises(ValidationError):
            service.create_timer(
                {"action": "popup", "targetTime": "2030-01-01T00:00:00Z", "message": ""}
            )

    def test_records_are_plain_values(self, service: TimerService):
        record = service.create(popup("2030-01-01T00:00:00Z"))
        assert isinstance(record, TimerRecord)
