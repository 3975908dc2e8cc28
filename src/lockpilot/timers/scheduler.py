"""Timer scheduler: polls for due timers and dispatches them to a notifier.

The scheduler owns the tick loop only. Due-ness and removal are delegated to
TimerService.take_due, which guarantees each record is handed out once.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from lockpilot.timers.service import TimerService
from lockpilot.timers.types import TimerRecord

if TYPE_CHECKING:
    from lockpilot.notifiers.base import Notifier

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0

# Heartbeat every 300 ticks (~5 min at 1s interval)
HEARTBEAT_INTERVAL = 300

FiredCallback = Callable[[TimerRecord], Awaitable[Any]]


class TimerScheduler:
    """Fires due timers exactly once each.

    Example:
        scheduler = TimerScheduler(service, notifier, poll_interval=1.0)

        @scheduler.on_fired
        async def refresh(record):
            ...

        await scheduler.start()
    """

    def __init__(
        self,
        service: TimerService,
        notifier: "Notifier",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._service = service
        self._notifier = notifier
        self._poll_interval = poll_interval
        self._callbacks: list[FiredCallback] = []
        self._running = False
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()
        self._deliveries: set[asyncio.Task] = set()
        self._tick_count = 0

    @property
    def service(self) -> TimerService:
        return self._service

    @property
    def running(self) -> bool:
        return self._running

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    def on_fired(self, callback: FiredCallback) -> FiredCallback:
        """Decorator to register a callback run after each timer fires."""
        self._callbacks.append(callback)
        return callback

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_event = asyncio.Event()
        logger.info(
            "timer_scheduler_started",
            extra={"scheduler.poll_interval": self._poll_interval},
        )
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop polling, then wait for every delivery already handed out.

        The loop is never cancelled between ``take_due`` and dispatch, so
        records removed from the store always reach the notifier.
        """
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._task:
            await self._task
            self._task = None
        if self._deliveries:
            logger.info(
                "timer_scheduler_draining",
                extra={"scheduler.pending_batches": len(self._deliveries)},
            )
            await asyncio.gather(*self._deliveries)
        logger.info("timer_scheduler_stopped")

    async def tick(self) -> list[TimerRecord]:
        """Fire every timer due now and wait for delivery.

        Returns the fired records in order.
        """
        due = await self._take_due()
        if due:
            await self._dispatch(due)
        return due

    async def _take_due(self) -> list[TimerRecord]:
        now = self._service.clock.now()
        return await asyncio.to_thread(self._service.take_due, now)

    def _dispatch(self, due: list[TimerRecord]) -> asyncio.Task:
        # One task per batch: records in a batch fire in order, and a slow
        # delivery (an open dialog) never holds up later ticks.
        task = asyncio.create_task(self._deliver(due))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)
        return task

    async def _deliver(self, due: list[TimerRecord]) -> None:
        for record in due:
            await self._fire(record)

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                self._tick_count += 1
                if self._tick_count % HEARTBEAT_INTERVAL == 0:
                    logger.info(
                        "timer_scheduler_heartbeat",
                        extra={"scheduler.tick_count": self._tick_count},
                    )
                due = await self._take_due()
                if due:
                    self._dispatch(due)
            except Exception as e:
                logger.error("timer_tick_error", extra={"error.message": str(e)})
            try:
                await asyncio.wait_for(self._stop_event.wait(), self._poll_interval)
            except TimeoutError:
                pass

    async def _fire(self, record: TimerRecord) -> None:
        logger.info(
            "timer_fired",
            extra={"timer.id": record.id, "timer.action": record.action.value},
        )
        # The record is already removed; a failed delivery is reported, never retried.
        try:
            await asyncio.to_thread(self._notifier.notify, record.action, record.message)
        except Exception as e:
            logger.error(
                "timer_notify_failed",
                extra={
                    "timer.id": record.id,
                    "timer.action": record.action.value,
                    "error.message": str(e),
                },
            )

        for callback in self._callbacks:
            try:
                await callback(record)
            except Exception as e:
                logger.error(
                    "timer_fired_callback_error",
                    extra={"timer.id": record.id, "error.message": str(e)},
                )
