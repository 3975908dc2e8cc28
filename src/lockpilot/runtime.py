"""Wires configuration into a store, service, notifier and scheduler."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lockpilot.clock import Clock
from lockpilot.config.models import LockPilotConfig, StoreConfig
from lockpilot.notifiers import Notifier, create_notifier
from lockpilot.timers.scheduler import TimerScheduler
from lockpilot.timers.service import TimerService
from lockpilot.timers.store import FileTimerStore, MemoryTimerStore, TimerStore

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Everything a view needs to drive timers."""

    config: LockPilotConfig
    service: TimerService
    scheduler: TimerScheduler


def create_store(config: StoreConfig) -> TimerStore:
    if config.backend == "memory":
        return MemoryTimerStore()
    return FileTimerStore(config.path)


def create_service(config: LockPilotConfig, clock: Clock | None = None) -> TimerService:
    return TimerService(create_store(config.store), clock=clock)


def create_runtime(
    config: LockPilotConfig,
    *,
    clock: Clock | None = None,
    notifier: Notifier | None = None,
) -> Runtime:
    service = create_service(config, clock=clock)
    notifier = notifier or create_notifier(config.notifier)
    scheduler = TimerScheduler(
        service,
        notifier,
        poll_interval=config.scheduler.poll_interval,
    )
    logger.debug(
        f"Runtime created: store={config.store.backend}, "
        f"notifier={type(notifier).__name__}"
    )
    return Runtime(config=config, service=service, scheduler=scheduler)
