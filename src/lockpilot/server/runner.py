"""Runtime server orchestration."""

from __future__ import annotations

import asyncio
import logging
import os
import signal as signal_module
from typing import TYPE_CHECKING

import uvicorn

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class ServerRunner:
    """Owns uvicorn serving with coordinated signal-driven shutdown."""

    def __init__(self, app: FastAPI, *, host: str, port: int) -> None:
        self._app = app
        self._host = host
        self._port = port

    async def run(self) -> None:
        uvicorn_config = uvicorn.Config(
            self._app,
            host=self._host,
            port=self._port,
            log_level="info",
            log_config=None,  # Use shared logging config, not uvicorn's
        )
        server = uvicorn.Server(uvicorn_config)

        loop = asyncio.get_running_loop()
        shutdown_count = 0

        def handle_signal() -> None:
            nonlocal shutdown_count
            shutdown_count += 1
            if shutdown_count == 1:
                # First signal: graceful shutdown (lifespan stops the scheduler)
                logger.info("server_shutting_down")
                server.should_exit = True
            else:
                logger.warning("server_force_shutdown")
                os._exit(1)

        for sig in (signal_module.SIGTERM, signal_module.SIGINT):
            loop.add_signal_handler(sig, handle_signal)

        await server.serve()
