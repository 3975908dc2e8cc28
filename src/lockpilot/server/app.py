"""FastAPI application for the LockPilot view."""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lockpilot import __version__
from lockpilot.server.routes import health, timers
from lockpilot.timers.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from lockpilot.runtime import Runtime

logger = logging.getLogger(__name__)


def create_app(runtime: "Runtime", *, run_scheduler: bool = True) -> FastAPI:
    """Create the FastAPI application.

    Args:
        runtime: Service and scheduler to expose.
        run_scheduler: Start/stop the scheduler with the app lifespan.
    """
    scheduler = runtime.scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> "AsyncIterator[None]":
        logger.info("Starting LockPilot server")
        if run_scheduler:
            await scheduler.start()

        yield

        logger.info("Shutting down LockPilot server")
        if run_scheduler:
            await scheduler.stop()

    app = FastAPI(
        title="LockPilot",
        description="Schedule one-shot popups, locks, shutdowns and reboots",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.runtime = runtime
    app.state.service = runtime.service
    app.state.scheduler = scheduler

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    app.include_router(health.router, tags=["health"])
    app.include_router(timers.router, prefix="/timers", tags=["timers"])

    return app
