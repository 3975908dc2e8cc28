"""Health check routes."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Ready once the scheduler is ticking."""
    scheduler = request.app.state.scheduler
    return {"status": "ready" if scheduler.running else "starting"}
