"""Timer routes: the HTTP face of create_timer, list_timers and cancel_timer.

Handlers are plain functions so FastAPI runs them in its threadpool; store
operations may block on the file lock.
"""

from typing import Any

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from lockpilot.timers.service import TimerService
from lockpilot.timers.types import CreateTimerRequest

router = APIRouter()


class CreateTimerBody(BaseModel):
    """Create payload. Fields stay loose so TimerService owns validation."""

    model_config = ConfigDict(populate_by_name=True)

    action: Any = None
    target_time: Any = Field(default=None, alias="targetTime")
    message: Any = None


def _service(request: Request) -> TimerService:
    return request.app.state.service


@router.get("")
def list_timers(request: Request) -> list[dict[str, Any]]:
    return _service(request).list_timers()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_timer(body: CreateTimerBody, request: Request) -> dict[str, Any]:
    record = _service(request).create(
        CreateTimerRequest(
            action=body.action,
            target_time=body.target_time,
            message=body.message,
        )
    )
    return record.to_dict()


@router.delete("/{timer_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_timer(timer_id: str, request: Request) -> Response:
    _service(request).cancel_timer(timer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
