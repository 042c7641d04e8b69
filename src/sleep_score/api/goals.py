"""Goal API endpoints; updates require an API token."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from sleep_score.api.models import GoalIn  # noqa: TC001
from sleep_score.domain.goals import GoalSchedule, TimeWindow
from sleep_score.services.goals import format_clock

if TYPE_CHECKING:
    from sleep_score.containers import AppContainer

router = APIRouter(prefix="/goal", tags=["goal"])
_logger = logging.getLogger(__name__)


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("")
async def get_goal(request: Request) -> dict[str, object]:
    """Return the current sleep goal."""
    container: AppContainer = request.app.state.container
    return serialize_goal(container.goal_service.get_schedule())


@router.put("", dependencies=[Depends(require_token)])
async def update_goal(payload: GoalIn, request: Request) -> dict[str, object]:
    """Replace the sleep goal."""
    container: AppContainer = request.app.state.container
    try:
        schedule = container.goal_service.update_schedule(payload.to_domain())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        _logger.exception("Failed to save sleep goal")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc
    return serialize_goal(schedule)


def serialize_goal(schedule: GoalSchedule) -> dict[str, object]:
    return {
        "bedtime_window": _serialize_window(schedule.bedtime_window),
        "wake_window": _serialize_window(schedule.wake_window),
        "target_duration_hours": schedule.target_duration_hours,
    }


def _serialize_window(window: TimeWindow) -> dict[str, str]:
    return {"start": format_clock(window.start), "end": format_clock(window.end)}
