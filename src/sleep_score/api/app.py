"""FastAPI application factory."""

import logging
from collections.abc import Callable
from datetime import date
from typing import TypeVar

from fastapi import FastAPI, HTTPException, Request, status

from sleep_score.api.goals import router as goal_router
from sleep_score.api.models import ManualDayIn, SessionBatch
from sleep_score.app_logging import configure_logging
from sleep_score.containers import AppContainer
from sleep_score.domain.sleep import AttributedDay, RatingCounts

T = TypeVar("T")


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(goal_router)

    def _fetch(load: Callable[[], T]) -> T:
        try:
            return load()
        except Exception as exc:
            logger.exception("Failed to load sleep sessions")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/days")
    async def rate_batch(batch: SessionBatch, request: Request) -> dict[str, object]:
        """Rate a batch of sessions supplied by the caller."""
        state_container: AppContainer = request.app.state.container
        days = state_container.sleep_day_service.summarize(
            session.to_domain() for session in batch.sessions
        )
        return {"days": [_serialize_day(day) for day in days]}

    @app.post("/days/manual")
    async def manual_entry(entry: ManualDayIn, request: Request) -> dict[str, object]:
        """Rate a manually entered night."""
        state_container: AppContainer = request.app.state.container
        try:
            day = state_container.sleep_day_service.record_manual(
                entry.day, entry.bedtime, entry.wake_time
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _serialize_day(day)

    @app.get("/days")
    async def list_days(request: Request) -> dict[str, object]:
        """Return rated days for the lookback period, newest first."""
        state_container: AppContainer = request.app.state.container
        days = _fetch(state_container.sleep_day_service.get_days)
        return {"days": [_serialize_day(day) for day in days]}

    @app.get("/days/latest")
    async def latest_day(request: Request) -> dict[str, object]:
        """Return the most recent rated day."""
        state_container: AppContainer = request.app.state.container
        latest = _fetch(state_container.sleep_day_service.get_latest)
        if latest is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_day(latest)

    @app.get("/days/stats/{year}/{month}")
    async def month_stats(year: int, month: int, request: Request) -> dict[str, object]:
        """Return rating counts for a calendar month."""
        if not 1 <= month <= 12:  # noqa: PLR2004
            raise HTTPException(status_code=422)
        state_container: AppContainer = request.app.state.container
        service = state_container.sleep_day_service
        counts = _fetch(lambda: service.get_month_counts(year, month))
        return _serialize_counts(year, month, counts)

    @app.get("/days/{day}")
    async def day_detail(day: date, request: Request) -> dict[str, object]:
        """Return the rated summary for one calendar day."""
        state_container: AppContainer = request.app.state.container
        service = state_container.sleep_day_service
        entry = _fetch(lambda: service.get_day(day))
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_day(entry)

    return app


def _serialize_day(day: AttributedDay) -> dict[str, object]:
    return {
        "date": day.calendar_day.isoformat(),
        "actual_start": day.actual_start.isoformat(),
        "actual_end": day.actual_end.isoformat(),
        "duration_hours": round(day.total_duration_hours, 2),
        "rating": day.rating.value,
        "source": day.source.value,
        "session_count": day.session_count,
    }


def _serialize_counts(year: int, month: int, counts: RatingCounts) -> dict[str, object]:
    return {
        "year": year,
        "month": month,
        "perfect": counts.perfect,
        "good": counts.good,
        "ok": counts.ok,
        "not_meet": counts.not_meet,
        "total": counts.total,
    }
