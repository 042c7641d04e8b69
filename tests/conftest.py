"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from sleep_score.config import Settings
from sleep_score.containers import AppContainer
from sleep_score.domain.goals import GoalSchedule, TimeWindow
from sleep_score.domain.sleep import SleepSession
from sleep_score.services.goals import GoalRepository, GoalService
from sleep_score.services.sleep_days import SleepDayService, SleepSessionRepository

UTC_ZONE = ZoneInfo("UTC")


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal blob storage for tests."""

    payload: dict[str, object] | None = None
    saved: list[dict[str, object]] = field(default_factory=list)

    def load(self) -> dict[str, object] | None:
        return self.payload

    def save(self, payload: dict[str, object]) -> None:
        self.payload = payload
        self.saved.append(payload)


@dataclass
class InMemorySleepSessionRepository(SleepSessionRepository):
    """In-memory session source for tests."""

    sessions: list[SleepSession] = field(default_factory=list)
    requested: list[tuple[datetime, datetime]] = field(default_factory=list)

    def list_sessions(self, start: datetime, end: datetime) -> list[SleepSession]:
        self.requested.append((start, end))
        return [s for s in self.sessions if start <= s.start < end]


@dataclass
class FailingSleepSessionRepository(SleepSessionRepository):
    """Session source that always fails, like a denied device query."""

    def list_sessions(self, start: datetime, end: datetime) -> list[SleepSession]:
        raise RuntimeError("sleep data unavailable")


def at(day: date, hour: int, minute: int = 0, tz: ZoneInfo = UTC_ZONE) -> datetime:
    """Build a timestamp on a day."""
    return datetime.combine(day, time(hour, minute), tzinfo=tz)


def night(
    day: date, start: tuple[int, int], end: tuple[int, int], label: str = "watch"
) -> SleepSession:
    """Session starting on `day`; the end rolls to the next day if earlier."""
    start_at = at(day, *start)
    end_at = at(day, *end)
    if end_at <= start_at:
        end_at += timedelta(days=1)
    return SleepSession(start=start_at, end=end_at, source_label=label)


def goal(
    bedtime: tuple[str, str] = ("22:00", "23:00"),
    wake: tuple[str, str] = ("06:00", "08:00"),
    target: float = 8.0,
) -> GoalSchedule:
    """Build a goal from HH:MM strings."""
    return GoalSchedule(
        bedtime_window=TimeWindow(
            time.fromisoformat(bedtime[0]), time.fromisoformat(bedtime[1])
        ),
        wake_window=TimeWindow(time.fromisoformat(wake[0]), time.fromisoformat(wake[1])),
        target_duration_hours=target,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
        timezone="UTC",
    )


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def session_repository() -> InMemorySleepSessionRepository:
    return InMemorySleepSessionRepository()


@pytest.fixture
def container(
    settings: Settings,
    goal_repository: InMemoryGoalRepository,
    session_repository: InMemorySleepSessionRepository,
) -> AppContainer:
    goal_service = GoalService(goal_repository)
    sleep_day_service = SleepDayService(
        repository=session_repository,
        goal_service=goal_service,
        timezone_name=settings.timezone,
        lookback_days=settings.session_lookback_days,
    )
    return AppContainer(
        settings=settings,
        goal_service=goal_service,
        sleep_day_service=sleep_day_service,
    )
