"""Daily sleep summaries built from raw device sessions."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from sleep_score.domain.goals import GoalSchedule
from sleep_score.domain.sleep import (
    AttributedDay,
    DayGroup,
    RatingCounts,
    SleepRating,
    SleepSession,
    SleepSource,
    to_local,
)
from sleep_score.services.attribution import group_sessions
from sleep_score.services.goals import GoalService
from sleep_score.services.rating import rate

_logger = logging.getLogger(__name__)


class SleepSessionRepository(Protocol):
    """Source of raw sleep sessions recorded by the wearable."""

    def list_sessions(self, start: datetime, end: datetime) -> list[SleepSession]:
        """Return sessions starting within a time range."""


def build_days(
    sessions: Iterable[SleepSession], schedule: GoalSchedule, tz: tzinfo
) -> list[AttributedDay]:
    """Attribute, group and rate a batch of sessions, newest day first."""
    return [
        _aggregate_group(group, schedule, tz)
        for group in group_sessions(sessions, schedule, tz)
    ]


def _aggregate_group(
    group: DayGroup, schedule: GoalSchedule, tz: tzinfo
) -> AttributedDay:
    sessions = [session.localized(tz) for session in group.sessions]
    actual_start = min(session.start for session in sessions)
    actual_end = max(session.end for session in sessions)
    total_hours = sum(session.duration_seconds for session in sessions) / 3600
    return AttributedDay(
        calendar_day=group.day,
        actual_start=actual_start,
        actual_end=actual_end,
        total_duration_hours=total_hours,
        rating=rate(total_hours, actual_start, actual_end, schedule, tz),
        source=SleepSource.DEVICE,
        session_count=len(sessions),
    )


def most_recent(days: Sequence[AttributedDay]) -> AttributedDay | None:
    """Return the newest day of an already ordered sequence."""
    return days[0] if days else None


def day_for(days: Iterable[AttributedDay], day: date) -> AttributedDay | None:
    """Return the summary credited to a calendar day, if any."""
    for entry in days:
        if entry.calendar_day == day:
            return entry
    return None


def month_rating_counts(
    days: Iterable[AttributedDay], year: int, month: int
) -> RatingCounts:
    """Count ratings of the days falling in one calendar month."""
    counts = dict.fromkeys(SleepRating, 0)
    for entry in days:
        if entry.calendar_day.year == year and entry.calendar_day.month == month:
            counts[entry.rating] += 1
    return RatingCounts(
        perfect=counts[SleepRating.PERFECT],
        good=counts[SleepRating.GOOD],
        ok=counts[SleepRating.OK],
        not_meet=counts[SleepRating.NOT_MEET],
    )


def manual_day(
    day: date,
    bedtime: datetime,
    wake_time: datetime,
    schedule: GoalSchedule,
    tz: tzinfo,
) -> AttributedDay:
    """Build a user-entered day; duration counts whole minutes."""
    start = to_local(bedtime, tz)
    end = to_local(wake_time, tz)
    minutes = int((end.astimezone(UTC) - start.astimezone(UTC)).total_seconds() // 60)
    if minutes <= 0:
        raise ValueError("wake_time must be after bedtime")
    duration_hours = minutes / 60
    return AttributedDay(
        calendar_day=day,
        actual_start=start,
        actual_end=end,
        total_duration_hours=duration_hours,
        rating=rate(duration_hours, start, end, schedule, tz),
        source=SleepSource.MANUAL,
        session_count=1,
    )


@dataclass
class SleepDayService:
    """Service producing rated daily summaries in the user's timezone."""

    repository: SleepSessionRepository
    goal_service: GoalService
    timezone_name: str = "UTC"
    lookback_days: int = 60

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    def summarize(self, sessions: Iterable[SleepSession]) -> list[AttributedDay]:
        """Rate a caller-provided batch against the current goal."""
        return build_days(sessions, self.goal_service.get_schedule(), self.tz)

    def get_days(self, now: datetime | None = None) -> list[AttributedDay]:
        """Fetch recent sessions and rebuild every day from scratch."""
        current = now or datetime.now(tz=self.tz)
        start = current - timedelta(days=self.lookback_days)
        end = current + timedelta(days=1)
        sessions = self.repository.list_sessions(
            start.astimezone(UTC), end.astimezone(UTC)
        )
        _logger.info(
            "Loaded %s sleep sessions between %s and %s",
            len(sessions),
            start.date().isoformat(),
            end.date().isoformat(),
        )
        return self.summarize(sessions)

    def get_latest(self, now: datetime | None = None) -> AttributedDay | None:
        """Return the most recent day with recorded sleep."""
        return most_recent(self.get_days(now))

    def get_day(self, day: date, now: datetime | None = None) -> AttributedDay | None:
        """Return the summary for one day within the lookback period."""
        return day_for(self.get_days(now), day)

    def get_month_counts(
        self, year: int, month: int, now: datetime | None = None
    ) -> RatingCounts:
        """Return rating counts for a month within the lookback period."""
        return month_rating_counts(self.get_days(now), year, month)

    def record_manual(
        self, day: date, bedtime: datetime, wake_time: datetime
    ) -> AttributedDay:
        """Rate a manually entered night against the current goal."""
        return manual_day(
            day, bedtime, wake_time, self.goal_service.get_schedule(), self.tz
        )
