"""Pydantic models for API payloads."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field

from sleep_score.domain.goals import GoalSchedule, TimeWindow
from sleep_score.domain.sleep import SleepSession


class SleepSessionIn(BaseModel):
    """Raw device session payload."""

    start: datetime
    end: datetime
    source_label: str = ""

    def to_domain(self) -> SleepSession:
        return SleepSession(
            start=self.start, end=self.end, source_label=self.source_label
        )


class SessionBatch(BaseModel):
    """Batch of sessions to rate."""

    sessions: list[SleepSessionIn] = Field(default_factory=list)


class TimeWindowIn(BaseModel):
    """Time-of-day window payload."""

    start: time
    end: time

    def to_domain(self) -> TimeWindow:
        return TimeWindow(
            start=time(self.start.hour, self.start.minute),
            end=time(self.end.hour, self.end.minute),
        )


class GoalIn(BaseModel):
    """Sleep goal payload."""

    bedtime_window: TimeWindowIn
    wake_window: TimeWindowIn
    target_duration_hours: float = Field(gt=0)

    def to_domain(self) -> GoalSchedule:
        return GoalSchedule(
            bedtime_window=self.bedtime_window.to_domain(),
            wake_window=self.wake_window.to_domain(),
            target_duration_hours=self.target_duration_hours,
        )


class ManualDayIn(BaseModel):
    """Manually entered night."""

    day: date
    bedtime: datetime
    wake_time: datetime
