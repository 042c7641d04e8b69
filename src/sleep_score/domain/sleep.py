"""Domain models for sleep sessions and rated days."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, tzinfo
from enum import Enum


class SleepRating(Enum):
    """Qualitative outcome of a night against the goal."""

    PERFECT = "Perfect"
    GOOD = "Good"
    OK = "OK"
    NOT_MEET = "Not Meet"


class SleepSource(Enum):
    """Where the data for a day came from."""

    DEVICE = "Apple Watch"
    MANUAL = "Manual"


class AttributionRule(Enum):
    """Which attribution rule decided the day of a session."""

    EARLY_MORNING = "early_morning"
    PREVIOUS_WINDOW_OVERLAP = "previous_window_overlap"
    BEFORE_CURRENT_WINDOW_END = "before_current_window_end"
    CURRENT_DAY = "current_day"


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Express a timestamp in local time; naive values are taken as local."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


@dataclass(frozen=True)
class SleepSession:
    """One contiguous interval recorded by the device."""

    start: datetime
    end: datetime
    source_label: str = ""

    def localized(self, tz: tzinfo) -> "SleepSession":
        """Return the session with both ends expressed in `tz`."""
        return replace(
            self, start=to_local(self.start, tz), end=to_local(self.end, tz)
        )

    @property
    def duration_seconds(self) -> float:
        """Absolute elapsed time, independent of DST transitions.

        Sessions with naive ends must be localized first.
        """
        if self.start.tzinfo is None and self.end.tzinfo is None:
            return (self.end - self.start).total_seconds()
        return (self.end.astimezone(UTC) - self.start.astimezone(UTC)).total_seconds()

    @property
    def duration_hours(self) -> float:
        return self.duration_seconds / 3600

    @property
    def is_well_formed(self) -> bool:
        """Return True when the session has a positive duration."""
        return self.duration_seconds > 0


@dataclass(frozen=True)
class Attribution:
    """Attributed calendar day plus the rule that produced it."""

    day: date
    rule: AttributionRule
    overlap_previous_seconds: float = 0.0
    overlap_current_seconds: float = 0.0


@dataclass(frozen=True)
class DayGroup:
    """Sessions sharing an attributed day."""

    day: date
    sessions: tuple[SleepSession, ...]


@dataclass(frozen=True)
class AttributedDay:
    """Aggregated, rated sleep for one calendar day."""

    calendar_day: date
    actual_start: datetime
    actual_end: datetime
    total_duration_hours: float
    rating: SleepRating
    source: SleepSource = SleepSource.DEVICE
    session_count: int = 1


@dataclass(frozen=True)
class RatingCounts:
    """Number of days per rating over a period."""

    perfect: int = 0
    good: int = 0
    ok: int = 0
    not_meet: int = 0

    @property
    def total(self) -> int:
        return self.perfect + self.good + self.ok + self.not_meet
