"""Domain models for the sleep goal schedule."""

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class TimeWindow:
    """Time-of-day range, reusable against any calendar date."""

    start: time
    end: time

    @property
    def spans_midnight(self) -> bool:
        """Return True when the window ends on the following date."""
        return self.end < self.start

    @property
    def is_zero_width(self) -> bool:
        """Return True when start and end are the same clock time."""
        return self.start == self.end


@dataclass(frozen=True)
class GoalSchedule:
    """User sleep goal: bedtime window, wake window and nightly target."""

    bedtime_window: TimeWindow
    wake_window: TimeWindow
    target_duration_hours: float

    @classmethod
    def default(cls) -> "GoalSchedule":
        """Return the out-of-the-box goal."""
        return cls(
            bedtime_window=TimeWindow(time(22, 0), time(23, 0)),
            wake_window=TimeWindow(time(6, 0), time(8, 0)),
            target_duration_hours=8.0,
        )
