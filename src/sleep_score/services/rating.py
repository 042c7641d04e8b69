"""Rating of an aggregated night against the goal schedule."""

from datetime import datetime, time, tzinfo

from sleep_score.domain.goals import GoalSchedule, TimeWindow
from sleep_score.domain.sleep import SleepRating, to_local

BUFFER_MINUTES = 45
SHORTFALL_TOLERANCE_HOURS = 1.0
_MINUTES_PER_DAY = 24 * 60


def rate(
    duration_hours: float,
    actual_start: datetime,
    actual_end: datetime,
    schedule: GoalSchedule,
    tz: tzinfo | None = None,
) -> SleepRating:
    """Classify a night into one of the four ratings."""
    duration_meets_goal = duration_hours >= schedule.target_duration_hours
    if duration_meets_goal and is_sleep_within_windows(
        actual_start, actual_end, schedule, tz
    ):
        return SleepRating.PERFECT
    if duration_meets_goal:
        return SleepRating.GOOD
    if schedule.target_duration_hours - duration_hours <= SHORTFALL_TOLERANCE_HOURS:
        return SleepRating.OK
    return SleepRating.NOT_MEET


def is_sleep_within_windows(
    actual_start: datetime,
    actual_end: datetime,
    schedule: GoalSchedule,
    tz: tzinfo | None = None,
) -> bool:
    """Return True when sleep started and ended inside the buffered windows.

    Only the clock time (hour and minute) of each timestamp is compared; the
    calendar date is discarded.
    """
    if schedule.bedtime_window.is_zero_width or schedule.wake_window.is_zero_width:
        return False
    if tz is not None:
        actual_start = to_local(actual_start, tz)
        actual_end = to_local(actual_end, tz)
    bedtime = buffer_window(schedule.bedtime_window)
    wake = buffer_window(schedule.wake_window)
    return is_time_in_window(_clock_time(actual_start), bedtime) and is_time_in_window(
        _clock_time(actual_end), wake
    )


def buffer_window(window: TimeWindow, minutes: int = BUFFER_MINUTES) -> TimeWindow:
    """Widen a window on both sides, wrapping around midnight."""
    return TimeWindow(
        start=_shift(window.start, -minutes),
        end=_shift(window.end, minutes),
    )


def is_time_in_window(value: time, window: TimeWindow) -> bool:
    """Inclusive membership test; `start > end` means the window spans midnight."""
    if window.start > window.end:
        return value >= window.start or value <= window.end
    return window.start <= value <= window.end


def _shift(value: time, minutes: int) -> time:
    total = (value.hour * 60 + value.minute + minutes) % _MINUTES_PER_DAY
    return time(total // 60, total % 60)


def _clock_time(value: datetime) -> time:
    return time(value.hour, value.minute)
