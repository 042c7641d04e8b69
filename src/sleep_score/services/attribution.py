"""Attribution of sleep sessions to the calendar day they count toward."""

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from sleep_score.domain.goals import GoalSchedule, TimeWindow
from sleep_score.domain.sleep import (
    Attribution,
    AttributionRule,
    DayGroup,
    SleepSession,
    to_local,
)

EARLY_MORNING_CUTOFF = time(6, 0)

_logger = logging.getLogger(__name__)


def anchor_window(
    window: TimeWindow, day: date, tz: tzinfo
) -> tuple[datetime, datetime]:
    """Turn a time-of-day window into concrete timestamps starting on `day`."""
    start = datetime.combine(day, window.start, tzinfo=tz)
    end_day = day + timedelta(days=1) if window.spans_midnight else day
    end = datetime.combine(end_day, window.end, tzinfo=tz)
    return start, end


def overlap_seconds(
    session_start: datetime,
    session_end: datetime,
    window_start: datetime,
    window_end: datetime,
) -> float:
    """Return the overlap of two intervals in seconds, never negative."""
    overlap_start = max(session_start.astimezone(UTC), window_start.astimezone(UTC))
    overlap_end = min(session_end.astimezone(UTC), window_end.astimezone(UTC))
    return max(0.0, (overlap_end - overlap_start).total_seconds())


def attribute_session(
    session: SleepSession, schedule: GoalSchedule, tz: tzinfo
) -> Attribution:
    """Decide which calendar day a session is credited to.

    Rules are evaluated in order and the first match wins:

    1. A session starting before 06:00 local continues the previous night.
    2. A session overlapping the previous day's bedtime window belongs to the
       previous day.
    3. A session starting before the current day's bedtime window closes also
       belongs to the previous day, even with no overlap at all.
    4. Otherwise the session belongs to the day it started on.
    """
    start = to_local(session.start, tz)
    end = to_local(session.end, tz)
    current_day = start.date()
    previous_day = current_day - timedelta(days=1)

    if start.time() < EARLY_MORNING_CUTOFF:
        return Attribution(day=previous_day, rule=AttributionRule.EARLY_MORNING)

    previous_start, previous_end = anchor_window(
        schedule.bedtime_window, previous_day, tz
    )
    current_start, current_end = anchor_window(schedule.bedtime_window, current_day, tz)
    overlap_previous = overlap_seconds(start, end, previous_start, previous_end)
    overlap_current = overlap_seconds(start, end, current_start, current_end)

    if overlap_previous > 0:
        rule = AttributionRule.PREVIOUS_WINDOW_OVERLAP
    elif start.astimezone(UTC) < current_end.astimezone(UTC):
        rule = AttributionRule.BEFORE_CURRENT_WINDOW_END
    else:
        rule = AttributionRule.CURRENT_DAY
    day = current_day if rule is AttributionRule.CURRENT_DAY else previous_day
    return Attribution(
        day=day,
        rule=rule,
        overlap_previous_seconds=overlap_previous,
        overlap_current_seconds=overlap_current,
    )


def group_sessions(
    sessions: Iterable[SleepSession], schedule: GoalSchedule, tz: tzinfo
) -> list[DayGroup]:
    """Attribute every session and group them by day, newest day first.

    Sessions are localized to `tz` on the way in, so grouped sessions always
    carry aware timestamps.
    """
    grouped: dict[date, list[SleepSession]] = {}
    for raw in sessions:
        session = raw.localized(tz)
        if not session.is_well_formed:
            _logger.warning(
                "Dropping malformed sleep session: start=%s end=%s source=%s",
                session.start.isoformat(),
                session.end.isoformat(),
                session.source_label,
            )
            continue
        attribution = attribute_session(session, schedule, tz)
        _logger.debug(
            "Attributed session %s-%s to %s via %s "
            "(overlap previous=%.0fs current=%.0fs)",
            session.start.isoformat(),
            session.end.isoformat(),
            attribution.day.isoformat(),
            attribution.rule.value,
            attribution.overlap_previous_seconds,
            attribution.overlap_current_seconds,
        )
        grouped.setdefault(attribution.day, []).append(session)

    return [
        DayGroup(
            day=day,
            sessions=tuple(sorted(grouped[day], key=lambda item: item.start)),
        )
        for day in sorted(grouped, reverse=True)
    ]
