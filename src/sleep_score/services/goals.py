"""Sleep goal configuration service."""

import logging
from dataclasses import dataclass, field
from datetime import time
from typing import Protocol

from sleep_score.domain.goals import GoalSchedule, TimeWindow

_logger = logging.getLogger(__name__)


class GoalRepository(Protocol):
    """Key-value storage for the goal blob."""

    def load(self) -> dict[str, object] | None:
        """Return the stored goal payload, if any."""

    def save(self, payload: dict[str, object]) -> None:
        """Persist the goal payload."""


@dataclass
class GoalService:
    """Hands out immutable goal snapshots and persists explicit updates."""

    repository: GoalRepository
    _schedule: GoalSchedule | None = field(default=None, init=False, repr=False)

    def get_schedule(self) -> GoalSchedule:
        """Return the current goal, loading it on first use."""
        if self._schedule is None:
            self._schedule = self._load()
        return self._schedule

    def update_schedule(self, schedule: GoalSchedule) -> GoalSchedule:
        """Persist a new goal and make it the current snapshot."""
        validate_schedule(schedule)
        self.repository.save(goal_to_payload(schedule))
        self._schedule = schedule
        _logger.info(
            "Sleep goal updated: bedtime=%s wake=%s target=%sh",
            _format_window(schedule.bedtime_window),
            _format_window(schedule.wake_window),
            schedule.target_duration_hours,
        )
        return schedule

    def _load(self) -> GoalSchedule:
        payload = self.repository.load()
        if payload is None:
            return GoalSchedule.default()
        try:
            return parse_goal_payload(payload)
        except (KeyError, TypeError, ValueError):
            _logger.warning("Stored sleep goal is unreadable; using defaults")
            return GoalSchedule.default()


def validate_schedule(schedule: GoalSchedule) -> None:
    """Reject goals the engine cannot rate against."""
    if schedule.target_duration_hours <= 0:
        raise ValueError("target_duration_hours must be positive")


def goal_to_payload(schedule: GoalSchedule) -> dict[str, object]:
    """Serialize a goal into a JSON-compatible mapping."""
    return {
        "bedtime_start": format_clock(schedule.bedtime_window.start),
        "bedtime_end": format_clock(schedule.bedtime_window.end),
        "wake_start": format_clock(schedule.wake_window.start),
        "wake_end": format_clock(schedule.wake_window.end),
        "target_duration_hours": schedule.target_duration_hours,
    }


def parse_goal_payload(payload: dict[str, object]) -> GoalSchedule:
    """Build a goal from its stored mapping."""
    schedule = GoalSchedule(
        bedtime_window=TimeWindow(
            start=parse_clock(str(payload["bedtime_start"])),
            end=parse_clock(str(payload["bedtime_end"])),
        ),
        wake_window=TimeWindow(
            start=parse_clock(str(payload["wake_start"])),
            end=parse_clock(str(payload["wake_end"])),
        ),
        target_duration_hours=float(payload["target_duration_hours"]),  # type: ignore[arg-type]
    )
    validate_schedule(schedule)
    return schedule


def parse_clock(raw: str) -> time:
    """Parse an HH:MM clock time, dropping any seconds."""
    value = time.fromisoformat(raw.strip())
    return time(value.hour, value.minute)


def format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def _format_window(window: TimeWindow) -> str:
    return f"{format_clock(window.start)}-{format_clock(window.end)}"
