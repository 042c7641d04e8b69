"""Supabase repository for raw sleep sessions."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from sleep_score.domain.sleep import SleepSession
from sleep_score.services.sleep_days import SleepSessionRepository


@dataclass
class SupabaseSleepSessionRepository(SleepSessionRepository):
    """Supabase implementation for device sleep sessions."""

    client: Client

    def list_sessions(self, start: datetime, end: datetime) -> list[SleepSession]:
        """Return sessions starting in the time range."""
        response = (
            self.client.table("sleep_sessions")
            .select("start_at, end_at, source_label")
            .gte("start_at", start.isoformat())
            .lt("start_at", end.isoformat())
            .order("start_at", desc=False)
            .execute()
        )
        return [
            session
            for session in (_parse_row(row) for row in response.data or [])
            if session is not None
        ]


def _parse_row(row: dict[str, object]) -> SleepSession | None:
    start_raw = row.get("start_at")
    end_raw = row.get("end_at")
    if not isinstance(start_raw, str) or not isinstance(end_raw, str):
        return None
    return SleepSession(
        start=datetime.fromisoformat(start_raw),
        end=datetime.fromisoformat(end_raw),
        source_label=str(row.get("source_label") or ""),
    )
