"""Supabase key-value storage for the sleep goal."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from sleep_score.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Stores the goal as a JSON blob in the app_settings table."""

    client: Client
    key: str = "SleepGoal"

    def load(self) -> dict[str, object] | None:
        """Return the stored goal payload."""
        response = (
            self.client.table("app_settings")
            .select("value")
            .eq("key", self.key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, dict) else None

    def save(self, payload: dict[str, object]) -> None:
        """Insert or replace the goal payload."""
        response = (
            self.client.table("app_settings")
            .upsert(
                {
                    "key": self.key,
                    "value": payload,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save sleep goal")
