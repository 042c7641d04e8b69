"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from sleep_score.adapters.supabase_goal_repository import SupabaseGoalRepository
from sleep_score.adapters.supabase_sleep_session_repository import (
    SupabaseSleepSessionRepository,
)
from sleep_score.config import Settings, resolve_timezone
from sleep_score.services.goals import GoalService
from sleep_score.services.sleep_days import SleepDayService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    goal_service: GoalService
    sleep_day_service: SleepDayService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = resolve_timezone(resolved_settings.timezone)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    goal_service = GoalService(
        SupabaseGoalRepository(supabase_client, key=resolved_settings.goal_storage_key)
    )
    sleep_day_service = SleepDayService(
        repository=SupabaseSleepSessionRepository(supabase_client),
        goal_service=goal_service,
        timezone_name=timezone.key,
        lookback_days=resolved_settings.session_lookback_days,
    )
    return AppContainer(
        settings=resolved_settings,
        goal_service=goal_service,
        sleep_day_service=sleep_day_service,
    )
