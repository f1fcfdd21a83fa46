"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.mira_estimation_client import HttpxMiraEstimationClient
from macro_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from macro_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from macro_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_tracker.config import Settings
from macro_tracker.services.auth import AuthService
from macro_tracker.services.estimation import EstimationService
from macro_tracker.services.meals import MealService
from macro_tracker.services.profiles import ProfileService
from macro_tracker.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    estimation_service: EstimationService
    meal_service: MealService
    profile_service: ProfileService
    tracker_service: TrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_service = MealService(SupabaseMealRepository(supabase_client))
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    # Sign-ins store a session on the client, so auth gets its own.
    auth_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    auth_service = AuthService(SupabaseAuthGateway(auth_client))
    estimation_client = HttpxMiraEstimationClient.create(
        api_key=resolved_settings.estimation_api_key,
        url=resolved_settings.estimation_api_url,
        version=resolved_settings.estimation_api_version,
        timeout_seconds=resolved_settings.estimation_timeout_seconds,
    )
    estimation_service = EstimationService(
        client=estimation_client,
        debug=resolved_settings.debug_estimation,
    )
    tracker_service = TrackerService(
        meal_service=meal_service,
        profile_service=profile_service,
    )

    async def close_resources() -> None:
        await estimation_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        estimation_service=estimation_service,
        meal_service=meal_service,
        profile_service=profile_service,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )
