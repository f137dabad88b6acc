"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from life_dashboard.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from life_dashboard.adapters.supabase_activity_history_repository import (
    SupabaseActivityHistoryRepository,
)
from life_dashboard.adapters.supabase_consumption_repository import (
    SupabaseConsumptionRepository,
)
from life_dashboard.adapters.supabase_food_repository import SupabaseFoodRepository
from life_dashboard.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from life_dashboard.adapters.supabase_schedule_repository import (
    SupabaseScheduleRepository,
)
from life_dashboard.adapters.supabase_tracking_repository import (
    SupabaseFinanceRepository,
    SupabaseWaterRepository,
)
from life_dashboard.adapters.supabase_workout_repository import (
    SupabaseWorkoutRepository,
)
from life_dashboard.config import Settings
from life_dashboard.services.cache import InMemoryCache
from life_dashboard.services.catalog import FoodCatalogService, FoodLookupService
from life_dashboard.services.costs import CostService
from life_dashboard.services.dashboard import DashboardService
from life_dashboard.services.schedule import ScheduleService
from life_dashboard.services.stats import StatsService
from life_dashboard.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    dashboard_service: DashboardService
    catalog_service: FoodCatalogService
    food_lookup_service: FoodLookupService
    cost_service: CostService
    stats_service: StatsService
    schedule_service: ScheduleService
    workout_service: WorkoutService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    history_repository = SupabaseActivityHistoryRepository(supabase_client)
    finance_repository = SupabaseFinanceRepository(supabase_client)
    schedule_repository = SupabaseScheduleRepository(supabase_client)
    workout_repository = SupabaseWorkoutRepository(supabase_client)
    cache = InMemoryCache()
    catalog_service = FoodCatalogService(
        repository=SupabaseFoodRepository(supabase_client),
        cache=cache,
        ttl_seconds=resolved_settings.catalog_ttl_seconds,
    )
    dashboard_service = DashboardService(
        user_id=resolved_settings.dashboard_user_id,
        timezone=resolved_settings.timezone,
        meal_plan_repository=SupabaseMealPlanRepository(supabase_client),
        schedule_repository=schedule_repository,
        workout_repository=workout_repository,
        history_repository=history_repository,
        finance_repository=finance_repository,
        catalog_service=catalog_service,
    )
    open_food_facts_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.open_food_facts_base_url
    )
    food_lookup_service = FoodLookupService(client=open_food_facts_client, cache=cache)
    stats_service = StatsService(
        history_repository=history_repository,
        finance_repository=finance_repository,
        water_repository=SupabaseWaterRepository(supabase_client),
        window_days=resolved_settings.history_window_days,
    )

    async def close_resources() -> None:
        await open_food_facts_client.close()

    return AppContainer(
        settings=resolved_settings,
        dashboard_service=dashboard_service,
        catalog_service=catalog_service,
        food_lookup_service=food_lookup_service,
        cost_service=CostService(SupabaseConsumptionRepository(supabase_client)),
        stats_service=stats_service,
        schedule_service=ScheduleService(schedule_repository),
        workout_service=WorkoutService(workout_repository),
        close_resources=close_resources,
    )
