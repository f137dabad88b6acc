"""Dashboard orchestration: source loading, calendar and completion toggles."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import TypeVar

from life_dashboard.dates import GRID_DAYS, month_grid_start, today_in
from life_dashboard.domain.activities import ActivityType
from life_dashboard.domain.calendar import CalendarDay, MonthSources
from life_dashboard.domain.nutrition import FoodCatalog
from life_dashboard.services.activities import (
    ActivityCompletionStore,
    ActivityHistoryRepository,
    MealPlanRepository,
)
from life_dashboard.services.calendar import CalendarAggregator
from life_dashboard.services.catalog import FoodCatalogService
from life_dashboard.services.reconciler import DayReconciler
from life_dashboard.services.schedule import ScheduledActivitiesRepository
from life_dashboard.services.stats import FinanceRepository
from life_dashboard.services.workouts import WorkoutRepository

_logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")


@dataclass(frozen=True)
class DashboardContext:
    """Shared read-only state for one render pass."""

    user_id: str
    today: date
    catalog: FoodCatalog


@dataclass
class DashboardService:
    """Loads every dashboard source and reconciles them into calendar days.

    Each source is fetched independently. A source that fails to load is
    logged and treated as empty so the remaining sources still render.
    """

    user_id: str
    timezone: str
    meal_plan_repository: MealPlanRepository
    schedule_repository: ScheduledActivitiesRepository
    workout_repository: WorkoutRepository
    history_repository: ActivityHistoryRepository
    finance_repository: FinanceRepository
    catalog_service: FoodCatalogService
    aggregator: CalendarAggregator = field(default_factory=CalendarAggregator)
    reconciler: DayReconciler = field(default_factory=DayReconciler)
    clock: Callable[[str], date] = today_in

    def today(self) -> date:
        """Return today's date in the configured timezone."""
        return self.clock(self.timezone)

    def context(self) -> DashboardContext:
        """Return the context shared by calculators during one pass."""
        return DashboardContext(
            user_id=self.user_id,
            today=self.today(),
            catalog=self.catalog_service.get_catalog(),
        )

    def load_sources(self, start: date, end: date) -> MonthSources:
        """Fetch all sources for ``start <= date <= end``."""
        user_id = self.user_id
        return MonthSources(
            meal_plans=self._fetch_or_empty(
                "meal_plans",
                lambda: self.meal_plan_repository.list_plans(user_id, start, end),
            ),
            scheduled_activities=self._fetch_or_empty(
                "scheduled_activities",
                lambda: self.schedule_repository.list_for_range(user_id, start, end),
            ),
            workouts=self._fetch_or_empty(
                "scheduled_workouts",
                lambda: self.workout_repository.list_for_range(user_id, start, end),
            ),
            history=self._fetch_or_empty(
                "activity_history",
                lambda: self.history_repository.list_for_range(user_id, start, end),
            ),
            finance_transactions=self._fetch_or_empty(
                "finance_transactions",
                lambda: self.finance_repository.list_transactions(user_id, start, end),
            ),
        )

    def build_calendar(self, year: int, month: int) -> tuple[CalendarDay, ...]:
        """Return the 42-cell grid for a month, including adjacent-month days."""
        start = month_grid_start(year, month)
        end = start + timedelta(days=GRID_DAYS - 1)
        sources = self.load_sources(start, end)
        return self.aggregator.build_month(year, month, sources, self.today())

    def get_day(self, day: date) -> CalendarDay:
        """Return the reconciled state of a single date."""
        sources = self.load_sources(day, day)
        return self._reconcile(day, sources)

    def completion_store(self, day: date) -> ActivityCompletionStore:
        """Return a completion store seeded with the date's history and plan."""
        sources = self.load_sources(day, day)
        return self._seeded_store(sources)

    async def toggle_activity(
        self, day: date, activity_type: ActivityType, completed: bool
    ) -> CalendarDay:
        """Persist a completion toggle and return the updated day."""
        sources = self.load_sources(day, day)
        store = self._seeded_store(sources)
        try:
            await store.toggle(day, activity_type, completed)
        finally:
            store.close()
        updated = replace(
            sources,
            history=tuple(store.records),
            meal_plans=tuple(store.meal_plans),
        )
        self.aggregator.invalidate()
        return self._reconcile(day, updated)

    def _seeded_store(self, sources: MonthSources) -> ActivityCompletionStore:
        return ActivityCompletionStore(
            user_id=self.user_id,
            history_repository=self.history_repository,
            meal_plan_repository=self.meal_plan_repository,
            records=list(sources.history),
            meal_plans=list(sources.meal_plans),
        )

    def _reconcile(self, day: date, sources: MonthSources) -> CalendarDay:
        today = self.today()
        return self.reconciler.reconcile(
            day,
            sources.for_day(day),
            is_current_month=day.year == today.year and day.month == today.month,
            is_today=day == today,
        )

    def _fetch_or_empty(
        self, label: str, fetch: Callable[[], list[ItemT]]
    ) -> tuple[ItemT, ...]:
        try:
            return tuple(fetch())
        except Exception:
            _logger.warning(
                "Source unavailable, treating as empty: %s", label, exc_info=True
            )
            return ()
