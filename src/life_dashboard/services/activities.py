"""Activity completion toggling with optimistic local state."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from life_dashboard.domain.activities import (
    MEAL_ACTIVITIES,
    ActivityHistoryRecord,
    ActivityType,
)
from life_dashboard.domain.nutrition import MealPlan, SelectedFood, TimeslotMealData
from life_dashboard.services.reconciler import build_activity_map

_logger = logging.getLogger(__name__)

PLACEHOLDER_FOOD = SelectedFood(name="Quick Meal", amount=1)

HistoryListener = Callable[[list[ActivityHistoryRecord]], None]


class ActivityPersistenceError(RuntimeError):
    """Raised when an activity completion could not be written."""


class ActivityHistoryRepository(Protocol):
    """Persistence interface for activity history records."""

    def upsert(self, record: ActivityHistoryRecord) -> None:
        """Insert or replace the record keyed by user, date and activity."""

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ActivityHistoryRecord]:
        """Return records with ``start <= date <= end``."""


class MealPlanRepository(Protocol):
    """Persistence interface for legacy per-day meal plans."""

    def get_plan(self, user_id: str, day: date) -> MealPlan | None:
        """Return the plan for a date, if present."""

    def list_plans(self, user_id: str, start: date, end: date) -> list[MealPlan]:
        """Return plans with ``start <= date <= end``."""

    def save_plan(self, plan: MealPlan) -> None:
        """Create or replace the plan for its date."""


@dataclass
class ActivityCompletionStore:
    """Sole writer of activity history.

    Toggles update the in-memory history before the write is awaited. A
    failed write raises ``ActivityPersistenceError`` and leaves the optimistic
    entry in place; the next authoritative snapshot corrects it. Completing a
    meal on a day the store confirms has no plan saves a placeholder plan.
    """

    user_id: str
    history_repository: ActivityHistoryRepository
    meal_plan_repository: MealPlanRepository
    records: list[ActivityHistoryRecord] = field(default_factory=list)
    meal_plans: list[MealPlan] = field(default_factory=list)
    _listeners: list[HistoryListener] = field(
        default_factory=list, init=False, repr=False
    )
    _closed: bool = field(default=False, init=False, repr=False)

    async def toggle(
        self, day: date, activity_type: ActivityType, completed: bool
    ) -> None:
        """Persist the completion state of an activity on a date."""
        record = ActivityHistoryRecord(
            user_id=self.user_id,
            date=day,
            activity_type=activity_type,
            completed=completed,
            updated_at=datetime.now(tz=UTC),
        )
        self._replace_or_insert(record)
        try:
            await asyncio.to_thread(self.history_repository.upsert, record)
        except Exception as exc:
            _logger.exception(
                "Failed to save activity history: date=%s activity=%s",
                day,
                activity_type,
            )
            raise ActivityPersistenceError(
                f"Failed to save activity history: {exc}"
            ) from exc

        if activity_type.is_meal and completed and self._plan_for(day) is None:
            await self._ensure_plan(day, activity_type)

        if self._closed:
            _logger.info("Activity write finished after store was closed")
            return
        self._notify()

    def activity_map(self, day: date) -> dict[ActivityType, bool]:
        """Return the completion map for a date from in-memory history."""
        return build_activity_map(self.history_for(day))

    def history_for(self, day: date) -> list[ActivityHistoryRecord]:
        """Return in-memory history records for a date."""
        return [record for record in self.records if record.date == day]

    def apply_snapshot(
        self,
        records: list[ActivityHistoryRecord],
        meal_plans: list[MealPlan] | None = None,
    ) -> None:
        """Replace local state with an authoritative snapshot from the store."""
        self.records = list(records)
        if meal_plans is not None:
            self.meal_plans = list(meal_plans)
        if not self._closed:
            self._notify()

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach listeners; pending writes may still complete."""
        self._closed = True
        self._listeners.clear()

    def _replace_or_insert(self, record: ActivityHistoryRecord) -> None:
        self.records = [
            existing
            for existing in self.records
            if not (
                existing.user_id == record.user_id
                and existing.date == record.date
                and existing.activity_type == record.activity_type
            )
        ]
        self.records.append(record)

    def _plan_for(self, day: date) -> MealPlan | None:
        return next((plan for plan in self.meal_plans if plan.date == day), None)

    async def _ensure_plan(self, day: date, activity_type: ActivityType) -> None:
        # An empty local list may only mean the plan fetch failed; the placeholder
        # is written only once the store confirms no plan exists.
        try:
            stored = await asyncio.to_thread(
                self.meal_plan_repository.get_plan, self.user_id, day
            )
        except Exception:
            _logger.warning(
                "Meal plan lookup failed, placeholder skipped: date=%s",
                day,
                exc_info=True,
            )
            return
        if stored is not None:
            self.meal_plans.append(stored)
            return
        await self._create_placeholder_plan(day, activity_type)

    async def _create_placeholder_plan(
        self, day: date, activity_type: ActivityType
    ) -> None:
        # Other views rely on a plan existing once a meal is marked complete.
        plan = MealPlan(
            user_id=self.user_id,
            date=day,
            timeslots={
                meal.value: TimeslotMealData(
                    selected_foods=(PLACEHOLDER_FOOD,) if meal is activity_type else ()
                )
                for meal in MEAL_ACTIVITIES
            },
        )
        try:
            await asyncio.to_thread(self.meal_plan_repository.save_plan, plan)
        except Exception as exc:
            _logger.exception("Failed to create placeholder meal plan: date=%s", day)
            raise ActivityPersistenceError(
                f"Failed to create placeholder meal plan: {exc}"
            ) from exc
        self.meal_plans.append(plan)
        _logger.info(
            "Created placeholder meal plan: date=%s slot=%s", day, activity_type
        )

    def _notify(self) -> None:
        snapshot = list(self.records)
        for listener in list(self._listeners):
            listener(snapshot)
