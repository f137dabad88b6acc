"""Calendar view models derived from the dashboard sources."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

from life_dashboard.domain.activities import ActivityHistoryRecord, ScheduledActivities
from life_dashboard.domain.nutrition import MealPlan
from life_dashboard.domain.tracking import FinanceTransaction
from life_dashboard.domain.workouts import ScheduledWorkout

EventType = Literal["food", "gym", "finance", "other"]


@dataclass(frozen=True)
class CalendarEvent:
    """Single activity shown on a calendar cell."""

    type: EventType
    title: str
    completed: bool


@dataclass(frozen=True)
class FoodDayData:
    """Meal summary for a day."""

    has_meal_plan: bool
    completed_meals: int
    total_meals: int


@dataclass(frozen=True)
class GymDayData:
    """Workout summary for a day."""

    has_workout: bool
    completed: bool
    workout_count: int = 0


@dataclass(frozen=True)
class FinanceDayData:
    """Transaction summary for a day."""

    count: int
    total_amount: float


@dataclass(frozen=True)
class ModuleData:
    """Per-module summaries for a day."""

    food: FoodDayData | None = None
    gym: GymDayData | None = None
    finance: FinanceDayData | None = None


@dataclass(frozen=True)
class CalendarDay:
    """Reconciled state of one calendar cell."""

    date: date
    is_current_month: bool
    is_today: bool
    events: tuple[CalendarEvent, ...]
    scheduled_tasks: tuple[str, ...]
    module_data: ModuleData

    @property
    def day_number(self) -> int:
        """Return the day of the month."""
        return self.date.day

    @property
    def has_events(self) -> bool:
        """Return True when the day has any event."""
        return len(self.events) > 0


@dataclass(frozen=True)
class DaySources:
    """The independently updated inputs for one date."""

    legacy_plan: MealPlan | None = None
    scheduled_activities: ScheduledActivities | None = None
    workouts: tuple[ScheduledWorkout, ...] = ()
    history: tuple[ActivityHistoryRecord, ...] = ()
    finance_transactions: tuple[FinanceTransaction, ...] = ()


@dataclass(frozen=True)
class MonthSources:
    """Source collections covering a month grid."""

    meal_plans: tuple[MealPlan, ...] = ()
    scheduled_activities: tuple[ScheduledActivities, ...] = ()
    workouts: tuple[ScheduledWorkout, ...] = ()
    history: tuple[ActivityHistoryRecord, ...] = ()
    finance_transactions: tuple[FinanceTransaction, ...] = ()

    def for_day(self, day: date) -> DaySources:
        """Select the sources that belong to one date."""
        return DaySources(
            legacy_plan=next(
                (plan for plan in self.meal_plans if plan.date == day), None
            ),
            scheduled_activities=next(
                (item for item in self.scheduled_activities if item.date == day),
                None,
            ),
            workouts=tuple(
                workout for workout in self.workouts if workout.scheduled_date == day
            ),
            history=tuple(record for record in self.history if record.date == day),
            finance_transactions=tuple(
                item for item in self.finance_transactions if item.date == day
            ),
        )
