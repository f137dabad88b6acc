"""Reconcile one day's sources into a calendar cell.

Four sources are updated independently: the legacy meal plan, the scheduled
tasks document, scheduled workouts and the activity history. Completion state
comes only from activity history. Whether an activity is scheduled is decided
by the rules in ``SCHEDULE_RULES``; any matching rule is enough.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime

from life_dashboard.domain.activities import (
    MEAL_ACTIVITIES,
    ActivityHistoryRecord,
    ActivityType,
)
from life_dashboard.domain.calendar import (
    CalendarDay,
    CalendarEvent,
    DaySources,
    FinanceDayData,
    FoodDayData,
    GymDayData,
    ModuleData,
)
from life_dashboard.domain.workouts import ScheduledWorkout

TOTAL_MEALS = len(MEAL_ACTIVITIES)

EVENT_TITLES: dict[ActivityType, str] = {
    ActivityType.MEAL_6PM: "6pm Meal",
    ActivityType.MEAL_930PM: "9:30pm Meal",
    ActivityType.GYM: "Gym Session",
    ActivityType.MORNING: "Morning Routine",
}

ActivityMap = Mapping[ActivityType, bool]
ScheduleRule = Callable[[ActivityType, DaySources, ActivityMap], bool]


def build_activity_map(
    history: Sequence[ActivityHistoryRecord],
) -> dict[ActivityType, bool]:
    """Return ``activity_type -> completed`` with one entry per type.

    When several records exist for a type, the latest ``updated_at`` wins.
    Equal timestamps resolve to the completed record so that the result does
    not depend on the order the records were read in.
    """
    latest: dict[ActivityType, ActivityHistoryRecord] = {}
    for record in history:
        current = latest.get(record.activity_type)
        if current is None or _write_order(record) > _write_order(current):
            latest[record.activity_type] = record
    return {
        activity_type: record.completed for activity_type, record in latest.items()
    }


def _write_order(record: ActivityHistoryRecord) -> tuple[datetime, bool]:
    written = record.updated_at or datetime.min
    if written.tzinfo is not None:
        written = written.astimezone(UTC).replace(tzinfo=None)
    return written, record.completed


def _in_scheduled_tasks(
    activity: ActivityType, sources: DaySources, _activity_map: ActivityMap
) -> bool:
    scheduled = sources.scheduled_activities
    if scheduled is None:
        return False
    return any(ActivityType.from_task(task) is activity for task in scheduled.tasks)


def _plan_has_foods(
    activity: ActivityType, sources: DaySources, _activity_map: ActivityMap
) -> bool:
    plan = sources.legacy_plan
    if plan is None or not activity.is_meal:
        return False
    slot = plan.timeslots.get(activity.value)
    return slot is not None and slot.has_foods


def _has_history_entry(
    activity: ActivityType, _sources: DaySources, activity_map: ActivityMap
) -> bool:
    return activity in activity_map


SCHEDULE_RULES: tuple[tuple[str, ScheduleRule], ...] = (
    ("scheduled_task", _in_scheduled_tasks),
    ("plan_has_foods", _plan_has_foods),
    ("history_entry", _has_history_entry),
)


def schedule_reasons(
    activity: ActivityType, sources: DaySources, activity_map: ActivityMap
) -> tuple[str, ...]:
    """Return the names of the rules that mark an activity as scheduled."""
    return tuple(
        name for name, rule in SCHEDULE_RULES if rule(activity, sources, activity_map)
    )


def is_scheduled(
    activity: ActivityType, sources: DaySources, activity_map: ActivityMap
) -> bool:
    """Return True when any scheduling rule matches."""
    return bool(schedule_reasons(activity, sources, activity_map))


@dataclass(frozen=True)
class DayReconciler:
    """Merges the sources of one date into a ``CalendarDay``."""

    total_meals: int = TOTAL_MEALS

    def reconcile(
        self,
        day: date,
        sources: DaySources,
        *,
        is_current_month: bool = True,
        is_today: bool = False,
    ) -> CalendarDay:
        """Return the reconciled calendar cell for ``day``."""
        activity_map = build_activity_map(
            [record for record in sources.history if record.date == day]
        )
        workouts = sorted(
            (
                workout
                for workout in sources.workouts
                if workout.scheduled_date == day
            ),
            key=lambda workout: (workout.name, workout.id),
        )
        events: list[CalendarEvent] = []

        meals_with_plan = 0
        for activity in MEAL_ACTIVITIES:
            reasons = schedule_reasons(activity, sources, activity_map)
            if not reasons:
                continue
            if "scheduled_task" in reasons or "plan_has_foods" in reasons:
                meals_with_plan += 1
            events.append(
                CalendarEvent(
                    type="food",
                    title=EVENT_TITLES[activity],
                    completed=activity_map.get(activity, False),
                )
            )

        gym_completed = activity_map.get(ActivityType.GYM, False)
        gym_scheduled = is_scheduled(ActivityType.GYM, sources, activity_map)
        events.extend(_gym_events(workouts, gym_scheduled, gym_completed))

        if is_scheduled(ActivityType.MORNING, sources, activity_map):
            events.append(
                CalendarEvent(
                    type="other",
                    title=EVENT_TITLES[ActivityType.MORNING],
                    completed=activity_map.get(ActivityType.MORNING, False),
                )
            )

        transactions = [
            item for item in sources.finance_transactions if item.date == day
        ]
        finance: FinanceDayData | None = None
        if transactions:
            finance = FinanceDayData(
                count=len(transactions),
                total_amount=sum(item.amount for item in transactions),
            )
            events.append(
                CalendarEvent(
                    type="finance",
                    title=f"{len(transactions)} transactions",
                    completed=True,
                )
            )

        completed_meals = sum(
            1 for activity in MEAL_ACTIVITIES if activity_map.get(activity) is True
        )
        scheduled = sources.scheduled_activities
        return CalendarDay(
            date=day,
            is_current_month=is_current_month,
            is_today=is_today,
            events=tuple(events),
            scheduled_tasks=tuple(scheduled.tasks) if scheduled is not None else (),
            module_data=ModuleData(
                food=FoodDayData(
                    has_meal_plan=meals_with_plan > 0,
                    completed_meals=min(completed_meals, self.total_meals),
                    total_meals=self.total_meals,
                ),
                gym=GymDayData(
                    has_workout=gym_scheduled or bool(workouts),
                    completed=gym_completed,
                    workout_count=len(workouts),
                ),
                finance=finance,
            ),
        )


def _gym_events(
    workouts: list[ScheduledWorkout], scheduled: bool, completed: bool
) -> list[CalendarEvent]:
    if workouts:
        return [
            CalendarEvent(
                type="gym",
                title=workout.name.strip() or EVENT_TITLES[ActivityType.GYM],
                completed=completed,
            )
            for workout in workouts
        ]
    if scheduled:
        return [
            CalendarEvent(
                type="gym",
                title=EVENT_TITLES[ActivityType.GYM],
                completed=completed,
            )
        ]
    return []
