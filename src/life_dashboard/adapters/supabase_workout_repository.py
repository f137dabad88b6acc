"""Supabase repository for scheduled workouts."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from life_dashboard.dates import date_key, parse_date_key
from life_dashboard.domain.workouts import Exercise, ScheduledWorkout
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.workouts import WorkoutRepository

_COLUMNS = (
    "id, user_id, scheduled_date, name, workout_type, exercises, status, "
    "estimated_duration, notes"
)
_STATUSES = ("scheduled", "completed", "skipped")


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    """Supabase implementation for scheduled workouts."""

    client: Client

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ScheduledWorkout]:
        """Return workouts with ``start <= scheduled_date <= end``."""
        response = (
            self.client.table("scheduled_workouts")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("scheduled_date", date_key(start))
            .lte("scheduled_date", date_key(end))
            .order("scheduled_date", desc=False)
            .execute()
        )
        workouts = [_parse_row(row) for row in response.data or []]
        return [workout for workout in workouts if workout is not None]


def _parse_row(row: dict[str, object]) -> ScheduledWorkout | None:
    scheduled_date = parse_date_key(row.get("scheduled_date"))
    if scheduled_date is None:
        return None
    status = row.get("status")
    exercises = [
        _parse_exercise(item)
        for item in row.get("exercises") or []
        if isinstance(item, dict)
    ]
    return ScheduledWorkout(
        id=str(row.get("id", "")),
        user_id=str(row.get("user_id", "")),
        scheduled_date=scheduled_date,
        name=str(row.get("name") or ""),
        workout_type=str(row.get("workout_type") or ""),
        exercises=tuple(sorted(exercises, key=lambda exercise: exercise.order)),
        status=status if status in _STATUSES else "scheduled",
        estimated_duration=int(to_non_negative_float(row.get("estimated_duration"))),
        notes=row.get("notes") or None,
    )


def _parse_exercise(item: dict[str, object]) -> Exercise:
    return Exercise(
        order=int(to_non_negative_float(item.get("order"))),
        name=str(item.get("name") or ""),
        kg=to_non_negative_float(item.get("kg")),
        sets=int(to_non_negative_float(item.get("sets"))),
        reps=int(to_non_negative_float(item.get("reps"))),
        rest=int(to_non_negative_float(item.get("rest"))),
        notes=item.get("notes") or None,
    )
