"""Workout history statistics."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from life_dashboard.domain.workouts import ScheduledWorkout, WorkoutStatistics
from life_dashboard.numbers import round_half_up


class WorkoutRepository(Protocol):
    """Persistence interface for scheduled workouts."""

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ScheduledWorkout]:
        """Return workouts with ``start <= scheduled_date <= end``."""


def summarize_workouts(workouts: Sequence[ScheduledWorkout]) -> WorkoutStatistics:
    """Summarise statuses, types and the average completed duration."""
    if not workouts:
        return WorkoutStatistics(
            total_workouts=0,
            completed_workouts=0,
            skipped_workouts=0,
            completion_rate=0,
            workout_type_breakdown={},
            average_duration=0,
        )
    completed = [workout for workout in workouts if workout.status == "completed"]
    skipped = [workout for workout in workouts if workout.status == "skipped"]
    breakdown: dict[str, int] = {}
    for workout in workouts:
        breakdown[workout.workout_type] = breakdown.get(workout.workout_type, 0) + 1
    average = 0
    if completed:
        average = round_half_up(
            sum(workout.estimated_duration for workout in completed) / len(completed)
        )
    return WorkoutStatistics(
        total_workouts=len(workouts),
        completed_workouts=len(completed),
        skipped_workouts=len(skipped),
        completion_rate=round_half_up(len(completed) / len(workouts) * 100),
        workout_type_breakdown=breakdown,
        average_duration=average,
    )


@dataclass
class WorkoutService:
    """Service for workout history queries."""

    repository: WorkoutRepository

    def get_statistics(
        self, user_id: str, today: date, days_back: int = 30
    ) -> WorkoutStatistics:
        """Return statistics for workouts in the last ``days_back`` days."""
        start = today - timedelta(days=max(days_back, 1) - 1)
        return summarize_workouts(self.repository.list_for_range(user_id, start, today))
