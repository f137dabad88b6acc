"""Workout domain models."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

WorkoutStatus = Literal["scheduled", "completed", "skipped"]


@dataclass(frozen=True)
class Exercise:
    """Single exercise in a scheduled workout."""

    order: int
    name: str
    kg: float
    sets: int
    reps: int
    rest: int
    notes: str | None = None


@dataclass(frozen=True)
class ScheduledWorkout:
    """Workout planned for a date."""

    id: str
    user_id: str
    scheduled_date: date
    name: str
    workout_type: str
    exercises: tuple[Exercise, ...] = ()
    status: WorkoutStatus = "scheduled"
    estimated_duration: int = 0
    notes: str | None = None

    @property
    def ordered_exercises(self) -> list[Exercise]:
        """Return exercises in ascending order."""
        return sorted(self.exercises, key=lambda exercise: exercise.order)


@dataclass(frozen=True)
class WorkoutStatistics:
    """Summary of recent scheduled workouts."""

    total_workouts: int
    completed_workouts: int
    skipped_workouts: int
    completion_rate: int
    workout_type_breakdown: dict[str, int]
    average_duration: int
