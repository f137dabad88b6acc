"""Domain models for module statistics."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

ModuleName = Literal["food", "gym", "finance", "water"]


@dataclass(frozen=True)
class ActivityData:
    """Completion of a module on one day."""

    date: date
    completed: bool
    value: float = 0.0
    max_value: float = 1.0


@dataclass(frozen=True)
class ModuleStats:
    """Progress, monthly completion and streaks for a module."""

    module: str
    today_progress: int
    monthly_completed: int
    monthly_total: int
    monthly_percentage: int
    current_streak: int
    longest_streak: int
