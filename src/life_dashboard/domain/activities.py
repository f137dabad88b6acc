"""Activity identifiers and completion history models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Literal

ScheduleStatus = Literal["active", "completed", "cancelled"]


class ActivityType(StrEnum):
    """Closed set of trackable daily activities."""

    MEAL_6PM = "6pm"
    MEAL_930PM = "9:30pm"
    GYM = "gym"
    MORNING = "morning"

    @property
    def is_meal(self) -> bool:
        """Return True for meal timeslot activities."""
        return self in MEAL_ACTIVITIES

    @property
    def task_id(self) -> str:
        """Return the canonical scheduled-task identifier."""
        if self.is_meal:
            return f"meal-{self.value}"
        if self is ActivityType.GYM:
            return "gym-workout"
        return self.value

    @classmethod
    def parse(cls, raw: object) -> "ActivityType | None":
        """Parse a stored activity type, returning None when unknown."""
        if isinstance(raw, ActivityType):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip())
        except ValueError:
            return None

    @classmethod
    def from_task(cls, raw: object) -> "ActivityType | None":
        """Parse a scheduled-task identifier such as ``meal-6pm``."""
        if not isinstance(raw, str):
            return None
        return _TASK_ALIASES.get(raw.strip())


MEAL_ACTIVITIES = (ActivityType.MEAL_6PM, ActivityType.MEAL_930PM)

_TASK_ALIASES: dict[str, ActivityType] = {
    "meal-6pm": ActivityType.MEAL_6PM,
    "meal-9:30pm": ActivityType.MEAL_930PM,
    "gym-workout": ActivityType.GYM,
    "gym": ActivityType.GYM,
    "morning": ActivityType.MORNING,
}


@dataclass(frozen=True)
class ActivityHistoryRecord:
    """Authoritative completion state of one activity on one date."""

    user_id: str
    date: date
    activity_type: ActivityType
    completed: bool
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ScheduledActivities:
    """Tasks explicitly scheduled for a date."""

    user_id: str
    date: date
    tasks: tuple[str, ...] = ()
    status: ScheduleStatus = "active"
