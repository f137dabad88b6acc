"""Per-day task scheduling shared by all modules."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol

from life_dashboard.domain.activities import ScheduledActivities, ScheduleStatus

_logger = logging.getLogger(__name__)


class ScheduledActivitiesRepository(Protocol):
    """Persistence interface for scheduled-activities documents."""

    def get(self, user_id: str, day: date) -> ScheduledActivities | None:
        """Return the document for a date, if present."""

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ScheduledActivities]:
        """Return documents with ``start <= date <= end``."""

    def save(self, schedule: ScheduledActivities) -> None:
        """Create or replace the document for its date."""


@dataclass
class ScheduleService:
    """Adds and removes task identifiers on a day's schedule."""

    repository: ScheduledActivitiesRepository

    def get(self, user_id: str, day: date) -> ScheduledActivities | None:
        """Return the schedule for a date."""
        return self.repository.get(user_id, day)

    def add_task(self, user_id: str, day: date, task: str) -> ScheduledActivities:
        """Register a task on a date; adding an existing task changes nothing."""
        task = task.strip()
        if not task:
            raise ValueError("Task identifier is required")
        existing = self.repository.get(user_id, day)
        if existing is None:
            schedule = ScheduledActivities(user_id=user_id, date=day, tasks=(task,))
        elif task in existing.tasks:
            return existing
        else:
            schedule = replace(existing, tasks=(*existing.tasks, task))
        self.repository.save(schedule)
        _logger.info("Task scheduled: date=%s task=%s", day, task)
        return schedule

    def remove_task(
        self, user_id: str, day: date, task: str
    ) -> ScheduledActivities | None:
        """Remove a task from a date; returns None when no schedule exists."""
        existing = self.repository.get(user_id, day)
        if existing is None:
            return None
        schedule = replace(
            existing, tasks=tuple(item for item in existing.tasks if item != task)
        )
        self.repository.save(schedule)
        _logger.info("Task unscheduled: date=%s task=%s", day, task)
        return schedule

    def set_status(
        self, user_id: str, day: date, status: ScheduleStatus
    ) -> ScheduledActivities | None:
        """Change the status of a day's schedule; returns None when absent."""
        existing = self.repository.get(user_id, day)
        if existing is None:
            return None
        schedule = replace(existing, status=status)
        self.repository.save(schedule)
        return schedule
