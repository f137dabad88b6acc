"""Supabase repository for scheduled-activities documents."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from life_dashboard.dates import date_key, parse_date_key
from life_dashboard.domain.activities import ScheduledActivities
from life_dashboard.services.schedule import ScheduledActivitiesRepository

_COLUMNS = "user_id, date, tasks, status"
_STATUSES = ("active", "completed", "cancelled")


@dataclass
class SupabaseScheduleRepository(ScheduledActivitiesRepository):
    """Supabase implementation for scheduled activities."""

    client: Client

    def get(self, user_id: str, day: date) -> ScheduledActivities | None:
        """Return the document for a date."""
        response = (
            self.client.table("scheduled_activities")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("date", date_key(day))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ScheduledActivities]:
        """Return documents with ``start <= date <= end``."""
        response = (
            self.client.table("scheduled_activities")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("date", date_key(start))
            .lte("date", date_key(end))
            .execute()
        )
        rows = [_parse_row(row) for row in response.data or []]
        return [row for row in rows if row is not None]

    def save(self, schedule: ScheduledActivities) -> None:
        """Create or replace the document for its date."""
        response = (
            self.client.table("scheduled_activities")
            .upsert(
                {
                    "user_id": schedule.user_id,
                    "date": date_key(schedule.date),
                    "tasks": list(schedule.tasks),
                    "status": schedule.status,
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save scheduled activities")


def _parse_row(row: dict[str, object]) -> ScheduledActivities | None:
    day = parse_date_key(row.get("date"))
    if day is None:
        return None
    tasks = row.get("tasks") or []
    status = row.get("status")
    return ScheduledActivities(
        user_id=str(row.get("user_id", "")),
        date=day,
        tasks=tuple(str(task) for task in tasks if isinstance(task, str)),
        status=status if status in _STATUSES else "active",
    )
