"""Supabase repository for activity completion history."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime

from supabase import Client

from life_dashboard.adapters.supabase_rows import parse_timestamp
from life_dashboard.dates import date_key, parse_date_key
from life_dashboard.domain.activities import ActivityHistoryRecord, ActivityType
from life_dashboard.services.activities import ActivityHistoryRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseActivityHistoryRepository(ActivityHistoryRepository):
    """Supabase implementation for activity history.

    One row per ``(user_id, date, activity_type)``; writes replace the row.
    """

    client: Client

    def upsert(self, record: ActivityHistoryRecord) -> None:
        """Insert or replace a completion record."""
        updated_at = record.updated_at or datetime.now(tz=UTC)
        response = (
            self.client.table("activity_history")
            .upsert(
                {
                    "user_id": record.user_id,
                    "date": date_key(record.date),
                    "activity_type": record.activity_type.value,
                    "completed": record.completed,
                    "updated_at": updated_at.isoformat(),
                },
                on_conflict="user_id,date,activity_type",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save activity history")

    def list_for_range(
        self, user_id: str, start: date, end: date
    ) -> list[ActivityHistoryRecord]:
        """Return records with ``start <= date <= end``."""
        response = (
            self.client.table("activity_history")
            .select("user_id, date, activity_type, completed, updated_at")
            .eq("user_id", user_id)
            .gte("date", date_key(start))
            .lte("date", date_key(end))
            .order("date", desc=False)
            .execute()
        )
        records = []
        for row in response.data or []:
            record = _parse_row(row)
            if record is None:
                _logger.debug("Skipping unrecognised history row: %s", row)
                continue
            records.append(record)
        return records


def _parse_row(row: dict[str, object]) -> ActivityHistoryRecord | None:
    day = parse_date_key(row.get("date"))
    activity_type = ActivityType.parse(row.get("activity_type"))
    if day is None or activity_type is None:
        return None
    return ActivityHistoryRecord(
        user_id=str(row.get("user_id", "")),
        date=day,
        activity_type=activity_type,
        completed=row.get("completed") is True,
        updated_at=parse_timestamp(row.get("updated_at")),
    )
