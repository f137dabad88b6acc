"""Supabase repository for consumed food records."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from life_dashboard.adapters.supabase_rows import parse_macros, parse_timestamp
from life_dashboard.domain.costs import ConsumptionRecord
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.costs import ConsumptionRepository

_UNITS = ("g", "kg", "unit")


@dataclass
class SupabaseConsumptionRepository(ConsumptionRepository):
    """Supabase implementation for food consumption history."""

    client: Client

    def list_consumptions(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[ConsumptionRecord]:
        """Return consumption records in ``[start, end)``."""
        response = (
            self.client.table("food_consumptions")
            .select("food_name, quantity, unit, nutrition, consumed_at")
            .eq("user_id", user_id)
            .gte("consumed_at", start.isoformat())
            .lt("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        records = [_parse_row(row) for row in response.data or []]
        return [record for record in records if record is not None]


def _parse_row(row: dict[str, object]) -> ConsumptionRecord | None:
    consumed_at = parse_timestamp(row.get("consumed_at"))
    name = row.get("food_name")
    if consumed_at is None or not isinstance(name, str) or not name:
        return None
    unit = row.get("unit")
    return ConsumptionRecord(
        food_name=name,
        quantity=to_non_negative_float(row.get("quantity")),
        unit=unit if unit in _UNITS else "g",
        nutrition=parse_macros(row.get("nutrition")),
        consumed_at=consumed_at,
    )
