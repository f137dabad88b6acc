"""Supabase repository for the food catalog."""

import logging
from dataclasses import dataclass

from supabase import Client

from life_dashboard.adapters.supabase_rows import parse_macros
from life_dashboard.domain.nutrition import CostInfo, FoodEntry
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.catalog import FoodRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for catalog foods."""

    client: Client

    def list_foods(self) -> list[FoodEntry]:
        """Return every food, ordered by name."""
        response = (
            self.client.table("foods")
            .select("id, name, nutrition, is_unit_food, cost, category")
            .order("name", desc=False)
            .execute()
        )
        foods = []
        for row in response.data or []:
            name = row.get("name")
            if not isinstance(name, str) or not name.strip():
                _logger.warning("Skipping food without a name: id=%s", row.get("id"))
                continue
            foods.append(_parse_food(row))
        return foods


def _parse_food(row: dict[str, object]) -> FoodEntry:
    return FoodEntry(
        name=str(row["name"]).strip(),
        nutrition=parse_macros(row.get("nutrition")),
        is_unit_food=bool(row.get("is_unit_food")),
        cost=_parse_cost(row.get("cost")),
        category=row.get("category") or None,
    )


def _parse_cost(raw: object) -> CostInfo | None:
    if not isinstance(raw, dict):
        return None
    price = raw.get("cost_per_kg_or_unit", raw.get("cost_per_kg"))
    if price is None:
        return None
    unit = "unit" if raw.get("unit") == "unit" else "kg"
    return CostInfo(cost_per_kg_or_unit=to_non_negative_float(price), unit=unit)
