"""Supabase repository for per-day meal plans (timeslots)."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from life_dashboard.adapters.supabase_rows import macros_payload, parse_macros
from life_dashboard.dates import date_key, parse_date_key
from life_dashboard.domain.nutrition import MealPlan, SelectedFood, TimeslotMealData
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.activities import MealPlanRepository

_COLUMNS = "user_id, date, timeslots, total_macros"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans."""

    client: Client

    def get_plan(self, user_id: str, day: date) -> MealPlan | None:
        """Return the plan for a date."""
        response = (
            self.client.table("timeslots")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("date", date_key(day))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def list_plans(self, user_id: str, start: date, end: date) -> list[MealPlan]:
        """Return plans with ``start <= date <= end``."""
        response = (
            self.client.table("timeslots")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("date", date_key(start))
            .lte("date", date_key(end))
            .order("date", desc=False)
            .execute()
        )
        plans = [_parse_plan(row) for row in response.data or []]
        return [plan for plan in plans if plan is not None]

    def save_plan(self, plan: MealPlan) -> None:
        """Create or replace the plan for its date."""
        response = (
            self.client.table("timeslots")
            .upsert(
                {
                    "user_id": plan.user_id,
                    "date": date_key(plan.date),
                    "timeslots": {
                        slot_id: _slot_payload(slot)
                        for slot_id, slot in plan.timeslots.items()
                    },
                    "total_macros": macros_payload(plan.total_macros),
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal plan")


def _parse_plan(row: dict[str, object]) -> MealPlan | None:
    day = parse_date_key(row.get("date"))
    if day is None:
        return None
    raw_slots = row.get("timeslots")
    timeslots = {}
    if isinstance(raw_slots, dict):
        timeslots = {
            str(slot_id): _parse_slot(slot) for slot_id, slot in raw_slots.items()
        }
    return MealPlan(
        user_id=str(row.get("user_id", "")),
        date=day,
        timeslots=timeslots,
        total_macros=parse_macros(row.get("total_macros")),
    )


def _parse_slot(raw: object) -> TimeslotMealData:
    if not isinstance(raw, dict):
        return TimeslotMealData()
    foods = []
    for item in raw.get("selected_foods") or []:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        foods.append(
            SelectedFood(
                name=str(item["name"]),
                amount=to_non_negative_float(item.get("amount")),
            )
        )
    return TimeslotMealData(
        selected_foods=tuple(foods),
        external_nutrition=parse_macros(raw.get("external_nutrition")),
    )


def _slot_payload(slot: TimeslotMealData) -> dict[str, object]:
    return {
        "selected_foods": [
            {"name": food.name, "amount": food.amount} for food in slot.selected_foods
        ],
        "external_nutrition": macros_payload(slot.external_nutrition),
    }
