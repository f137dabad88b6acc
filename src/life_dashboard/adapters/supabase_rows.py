"""Row parsing helpers shared by the Supabase repositories."""

from collections.abc import Mapping
from datetime import UTC, datetime

from life_dashboard.domain.nutrition import MacroTotals
from life_dashboard.numbers import to_non_negative_float


def parse_macros(raw: object) -> MacroTotals:
    """Parse a jsonb macro object; missing or invalid values become zero."""
    if not isinstance(raw, Mapping):
        return MacroTotals.zero()
    return MacroTotals(
        protein=to_non_negative_float(raw.get("protein")),
        fats=to_non_negative_float(raw.get("fats")),
        carbs=to_non_negative_float(raw.get("carbs")),
        calories=to_non_negative_float(raw.get("calories")),
    )


def macros_payload(totals: MacroTotals) -> dict[str, float]:
    """Serialise macros for a jsonb column."""
    return {
        "protein": totals.protein,
        "fats": totals.fats,
        "carbs": totals.carbs,
        "calories": totals.calories,
    }


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp column; naive values are taken as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw:
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value
