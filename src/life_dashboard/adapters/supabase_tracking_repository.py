"""Supabase repositories for finance transactions and water intake."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from life_dashboard.dates import date_key, parse_date_key
from life_dashboard.domain.tracking import FinanceTransaction, WaterIntake
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.stats import FinanceRepository, WaterRepository


@dataclass
class SupabaseFinanceRepository(FinanceRepository):
    """Supabase implementation for finance transactions."""

    client: Client

    def list_transactions(
        self, user_id: str, start: date, end: date
    ) -> list[FinanceTransaction]:
        """Return transactions with ``start <= date <= end``."""
        response = (
            self.client.table("finance_transactions")
            .select("user_id, date, amount, description")
            .eq("user_id", user_id)
            .gte("date", date_key(start))
            .lte("date", date_key(end))
            .execute()
        )
        transactions = []
        for row in response.data or []:
            day = parse_date_key(row.get("date"))
            if day is None:
                continue
            transactions.append(
                FinanceTransaction(
                    user_id=str(row.get("user_id", "")),
                    date=day,
                    amount=_to_amount(row.get("amount")),
                    description=str(row.get("description") or ""),
                )
            )
        return transactions


@dataclass
class SupabaseWaterRepository(WaterRepository):
    """Supabase implementation for daily water intake."""

    client: Client

    def list_intake(self, user_id: str, start: date, end: date) -> list[WaterIntake]:
        """Return intake rows with ``start <= date <= end``."""
        response = (
            self.client.table("water_intake")
            .select("user_id, date, total_amount, target_amount")
            .eq("user_id", user_id)
            .gte("date", date_key(start))
            .lte("date", date_key(end))
            .execute()
        )
        rows = []
        for row in response.data or []:
            day = parse_date_key(row.get("date"))
            if day is None:
                continue
            rows.append(
                WaterIntake(
                    user_id=str(row.get("user_id", "")),
                    date=day,
                    total_amount=to_non_negative_float(row.get("total_amount")),
                    target_amount=to_non_negative_float(row.get("target_amount")),
                )
            )
        return rows


def _to_amount(value: object) -> float:
    # Expenses may be stored as negative amounts; only the magnitude is summed.
    if isinstance(value, int | float) and not isinstance(value, bool):
        return to_non_negative_float(abs(value))
    return to_non_negative_float(value)
