"""Rolling-window statistics for the dashboard modules."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from life_dashboard.domain.activities import (
    MEAL_ACTIVITIES,
    ActivityHistoryRecord,
    ActivityType,
)
from life_dashboard.domain.stats import ActivityData, ModuleName, ModuleStats
from life_dashboard.domain.tracking import FinanceTransaction, WaterIntake
from life_dashboard.numbers import round_half_up
from life_dashboard.services.activities import ActivityHistoryRepository
from life_dashboard.services.reconciler import build_activity_map

DEFAULT_WINDOW_DAYS = 100
MODULES: tuple[ModuleName, ...] = ("food", "gym", "finance", "water")


class FinanceRepository(Protocol):
    """Persistence interface for finance transactions."""

    def list_transactions(
        self, user_id: str, start: date, end: date
    ) -> list[FinanceTransaction]:
        """Return transactions with ``start <= date <= end``."""


class WaterRepository(Protocol):
    """Persistence interface for daily water intake."""

    def list_intake(self, user_id: str, start: date, end: date) -> list[WaterIntake]:
        """Return intake rows with ``start <= date <= end``."""


def compute_stats(
    module: str, window: Sequence[ActivityData], today: date
) -> ModuleStats:
    """Derive progress, monthly completion and streaks from a daily window.

    The window may be in any order and may have gaps. A missing day breaks a
    streak the same way an incomplete day does.
    """
    by_date = {entry.date: entry for entry in window}
    today_entry = by_date.get(today)

    monthly = [
        entry
        for entry in by_date.values()
        if entry.date.year == today.year
        and entry.date.month == today.month
        and entry.date <= today
    ]
    monthly_completed = sum(1 for entry in monthly if entry.completed)
    monthly_total = len(monthly)
    monthly_percentage = (
        round_half_up(monthly_completed / monthly_total * 100) if monthly_total else 0
    )

    return ModuleStats(
        module=module,
        today_progress=_progress(today_entry),
        monthly_completed=monthly_completed,
        monthly_total=monthly_total,
        monthly_percentage=monthly_percentage,
        current_streak=_current_streak(by_date, today),
        longest_streak=_longest_streak(by_date),
    )


def build_activity_window(
    per_day: Mapping[date, ActivityData], today: date, days: int = DEFAULT_WINDOW_DAYS
) -> list[ActivityData]:
    """Return ``days`` entries ending today, oldest first.

    Days absent from ``per_day`` are filled in as incomplete.
    """
    start = today - timedelta(days=days - 1)
    window = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        window.append(per_day.get(day) or ActivityData(date=day, completed=False))
    return window


def food_days(history: Iterable[ActivityHistoryRecord]) -> dict[date, ActivityData]:
    """Return per-day meal completion; a day is complete when every meal is."""
    result = {}
    for day, records in _group_history(history).items():
        activity_map = build_activity_map(records)
        done = sum(1 for meal in MEAL_ACTIVITIES if activity_map.get(meal) is True)
        result[day] = ActivityData(
            date=day,
            completed=done == len(MEAL_ACTIVITIES),
            value=float(done),
            max_value=float(len(MEAL_ACTIVITIES)),
        )
    return result


def gym_days(history: Iterable[ActivityHistoryRecord]) -> dict[date, ActivityData]:
    """Return per-day gym completion."""
    result = {}
    for day, records in _group_history(history).items():
        activity_map = build_activity_map(records)
        if ActivityType.GYM not in activity_map:
            continue
        completed = activity_map[ActivityType.GYM]
        result[day] = ActivityData(
            date=day, completed=completed, value=1.0 if completed else 0.0
        )
    return result


def finance_days(
    transactions: Iterable[FinanceTransaction],
) -> dict[date, ActivityData]:
    """Return per-day finance tracking; any transaction completes the day."""
    counts: dict[date, int] = {}
    for transaction in transactions:
        counts[transaction.date] = counts.get(transaction.date, 0) + 1
    return {
        day: ActivityData(date=day, completed=True, value=float(count))
        for day, count in counts.items()
    }


def water_days(intake: Iterable[WaterIntake]) -> dict[date, ActivityData]:
    """Return per-day hydration against the daily target."""
    return {
        row.date: ActivityData(
            date=row.date,
            completed=row.goal_achieved,
            value=row.total_amount,
            max_value=row.target_amount,
        )
        for row in intake
    }


@dataclass
class StatsService:
    """Loads the rolling window for a module and computes its stats."""

    history_repository: ActivityHistoryRepository
    finance_repository: FinanceRepository
    water_repository: WaterRepository
    window_days: int = DEFAULT_WINDOW_DAYS

    def get_module_stats(self, user_id: str, module: str, today: date) -> ModuleStats:
        """Return stats for one module over the window ending today."""
        start = today - timedelta(days=self.window_days - 1)
        if module == "food":
            per_day = food_days(
                self.history_repository.list_for_range(user_id, start, today)
            )
        elif module == "gym":
            per_day = gym_days(
                self.history_repository.list_for_range(user_id, start, today)
            )
        elif module == "finance":
            per_day = finance_days(
                self.finance_repository.list_transactions(user_id, start, today)
            )
        elif module == "water":
            per_day = water_days(
                self.water_repository.list_intake(user_id, start, today)
            )
        else:
            raise ValueError(f"Unknown module: {module}")
        window = build_activity_window(per_day, today, self.window_days)
        return compute_stats(module, window, today)


def _progress(entry: ActivityData | None) -> int:
    if entry is None:
        return 0
    if entry.max_value <= 0:
        return 100 if entry.completed else 0
    return round_half_up(min(entry.value / entry.max_value * 100, 100))


def _current_streak(by_date: Mapping[date, ActivityData], today: date) -> int:
    streak = 0
    day = today
    while True:
        entry = by_date.get(day)
        if entry is None or not entry.completed:
            return streak
        streak += 1
        day -= timedelta(days=1)


def _longest_streak(by_date: Mapping[date, ActivityData]) -> int:
    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(by_date):
        if not by_date[day].completed:
            run = 0
        elif previous is not None and day - previous == timedelta(days=1) and run:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def _group_history(
    history: Iterable[ActivityHistoryRecord],
) -> dict[date, list[ActivityHistoryRecord]]:
    grouped: dict[date, list[ActivityHistoryRecord]] = {}
    for record in history:
        grouped.setdefault(record.date, []).append(record)
    return grouped
