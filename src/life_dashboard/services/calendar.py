"""Month grid assembly on top of the day reconciler."""

import logging
from dataclasses import dataclass, field
from datetime import date

from life_dashboard.dates import month_grid_dates
from life_dashboard.domain.calendar import CalendarDay, MonthSources
from life_dashboard.services.reconciler import DayReconciler

_logger = logging.getLogger(__name__)

_MemoKey = tuple[int, int, date, MonthSources]


@dataclass
class CalendarAggregator:
    """Builds the 42-cell month grid and memoises the last result.

    The grid is always rebuilt from the sources as a whole; cells are never
    patched individually.
    """

    reconciler: DayReconciler = field(default_factory=DayReconciler)
    _memo_key: _MemoKey | None = field(default=None, init=False, repr=False)
    _memo_days: tuple[CalendarDay, ...] = field(default=(), init=False, repr=False)

    def build_month(
        self, year: int, month: int, sources: MonthSources, today: date
    ) -> tuple[CalendarDay, ...]:
        """Return the reconciled grid for a month."""
        key: _MemoKey = (year, month, today, sources)
        if self._memo_key is not None and self._memo_key == key:
            return self._memo_days

        days = tuple(
            self.reconciler.reconcile(
                cell,
                sources.for_day(cell),
                is_current_month=cell.month == month and cell.year == year,
                is_today=cell == today,
            )
            for cell in month_grid_dates(year, month)
        )
        _logger.info(
            "Calendar rebuilt: month=%04d-%02d events=%s",
            year,
            month,
            sum(len(day.events) for day in days),
        )
        self._memo_key = key
        self._memo_days = days
        return days

    def invalidate(self) -> None:
        """Drop the memoised grid."""
        self._memo_key = None
        self._memo_days = ()
