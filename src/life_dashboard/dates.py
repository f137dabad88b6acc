"""Calendar date helpers.

Date keys are always built from local calendar components. Slicing an ISO
timestamp taken in UTC shifts the day near midnight in non-UTC zones.
"""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

GRID_DAYS = 42
DECEMBER = 12


def date_key(day: date) -> str:
    """Return the YYYY-MM-DD key for a calendar date."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(raw: object) -> date | None:
    """Parse a YYYY-MM-DD key, returning None for anything else."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def today_in(timezone_name: str) -> date:
    """Return today's calendar date in the given timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()


def month_grid_start(year: int, month: int) -> date:
    """Return the Sunday on or before the first day of the month."""
    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    return first - timedelta(days=(first.weekday() + 1) % 7)


def month_grid_dates(year: int, month: int) -> list[date]:
    """Return the 42 dates of a six-week month grid."""
    start = month_grid_start(year, month)
    return [start + timedelta(days=offset) for offset in range(GRID_DAYS)]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first day of the month and the first day of the next."""
    start = date(year, month, 1)
    if month == DECEMBER:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start, end
