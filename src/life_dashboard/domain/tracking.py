"""Finance and hydration records shown alongside meals and workouts."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FinanceTransaction:
    """Logged expense or income."""

    user_id: str
    date: date
    amount: float
    description: str = ""


@dataclass(frozen=True)
class WaterIntake:
    """Daily hydration total against a target."""

    user_id: str
    date: date
    total_amount: float
    target_amount: float

    @property
    def goal_achieved(self) -> bool:
        """Return True when the daily target was reached."""
        return self.target_amount > 0 and self.total_amount >= self.target_amount
