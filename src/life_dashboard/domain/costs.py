"""Cost and consumption domain models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from life_dashboard.domain.nutrition import MacroTotals

QuantityUnit = Literal["g", "kg", "unit"]


@dataclass(frozen=True)
class ConsumptionRecord:
    """A food eaten at a point in time."""

    food_name: str
    quantity: float
    unit: QuantityUnit
    nutrition: MacroTotals
    consumed_at: datetime


@dataclass(frozen=True)
class FoodCostRollup:
    """Per-food totals over a window."""

    food_name: str
    total_quantity: float
    total_cost: float | None
    nutrition_totals: MacroTotals
    occurrences: int
    last_consumed: datetime
    total_kilos: float


@dataclass(frozen=True)
class CostSummary:
    """Rollups for every food plus the overall cost."""

    per_food: dict[str, FoodCostRollup]
    total_cost: float

    def rows(self) -> list[FoodCostRollup]:
        """Return the per-food rollups ordered by food name."""
        return sorted(self.per_food.values(), key=lambda row: row.food_name.casefold())


@dataclass(frozen=True)
class MealCost:
    """Cost of a list of selected foods."""

    individual_costs: dict[str, float]
    total_cost: float
    unknown_cost_foods: tuple[str, ...] = ()


@dataclass(frozen=True)
class CostEfficiencyRow:
    """Price and macro efficiency of a catalog food."""

    food_name: str
    unit: str
    cost_per_100g_or_unit: float
    cost_per_kg: float
    cost_per_gram_protein: float | None
    cost_per_gram_carbs: float | None
    cost_per_gram_fats: float | None


@dataclass(frozen=True)
class MonthlyFoodSummary:
    """Consumption overview for one month."""

    month: str
    total_days: int
    unique_foods: int
    total_nutrition: MacroTotals
    total_cost: float
    foods: list[FoodCostRollup]


@dataclass(frozen=True)
class RecipeSummary:
    """Totals for a recipe and the share of one serving."""

    servings: int
    total_nutrition: MacroTotals
    total_cost: float
    per_serving_nutrition: MacroTotals
    per_serving_cost: float
