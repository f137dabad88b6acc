"""Food cost calculations and consumption rollups."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import Protocol, TypeVar

from life_dashboard.dates import month_bounds
from life_dashboard.domain.costs import (
    ConsumptionRecord,
    CostEfficiencyRow,
    CostSummary,
    FoodCostRollup,
    MealCost,
    MonthlyFoodSummary,
    RecipeSummary,
)
from life_dashboard.domain.nutrition import (
    FoodCatalog,
    FoodEntry,
    MacroTotals,
    SelectedFood,
)
from life_dashboard.numbers import to_non_negative_float
from life_dashboard.services.nutrition import aggregate_macros, nutrition_per_serving

GRAMS_PER_KG = 1000

# Item weights in kilograms used to express unit foods as kilos eaten.
UNIT_WEIGHTS_KG: dict[str, float] = {
    "Eggs": 0.050,
    "Tortilla wrap": 0.064,
    "Canned tuna": 0.160,
}
DEFAULT_UNIT_WEIGHT_KG = 0.1

RowT = TypeVar("RowT")


class ConsumptionRepository(Protocol):
    """Persistence interface for consumed food records."""

    def list_consumptions(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[ConsumptionRecord]:
        """Return consumption records in ``[start, end)``."""


def calculate_portion_cost(food: FoodEntry | None, amount: object) -> float | None:
    """Return the cost of a portion, or None when the food has no price.

    Unit-priced foods multiply by the item count; weight-priced foods convert
    the per-kilogram price to grams.
    """
    if food is None or food.cost is None:
        return None
    quantity = to_non_negative_float(amount)
    price = to_non_negative_float(food.cost.cost_per_kg_or_unit)
    if food.cost.unit == "unit":
        return price * quantity
    return price / GRAMS_PER_KG * quantity


def calculate_meal_cost(
    selected_foods: Iterable[SelectedFood], catalog: FoodCatalog
) -> MealCost:
    """Return per-food and total costs for selected foods."""
    individual: dict[str, float] = {}
    unknown: list[str] = []
    total = 0.0
    for selected in selected_foods:
        name = selected.name
        cost = calculate_portion_cost(catalog.get(name), selected.amount)
        if cost is None:
            unknown.append(name)
            individual[name] = individual.get(name, 0.0)
            continue
        individual[name] = individual.get(name, 0.0) + cost
        total += cost
    return MealCost(
        individual_costs=individual,
        total_cost=total,
        unknown_cost_foods=tuple(unknown),
    )


def calculate_recipe_cost(
    ingredients: Iterable[SelectedFood], catalog: FoodCatalog
) -> float:
    """Return the cost of a recipe; unknown or unpriced ingredients cost nothing."""
    total = 0.0
    for ingredient in ingredients:
        cost = calculate_portion_cost(catalog.get(ingredient.name), ingredient.amount)
        total += cost or 0.0
    return total


def cost_per_serving(total_cost: float, servings: int) -> float:
    """Split a recipe cost across servings; no servings means no cost."""
    if servings <= 0:
        return 0.0
    return total_cost / servings


def summarize_recipe(
    ingredients: Iterable[SelectedFood], servings: int, catalog: FoodCatalog
) -> RecipeSummary:
    """Return recipe totals and the nutrition and cost of one serving."""
    ingredients = list(ingredients)
    total_nutrition = aggregate_macros(ingredients, catalog)
    total_cost = calculate_recipe_cost(ingredients, catalog)
    return RecipeSummary(
        servings=servings,
        total_nutrition=total_nutrition,
        total_cost=total_cost,
        per_serving_nutrition=nutrition_per_serving(total_nutrition, servings),
        per_serving_cost=cost_per_serving(total_cost, servings),
    )

def aggregate_costs(
    history: Iterable[ConsumptionRecord],
    catalog: FoodCatalog,
    start: datetime | None = None,
    end: datetime | None = None,
) -> CostSummary:
    """Group consumption by food and sum quantity, cost and macros.

    Records outside ``[start, end)`` are skipped. A food without a price keeps
    ``total_cost=None`` so that unknown cost stays distinct from zero cost.
    """
    groups: dict[str, list[ConsumptionRecord]] = {}
    for record in history:
        if start is not None and record.consumed_at < start:
            continue
        if end is not None and record.consumed_at >= end:
            continue
        groups.setdefault(record.food_name, []).append(record)

    per_food: dict[str, FoodCostRollup] = {}
    total_cost = 0.0
    for name, records in groups.items():
        food = catalog.get(name)
        quantity = 0.0
        cost: float | None = None
        kilos = 0.0
        nutrition = MacroTotals.zero()
        for record in records:
            amount = to_non_negative_float(record.quantity)
            quantity += amount
            kilos += _to_kilos(name, amount, record.unit)
            portion = calculate_portion_cost(
                food, _costing_amount(amount, record.unit)
            )
            if portion is not None:
                cost = (cost or 0.0) + portion
            nutrition = nutrition + record.nutrition
        per_food[name] = FoodCostRollup(
            food_name=name,
            total_quantity=quantity,
            total_cost=cost,
            nutrition_totals=nutrition,
            occurrences=len(records),
            last_consumed=max(record.consumed_at for record in records),
            total_kilos=kilos,
        )
        total_cost += cost or 0.0
    return CostSummary(per_food=per_food, total_cost=total_cost)


def summarize_month(
    history: Iterable[ConsumptionRecord],
    catalog: FoodCatalog,
    year: int,
    month: int,
    zone: tzinfo = UTC,
) -> MonthlyFoodSummary:
    """Return the consumption overview for one calendar month.

    Month bounds and consumption days are taken in ``zone``.
    """
    first, following = month_bounds(year, month)
    start = datetime(first.year, first.month, first.day, tzinfo=zone)
    end = datetime(following.year, following.month, following.day, tzinfo=zone)
    records = [record for record in history if start <= record.consumed_at < end]
    summary = aggregate_costs(records, catalog)
    nutrition = MacroTotals.zero()
    for rollup in summary.per_food.values():
        nutrition = nutrition + rollup.nutrition_totals
    return MonthlyFoodSummary(
        month=f"{year:04d}-{month:02d}",
        total_days=len(
            {record.consumed_at.astimezone(zone).date() for record in records}
        ),
        unique_foods=len(summary.per_food),
        total_nutrition=nutrition,
        total_cost=summary.total_cost,
        foods=sort_rows(summary.rows(), "last_consumed", descending=True),
    )


def cost_efficiency_rows(catalog: FoodCatalog) -> list[CostEfficiencyRow]:
    """Return price and cost-per-macro-gram rows for priced foods."""
    rows: list[CostEfficiencyRow] = []
    for food in catalog.values():
        if food.cost is None:
            continue
        price = to_non_negative_float(food.cost.cost_per_kg_or_unit)
        if food.cost.unit == "unit":
            reference_cost = price
        else:
            reference_cost = price / GRAMS_PER_KG * 100
        rows.append(
            CostEfficiencyRow(
                food_name=food.name,
                unit=food.cost.unit,
                cost_per_100g_or_unit=reference_cost,
                cost_per_kg=price,
                cost_per_gram_protein=_per_gram(reference_cost, food.nutrition.protein),
                cost_per_gram_carbs=_per_gram(reference_cost, food.nutrition.carbs),
                cost_per_gram_fats=_per_gram(reference_cost, food.nutrition.fats),
            )
        )
    return sort_rows(rows, "food_name")


def sort_rows(
    rows: Iterable[RowT],
    column: str,
    descending: bool = False,
    name_of: Callable[[RowT], str] | None = None,
) -> list[RowT]:
    """Sort rows by a column with nulls last and a food-name tie-break.

    Rows whose column is None go to the end in either direction. Rows with
    equal keys keep ascending, case-insensitive food-name order.
    """
    get_name = name_of or _food_name
    by_name = sorted(rows, key=lambda row: get_name(row).casefold())
    present = [row for row in by_name if getattr(row, column) is not None]
    missing = [row for row in by_name if getattr(row, column) is None]
    if column == "food_name":
        ordered = sorted(
            present, key=lambda row: get_name(row).casefold(), reverse=descending
        )
    else:
        # sorted() is stable under reverse=True, so equal keys keep name order.
        ordered = sorted(
            present, key=lambda row: getattr(row, column), reverse=descending
        )
    return ordered + missing


@dataclass
class CostService:
    """Service that loads consumption history and prices it."""

    repository: ConsumptionRepository

    def get_period_costs(
        self,
        user_id: str,
        catalog: FoodCatalog,
        start: datetime,
        end: datetime,
    ) -> CostSummary:
        """Return cost rollups for consumption in ``[start, end)``."""
        records = self.repository.list_consumptions(user_id, start, end)
        return aggregate_costs(records, catalog, start, end)

    def get_month_summary(
        self,
        user_id: str,
        catalog: FoodCatalog,
        year: int,
        month: int,
        zone: tzinfo = UTC,
    ) -> MonthlyFoodSummary:
        """Return the consumption overview for a month."""
        first, following = month_bounds(year, month)
        start = datetime(first.year, first.month, first.day, tzinfo=zone)
        end = datetime(following.year, following.month, following.day, tzinfo=zone)
        records = self.repository.list_consumptions(user_id, start, end)
        return summarize_month(records, catalog, year, month, zone)


def _food_name(row: object) -> str:
    return str(getattr(row, "food_name", ""))


def _per_gram(reference_cost: float, macro_grams: float) -> float | None:
    if macro_grams <= 0:
        return None
    return reference_cost / macro_grams


def _costing_amount(amount: float, unit: str) -> float:
    if unit == "kg":
        return amount * GRAMS_PER_KG
    return amount


def _to_kilos(food_name: str, amount: float, unit: str) -> float:
    if unit == "kg":
        return amount
    if unit == "unit":
        return amount * UNIT_WEIGHTS_KG.get(food_name, DEFAULT_UNIT_WEIGHT_KG)
    return amount / GRAMS_PER_KG
