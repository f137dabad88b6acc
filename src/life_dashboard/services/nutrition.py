"""Macro calculations over the food catalog."""

from collections.abc import Iterable
from typing import Literal

from life_dashboard.domain.nutrition import (
    ActivityLevel,
    CalorieValidation,
    FoodCatalog,
    FoodEntry,
    MacroSplit,
    MacroTotals,
    MealPlan,
    NutritionTargets,
    SelectedFood,
    TimeslotMealData,
    UserProfile,
)
from life_dashboard.numbers import round_half_up, to_non_negative_float

MacroName = Literal["protein", "fats", "carbs"]

CALORIES_PER_GRAM: dict[str, int] = {
    "protein": 4,
    "fats": 9,
    "carbs": 4,
}

DEFAULT_CALORIE_TOLERANCE = 0.10

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

# Fraction of TDEE added (gain) or removed (lose) for each goal.
GOAL_ADJUSTMENTS: dict[str, float] = {
    "lose_20_25": -0.225,
    "lose_15_20": -0.175,
    "lose_10_15": -0.125,
    "lose_5_10": -0.075,
    "lose_3_5": -0.04,
    "lose_2_3": -0.025,
    "maintain": 0.0,
    "gain_2_3": 0.025,
    "gain_3_5": 0.04,
    "gain_5_10": 0.075,
    "gain_10_15": 0.125,
    "gain_15_20": 0.175,
    "gain_20_25": 0.225,
    "lose_weight": -0.15,
    "gain_muscle": 0.15,
    "lose_aggressive": -0.25,
    "lose_moderate": -0.20,
    "lose_gradual": -0.15,
    "lose_conservative": -0.10,
    "lose_mild": -0.05,
    "gain_aggressive": 0.25,
    "gain_moderate": 0.20,
    "gain_gradual": 0.15,
    "gain_conservative": 0.10,
    "gain_mild": 0.05,
}

AGGRESSIVE_CUT_SPLIT = MacroSplit(protein=0.35, carbs=0.35, fats=0.30)
MODERATE_CUT_SPLIT = MacroSplit(protein=0.30, carbs=0.40, fats=0.30)
BALANCED_SPLIT = MacroSplit(protein=0.25, carbs=0.45, fats=0.30)
BULK_SPLIT = MacroSplit(protein=0.25, carbs=0.50, fats=0.25)


def compute_macros(food: FoodEntry | None, amount: object) -> MacroTotals:
    """Return macros for an amount of a food.

    Unit foods treat ``amount`` as an item count; all other foods treat it as
    grams against nutrition defined per 100 g. A missing food yields zeros.
    """
    if food is None:
        return MacroTotals.zero()
    quantity = to_non_negative_float(amount)
    factor = quantity if food.is_unit_food else quantity / 100
    nutrition = food.nutrition
    return MacroTotals(
        protein=nutrition.protein * factor,
        fats=nutrition.fats * factor,
        carbs=nutrition.carbs * factor,
        calories=nutrition.calories * factor,
    )


def aggregate_macros(
    selected_foods: Iterable[SelectedFood], catalog: FoodCatalog
) -> MacroTotals:
    """Sum macros for selected foods, skipping names missing from the catalog."""
    total = MacroTotals.zero()
    for selected in selected_foods:
        total = total + compute_macros(catalog.get(selected.name), selected.amount)
    return total


def timeslot_macros(slot: TimeslotMealData, catalog: FoodCatalog) -> MacroTotals:
    """Return catalog macros for a timeslot plus its externally logged nutrition."""
    return aggregate_macros(slot.selected_foods, catalog) + slot.external_nutrition


def day_macros(plan: MealPlan, catalog: FoodCatalog) -> MacroTotals:
    """Return the total macros across every timeslot of a meal plan."""
    total = MacroTotals.zero()
    for slot_id in sorted(plan.timeslots):
        total = total + timeslot_macros(plan.timeslots[slot_id], catalog)
    return total


def calculate_calories_from_macros(protein: object, fats: object, carbs: object) -> int:
    """Return calories implied by macros (4/9/4 kcal per gram)."""
    return round_half_up(
        to_non_negative_float(protein) * CALORIES_PER_GRAM["protein"]
        + to_non_negative_float(fats) * CALORIES_PER_GRAM["fats"]
        + to_non_negative_float(carbs) * CALORIES_PER_GRAM["carbs"]
    )


def validate_calories(
    manual_calories: object,
    protein: object,
    fats: object,
    carbs: object,
    tolerance: float = DEFAULT_CALORIE_TOLERANCE,
) -> CalorieValidation:
    """Check entered calories against macro-derived calories.

    Restaurant meals and other external items often report calories without a
    full macro breakdown, hence the relative tolerance.
    """
    manual = to_non_negative_float(manual_calories)
    calculated = calculate_calories_from_macros(protein, fats, carbs)
    difference = abs(manual - calculated)
    if calculated == 0:
        valid = manual == 0
    else:
        valid = difference / calculated <= tolerance
    return CalorieValidation(
        valid=valid,
        calculated_calories=calculated,
        difference=difference,
    )


def calculate_macro_percentage(
    macro: MacroName, grams: object, total_calories: object
) -> int:
    """Return the share of total calories contributed by a macro."""
    total = to_non_negative_float(total_calories)
    if total == 0:
        return 0
    calories = to_non_negative_float(grams) * CALORIES_PER_GRAM[macro]
    return round_half_up(calories / total * 100)


def nutrition_per_serving(total: MacroTotals, servings: int) -> MacroTotals:
    """Divide recipe nutrition evenly; no servings yields zeros."""
    if servings <= 0:
        return MacroTotals.zero()
    return MacroTotals(
        protein=total.protein / servings,
        fats=total.fats / servings,
        carbs=total.carbs / servings,
        calories=total.calories / servings,
    )


def calculate_bmr(profile: UserProfile) -> float:
    """Return basal metabolic rate using the Mifflin-St Jeor equation."""
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    return base + 5 if profile.gender == "male" else base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Return total daily energy expenditure for an activity level."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_adjusted_calories(tdee: float, goal: str) -> int:
    """Return daily calories for a goal; unknown goals maintain weight."""
    return round_half_up(tdee * (1 + GOAL_ADJUSTMENTS.get(goal, 0.0)))


def calculate_macro_split(goal: str) -> MacroSplit:
    """Return calorie shares for a goal.

    Steeper cuts shift calories from carbs to protein; any gain goal uses the
    higher-carb bulking split.
    """
    if goal.startswith("lose_"):
        if "15_20" in goal or "20_25" in goal or goal == "lose_aggressive":
            return AGGRESSIVE_CUT_SPLIT
        if "10_15" in goal or goal == "lose_moderate":
            return MODERATE_CUT_SPLIT
        return BALANCED_SPLIT
    if goal.startswith("gain_"):
        return BULK_SPLIT
    return BALANCED_SPLIT


def calculate_nutrition_targets(profile: UserProfile) -> NutritionTargets:
    """Return daily calorie and macro targets for a profile."""
    bmr = calculate_bmr(profile)
    tdee = calculate_tdee(bmr, profile.activity_level)
    calories = calculate_adjusted_calories(tdee, profile.goal)
    split = calculate_macro_split(profile.goal)
    return NutritionTargets(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        adjusted_calories=calories,
        protein=round_half_up(calories * split.protein / CALORIES_PER_GRAM["protein"]),
        carbs=round_half_up(calories * split.carbs / CALORIES_PER_GRAM["carbs"]),
        fats=round_half_up(calories * split.fats / CALORIES_PER_GRAM["fats"]),
        calories=calories,
    )
