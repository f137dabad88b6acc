"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

CostUnit = Literal["kg", "unit"]


@dataclass(frozen=True)
class MacroTotals:
    """Protein, fats, carbs and calories for a food amount or a meal."""

    protein: float
    fats: float
    carbs: float
    calories: float

    @classmethod
    def zero(cls) -> "MacroTotals":
        """Return an all-zero total."""
        return cls(protein=0.0, fats=0.0, carbs=0.0, calories=0.0)

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            protein=self.protein + other.protein,
            fats=self.fats + other.fats,
            carbs=self.carbs + other.carbs,
            calories=self.calories + other.calories,
        )


@dataclass(frozen=True)
class CostInfo:
    """Price of a food, per kilogram or per discrete unit."""

    cost_per_kg_or_unit: float
    unit: CostUnit


@dataclass(frozen=True)
class FoodEntry:
    """Catalog food with nutrition per 100 g or per unit."""

    name: str
    nutrition: MacroTotals
    is_unit_food: bool = False
    cost: CostInfo | None = None
    category: str | None = None


FoodCatalog = Mapping[str, FoodEntry]


@dataclass(frozen=True)
class SelectedFood:
    """A food picked for a timeslot; amount is grams or a unit count."""

    name: str
    amount: float


@dataclass(frozen=True)
class TimeslotMealData:
    """Foods and manually logged nutrition for one named timeslot."""

    selected_foods: tuple[SelectedFood, ...] = ()
    external_nutrition: MacroTotals = field(default_factory=MacroTotals.zero)

    @property
    def has_foods(self) -> bool:
        """Return True when at least one food is selected."""
        return len(self.selected_foods) > 0


@dataclass(frozen=True)
class MealPlan:
    """Legacy per-day meal plan keyed by timeslot."""

    user_id: str
    date: date
    timeslots: dict[str, TimeslotMealData]
    total_macros: MacroTotals = field(default_factory=MacroTotals.zero)


@dataclass(frozen=True)
class CalorieValidation:
    """Result of comparing entered calories with macro-derived calories."""

    valid: bool
    calculated_calories: int
    difference: float


Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]


@dataclass(frozen=True)
class UserProfile:
    """Body measurements and goal used to derive daily nutrition targets."""

    weight_kg: float
    height_cm: float
    age: int
    gender: Gender
    activity_level: ActivityLevel
    goal: str = "maintain"


@dataclass(frozen=True)
class NutritionTargets:
    """Daily energy expenditure and macro targets for a profile."""

    bmr: int
    tdee: int
    adjusted_calories: int
    protein: int
    carbs: int
    fats: int
    calories: int


@dataclass(frozen=True)
class MacroSplit:
    """Shares of calories assigned to protein, carbs and fats."""

    protein: float
    carbs: float
    fats: float
