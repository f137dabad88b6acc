"""Pydantic request models for the dashboard API."""

import datetime as dt

from pydantic import BaseModel, Field

from life_dashboard.domain.activities import ActivityType
from life_dashboard.domain.nutrition import (
    ActivityLevel,
    Gender,
    MacroTotals,
    SelectedFood,
    UserProfile,
)


class ToggleActivityRequest(BaseModel):
    """Completion toggle for one activity on one date."""

    date: dt.date
    activity_type: ActivityType
    completed: bool


class SelectedFoodPayload(BaseModel):
    """Food name with grams or a unit count."""

    name: str = Field(min_length=1)
    amount: float = Field(ge=0)

    def to_domain(self) -> SelectedFood:
        """Return the domain value."""
        return SelectedFood(name=self.name, amount=self.amount)


class MacroPayload(BaseModel):
    """Manually entered nutrition."""

    protein: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    calories: float = Field(default=0, ge=0)

    def to_domain(self) -> MacroTotals:
        """Return the domain value."""
        return MacroTotals(
            protein=self.protein,
            fats=self.fats,
            carbs=self.carbs,
            calories=self.calories,
        )


class CalculateNutritionRequest(BaseModel):
    """Foods for one timeslot plus optional external nutrition."""

    foods: list[SelectedFoodPayload] = Field(default_factory=list)
    external_nutrition: MacroPayload | None = None


class ValidateCaloriesRequest(BaseModel):
    """Entered calories with the macros they should match."""

    calories: float = Field(ge=0)
    protein: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)


class NutritionTargetsRequest(BaseModel):
    """Body measurements, activity level and goal."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(gt=0)
    gender: Gender
    activity_level: ActivityLevel
    goal: str = "maintain"

    def to_domain(self) -> UserProfile:
        """Return the domain value."""
        return UserProfile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age=self.age,
            gender=self.gender,
            activity_level=self.activity_level,
            goal=self.goal,
        )


class RecipeRequest(BaseModel):
    """Recipe ingredients and the number of servings it makes."""

    ingredients: list[SelectedFoodPayload] = Field(default_factory=list)
    servings: int = Field(default=1, ge=0)


class ScheduleTaskRequest(BaseModel):
    """Task identifier such as ``meal-6pm`` or ``gym-workout``."""

    task: str = Field(min_length=1)
