"""Dashboard API endpoints."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Literal
from zoneinfo import ZoneInfo

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status

from life_dashboard.api.auth import require_token
from life_dashboard.api.models import (  # noqa: TC001
    CalculateNutritionRequest,
    NutritionTargetsRequest,
    RecipeRequest,
    ScheduleTaskRequest,
    ToggleActivityRequest,
    ValidateCaloriesRequest,
)
from life_dashboard.dates import month_bounds
from life_dashboard.domain.nutrition import MacroTotals, TimeslotMealData
from life_dashboard.domain.stats import ModuleName  # noqa: TC001
from life_dashboard.services.activities import ActivityPersistenceError
from life_dashboard.services.costs import (
    calculate_meal_cost,
    cost_efficiency_rows,
    sort_rows,
    summarize_recipe,
)
from life_dashboard.services.nutrition import (
    calculate_macro_percentage,
    calculate_nutrition_targets,
    timeslot_macros,
    validate_calories,
)

if TYPE_CHECKING:
    from life_dashboard.containers import AppContainer

_logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_token)])

RollupColumn = Literal[
    "food_name",
    "total_quantity",
    "total_cost",
    "occurrences",
    "last_consumed",
    "total_kilos",
]
EfficiencyColumn = Literal[
    "food_name",
    "cost_per_100g_or_unit",
    "cost_per_kg",
    "cost_per_gram_protein",
    "cost_per_gram_carbs",
    "cost_per_gram_fats",
]


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/calendar/days/{day}")
async def calendar_day(day: date, request: Request) -> dict[str, object]:
    """Return the reconciled state of one date."""
    container = _container(request)
    return {"day": container.dashboard_service.get_day(day)}


@router.get("/calendar/{year}/{month}")
async def calendar_month(
    request: Request,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> dict[str, object]:
    """Return the 42-cell grid for a month."""
    container = _container(request)
    days = container.dashboard_service.build_calendar(year, month)
    return {"year": year, "month": month, "days": list(days)}


@router.post("/activities/toggle")
async def toggle_activity(
    payload: ToggleActivityRequest, request: Request
) -> dict[str, object]:
    """Persist a completion toggle and return the updated day."""
    container = _container(request)
    try:
        day = await container.dashboard_service.toggle_activity(
            payload.date, payload.activity_type, payload.completed
        )
    except ActivityPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc
    return {"day": day}


@router.get("/stats/{module}")
async def module_stats(module: ModuleName, request: Request) -> dict[str, object]:
    """Return progress, monthly completion and streaks for a module."""
    container = _container(request)
    stats = container.stats_service.get_module_stats(
        container.settings.dashboard_user_id,
        module,
        container.dashboard_service.today(),
    )
    return {"stats": stats}


@router.post("/nutrition/calculate")
async def calculate_nutrition(
    payload: CalculateNutritionRequest, request: Request
) -> dict[str, object]:
    """Return macros, macro shares and cost for one timeslot."""
    container = _container(request)
    catalog = container.catalog_service.get_catalog()
    slot = TimeslotMealData(
        selected_foods=tuple(food.to_domain() for food in payload.foods),
        external_nutrition=(
            payload.external_nutrition.to_domain()
            if payload.external_nutrition
            else MacroTotals.zero()
        ),
    )
    macros = timeslot_macros(slot, catalog)
    return {
        "macros": macros,
        "percentages": {
            "protein": calculate_macro_percentage(
                "protein", macros.protein, macros.calories
            ),
            "fats": calculate_macro_percentage("fats", macros.fats, macros.calories),
            "carbs": calculate_macro_percentage("carbs", macros.carbs, macros.calories),
        },
        "cost": calculate_meal_cost(slot.selected_foods, catalog),
        "unknown_foods": [
            food.name for food in slot.selected_foods if food.name not in catalog
        ],
    }


@router.post("/nutrition/validate-calories")
async def check_calories(
    payload: ValidateCaloriesRequest, request: Request
) -> dict[str, object]:
    """Compare entered calories with the calories implied by macros."""
    container = _container(request)
    return {
        "validation": validate_calories(
            payload.calories,
            payload.protein,
            payload.fats,
            payload.carbs,
            tolerance=container.settings.calorie_tolerance,
        )
    }


@router.post("/nutrition/targets")
async def nutrition_targets(payload: NutritionTargetsRequest) -> dict[str, object]:
    """Return BMR, TDEE and daily macro targets for a profile."""
    return {"targets": calculate_nutrition_targets(payload.to_domain())}


@router.post("/recipes/calculate")
async def calculate_recipe(
    payload: RecipeRequest, request: Request
) -> dict[str, object]:
    """Return total and per-serving nutrition and cost for a recipe."""
    container = _container(request)
    catalog = container.catalog_service.get_catalog()
    ingredients = [ingredient.to_domain() for ingredient in payload.ingredients]
    return {
        "recipe": summarize_recipe(ingredients, payload.servings, catalog),
        "unknown_foods": [
            ingredient.name
            for ingredient in ingredients
            if ingredient.name not in catalog
        ],
    }


@router.get("/costs")
async def period_costs(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    sort: RollupColumn = "food_name",
    descending: bool = False,
) -> dict[str, object]:
    """Return per-food cost rollups for ``start <= day <= end``.

    Defaults to the current month.
    """
    container = _container(request)
    today = container.dashboard_service.today()
    first, following = month_bounds(today.year, today.month)
    start = start or first
    end = end or following - timedelta(days=1)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end must not be before start",
        )
    zone = ZoneInfo(container.settings.timezone)
    summary = container.cost_service.get_period_costs(
        container.settings.dashboard_user_id,
        container.catalog_service.get_catalog(),
        datetime(start.year, start.month, start.day, tzinfo=zone),
        datetime(end.year, end.month, end.day, tzinfo=zone) + timedelta(days=1),
    )
    return {
        "start": start,
        "end": end,
        "total_cost": summary.total_cost,
        "foods": sort_rows(summary.rows(), sort, descending=descending),
    }


@router.get("/costs/efficiency")
async def cost_efficiency(
    request: Request,
    sort: EfficiencyColumn = "food_name",
    descending: bool = False,
) -> dict[str, object]:
    """Return cost per 100 g or unit and per macro gram for priced foods."""
    container = _container(request)
    rows = cost_efficiency_rows(container.catalog_service.get_catalog())
    return {"foods": sort_rows(rows, sort, descending=descending)}


@router.get("/costs/monthly/{year}/{month}")
async def monthly_costs(
    request: Request,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> dict[str, object]:
    """Return the consumption overview for a month."""
    container = _container(request)
    summary = container.cost_service.get_month_summary(
        container.settings.dashboard_user_id,
        container.catalog_service.get_catalog(),
        year,
        month,
        ZoneInfo(container.settings.timezone),
    )
    return {"summary": summary}


@router.get("/foods/search")
async def search_foods(
    request: Request,
    q: str = Query(min_length=1),
    limit: int = Query(default=10, ge=1, le=50),
) -> dict[str, object]:
    """Search Open Food Facts for catalog candidates."""
    container = _container(request)
    try:
        foods = await container.food_lookup_service.search(q, limit=limit)
    except httpx.HTTPError as exc:
        _logger.warning("Food search failed: query=%s error=%s", q, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Food search is unavailable",
        ) from exc
    return {"foods": foods}


@router.post("/schedule/{day}/tasks")
async def add_scheduled_task(
    day: date, payload: ScheduleTaskRequest, request: Request
) -> dict[str, object]:
    """Add a task to a date's schedule."""
    container = _container(request)
    try:
        schedule = container.schedule_service.add_task(
            container.settings.dashboard_user_id, day, payload.task
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return {"schedule": schedule}


@router.delete("/schedule/{day}/tasks/{task}")
async def remove_scheduled_task(
    day: date, task: str, request: Request
) -> dict[str, object]:
    """Remove a task from a date's schedule."""
    container = _container(request)
    schedule = container.schedule_service.remove_task(
        container.settings.dashboard_user_id, day, task
    )
    if schedule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"schedule": schedule}


@router.get("/workouts/stats")
async def workout_stats(
    request: Request, days_back: int = Query(default=30, ge=1, le=365)
) -> dict[str, object]:
    """Return workout statistics for a recent window."""
    container = _container(request)
    statistics = container.workout_service.get_statistics(
        container.settings.dashboard_user_id,
        container.dashboard_service.today(),
        days_back=days_back,
    )
    return {"statistics": statistics}
