"""Tests for the dashboard API."""

from datetime import UTC, date, datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from life_dashboard.api.app import create_app
from life_dashboard.domain.activities import (
    ActivityHistoryRecord,
    ActivityType,
    ScheduledActivities,
)
from life_dashboard.domain.costs import ConsumptionRecord
from life_dashboard.domain.nutrition import MacroTotals
from life_dashboard.domain.workouts import ScheduledWorkout
from tests.conftest import TODAY, USER_ID

HEADERS = {"X-Api-Token": "api-token"}


def _consumed(name: str, quantity: float, unit: str, day: int) -> ConsumptionRecord:
    return ConsumptionRecord(
        food_name=name,
        quantity=quantity,
        unit=unit,
        nutrition=MacroTotals(protein=10, fats=1, carbs=1, calories=50),
        consumed_at=datetime(2024, 3, day, 12, tzinfo=UTC),
    )


def test_health_does_not_require_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_routes_require_token(container) -> None:
    client = TestClient(create_app(container))

    missing = client.get("/calendar/2024/3")
    wrong = client.get("/calendar/2024/3", headers={"X-Api-Token": "nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401


def test_calendar_month_returns_full_grid(container, fakes) -> None:
    fakes.schedules.schedules[TODAY] = ScheduledActivities(
        user_id=USER_ID, date=TODAY, tasks=("morning",)
    )
    client = TestClient(create_app(container))

    response = client.get("/calendar/2024/3", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert (data["year"], data["month"]) == (2024, 3)
    assert len(data["days"]) == 42
    assert data["days"][0]["date"] == "2024-02-25"
    today = next(day for day in data["days"] if day["date"] == "2024-03-15")
    assert today["is_today"] is True
    assert today["events"] == [
        {"type": "other", "title": "Morning Routine", "completed": False}
    ]


def test_calendar_month_rejects_invalid_month(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/calendar/2024/13", headers=HEADERS)

    assert response.status_code == 422


def test_calendar_day(container, fakes) -> None:
    fakes.workouts.workouts.append(
        ScheduledWorkout(
            id="w1",
            user_id=USER_ID,
            scheduled_date=date(2024, 3, 14),
            name="Push",
            workout_type="strength",
        )
    )
    client = TestClient(create_app(container))

    response = client.get("/calendar/days/2024-03-14", headers=HEADERS)

    assert response.status_code == 200
    day = response.json()["day"]
    assert day["is_today"] is False
    assert day["events"] == [{"type": "gym", "title": "Push", "completed": False}]
    assert day["module_data"]["gym"]["workout_count"] == 1


def test_toggle_activity(container, fakes) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/activities/toggle",
        json={"date": "2024-03-15", "activity_type": "gym", "completed": True},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["day"]["events"] == [
        {"type": "gym", "title": "Gym Session", "completed": True}
    ]
    assert fakes.history.upserts[0].activity_type is ActivityType.GYM


def test_toggle_activity_rejects_unknown_activity(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/activities/toggle",
        json={"date": "2024-03-15", "activity_type": "yoga", "completed": True},
        headers=HEADERS,
    )

    assert response.status_code == 422


def test_toggle_activity_reports_failed_write(container, fakes) -> None:
    fakes.history.fail_writes = True
    client = TestClient(create_app(container))

    response = client.post(
        "/activities/toggle",
        json={"date": "2024-03-15", "activity_type": "morning", "completed": True},
        headers=HEADERS,
    )

    assert response.status_code == 502
    assert "Failed to save activity history" in response.json()["detail"]


def test_module_stats(container, fakes) -> None:
    fakes.history.records.append(
        ActivityHistoryRecord(
            user_id=USER_ID,
            date=TODAY,
            activity_type=ActivityType.GYM,
            completed=True,
        )
    )
    client = TestClient(create_app(container))

    response = client.get("/stats/gym", headers=HEADERS)
    unknown = client.get("/stats/sleep", headers=HEADERS)

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["module"] == "gym"
    assert stats["today_progress"] == 100
    assert stats["current_streak"] == 1
    assert stats["monthly_completed"] == 1
    assert stats["monthly_total"] == 15
    assert unknown.status_code == 422


def test_calculate_nutrition(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition/calculate",
        json={
            "foods": [
                {"name": "Eggs", "amount": 2},
                {"name": "Chicken breast", "amount": 200},
                {"name": "Mystery", "amount": 50},
            ]
        },
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["macros"]["calories"] == pytest.approx(510)
    assert data["macros"]["protein"] == pytest.approx(77)
    assert data["percentages"]["protein"] == 60
    assert data["cost"]["total_cost"] == pytest.approx(2.0)
    assert data["cost"]["unknown_cost_foods"] == ["Mystery"]
    assert data["unknown_foods"] == ["Mystery"]


def test_validate_calories(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition/validate-calories",
        json={"calories": 560, "protein": 30, "fats": 20, "carbs": 50},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["validation"] == {
        "valid": False,
        "calculated_calories": 500,
        "difference": 60,
    }


def test_nutrition_targets(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition/targets",
        json={
            "weight_kg": 80,
            "height_cm": 180,
            "age": 30,
            "gender": "male",
            "activity_level": "moderate",
        },
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["targets"] == {
        "bmr": 1780,
        "tdee": 2759,
        "adjusted_calories": 2759,
        "protein": 172,
        "carbs": 310,
        "fats": 92,
        "calories": 2759,
    }


def test_nutrition_targets_reject_bad_profile(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition/targets",
        json={
            "weight_kg": 0,
            "height_cm": 180,
            "age": 30,
            "gender": "other",
            "activity_level": "moderate",
        },
        headers=HEADERS,
    )

    assert response.status_code == 422


def test_calculate_recipe(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/recipes/calculate",
        json={
            "ingredients": [
                {"name": "Eggs", "amount": 4},
                {"name": "Chicken breast", "amount": 500},
                {"name": "Mystery", "amount": 100},
            ],
            "servings": 4,
        },
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["recipe"]["total_cost"] == pytest.approx(4.8)
    assert data["recipe"]["per_serving_cost"] == pytest.approx(1.2)
    assert data["recipe"]["per_serving_nutrition"]["calories"] == pytest.approx(296.25)
    assert data["unknown_foods"] == ["Mystery"]


def test_period_costs_default_to_current_month(container, fakes) -> None:
    fakes.consumptions.records.extend(
        [
            _consumed("Chicken breast", 200, "g", 10),
            _consumed("Eggs", 3, "unit", 12),
            _consumed("Rice", 150, "g", 12),
        ]
    )
    client = TestClient(create_app(container))

    response = client.get(
        "/costs", params={"sort": "total_cost", "descending": True}, headers=HEADERS
    )

    assert response.status_code == 200
    data = response.json()
    assert (data["start"], data["end"]) == ("2024-03-01", "2024-03-31")
    assert data["total_cost"] == pytest.approx(2.2)
    assert [row["food_name"] for row in data["foods"]] == [
        "Chicken breast",
        "Eggs",
        "Rice",
    ]
    assert data["foods"][2]["total_cost"] is None


def test_period_costs_reject_inverted_range(container) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/costs",
        params={"start": "2024-03-10", "end": "2024-03-01"},
        headers=HEADERS,
    )

    assert response.status_code == 422


def test_cost_efficiency(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/costs/efficiency", headers=HEADERS)

    assert response.status_code == 200
    rows = response.json()["foods"]
    assert [row["food_name"] for row in rows] == ["Chicken breast", "Eggs"]
    assert rows[0]["cost_per_100g_or_unit"] == pytest.approx(0.8)


def test_monthly_costs(container, fakes) -> None:
    fakes.consumptions.records.extend(
        [
            _consumed("Chicken breast", 200, "g", 10),
            _consumed("Eggs", 3, "unit", 12),
        ]
    )
    client = TestClient(create_app(container))

    response = client.get("/costs/monthly/2024/3", headers=HEADERS)

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["month"] == "2024-03"
    assert summary["total_days"] == 2
    assert summary["unique_foods"] == 2
    assert [row["food_name"] for row in summary["foods"]] == [
        "Eggs",
        "Chicken breast",
    ]


def test_food_search(container, fakes) -> None:
    fakes.open_food_facts.payload = {
        "products": [
            {
                "product_name": "Skyr",
                "nutriments": {"proteins_100g": 11, "energy-kcal_100g": 63},
            }
        ]
    }
    client = TestClient(create_app(container))

    response = client.get("/foods/search", params={"q": "skyr"}, headers=HEADERS)

    assert response.status_code == 200
    foods = response.json()["foods"]
    assert foods[0]["name"] == "Skyr"
    assert foods[0]["nutrition"]["calories"] == 63
    assert foods[0]["cost"] is None


def test_food_search_unavailable(container, fakes) -> None:
    fakes.open_food_facts.errors = [
        httpx.ConnectError("offline"),
        httpx.ConnectError("offline"),
    ]
    client = TestClient(create_app(container))

    response = client.get("/foods/search", params={"q": "skyr"}, headers=HEADERS)

    assert response.status_code == 502
    assert response.json() == {"detail": "Food search is unavailable"}


def test_schedule_tasks(container, fakes) -> None:
    client = TestClient(create_app(container))

    added = client.post(
        "/schedule/2024-03-20/tasks", json={"task": "gym-workout"}, headers=HEADERS
    )
    removed = client.delete("/schedule/2024-03-20/tasks/gym-workout", headers=HEADERS)

    assert added.status_code == 200
    assert added.json()["schedule"]["tasks"] == ["gym-workout"]
    assert removed.status_code == 200
    assert removed.json()["schedule"]["tasks"] == []
    assert len(fakes.schedules.saved) == 2


def test_schedule_task_errors(container) -> None:
    client = TestClient(create_app(container))

    blank = client.post(
        "/schedule/2024-03-20/tasks", json={"task": "  "}, headers=HEADERS
    )
    missing = client.delete("/schedule/2024-03-21/tasks/morning", headers=HEADERS)

    assert blank.status_code == 422
    assert missing.status_code == 404


def test_workout_stats(container, fakes) -> None:
    fakes.workouts.workouts.extend(
        [
            ScheduledWorkout(
                id="w1",
                user_id=USER_ID,
                scheduled_date=date(2024, 3, 10),
                name="Legs",
                workout_type="strength",
                status="completed",
                estimated_duration=60,
            ),
            ScheduledWorkout(
                id="w2",
                user_id=USER_ID,
                scheduled_date=date(2024, 3, 12),
                name="Run",
                workout_type="cardio",
                status="skipped",
            ),
        ]
    )
    client = TestClient(create_app(container))

    response = client.get("/workouts/stats", params={"days_back": 7}, headers=HEADERS)

    assert response.status_code == 200
    statistics = response.json()["statistics"]
    assert statistics["total_workouts"] == 2
    assert statistics["completion_rate"] == 50
    assert statistics["workout_type_breakdown"] == {"strength": 1, "cardio": 1}
    assert statistics["average_duration"] == 60
