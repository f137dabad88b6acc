"""Tests for the activity completion store."""

import asyncio
from datetime import date

import pytest

from life_dashboard.domain.activities import ActivityHistoryRecord, ActivityType
from life_dashboard.domain.nutrition import MealPlan, SelectedFood, TimeslotMealData
from life_dashboard.services.activities import (
    PLACEHOLDER_FOOD,
    ActivityCompletionStore,
    ActivityPersistenceError,
)
from tests.conftest import (
    TODAY,
    USER_ID,
    InMemoryActivityHistoryRepository,
    InMemoryMealPlanRepository,
)


def _store(
    history: InMemoryActivityHistoryRepository | None = None,
    plans: InMemoryMealPlanRepository | None = None,
) -> ActivityCompletionStore:
    return ActivityCompletionStore(
        user_id=USER_ID,
        history_repository=history or InMemoryActivityHistoryRepository(),
        meal_plan_repository=plans or InMemoryMealPlanRepository(),
    )


def test_toggle_updates_state_and_persists() -> None:
    history = InMemoryActivityHistoryRepository()
    store = _store(history)

    asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))

    assert store.activity_map(TODAY) == {ActivityType.GYM: True}
    assert len(history.upserts) == 1
    assert history.upserts[0].completed is True
    assert history.upserts[0].updated_at is not None


def test_toggle_replaces_existing_record() -> None:
    store = _store()

    asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))
    asyncio.run(store.toggle(TODAY, ActivityType.GYM, False))

    assert len(store.history_for(TODAY)) == 1
    assert store.activity_map(TODAY) == {ActivityType.GYM: False}


def test_toggle_twice_with_same_value_is_idempotent() -> None:
    store = _store()

    asyncio.run(store.toggle(TODAY, ActivityType.MORNING, True))
    first = store.activity_map(TODAY)
    asyncio.run(store.toggle(TODAY, ActivityType.MORNING, True))

    assert store.activity_map(TODAY) == first
    assert len(store.records) == 1


def test_persistence_failure_keeps_optimistic_state() -> None:
    history = InMemoryActivityHistoryRepository(fail_writes=True)
    store = _store(history)

    with pytest.raises(ActivityPersistenceError, match="history store offline"):
        asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))

    assert store.activity_map(TODAY) == {ActivityType.GYM: True}
    assert history.records == []


def test_completing_meal_without_plan_creates_placeholder() -> None:
    plans = InMemoryMealPlanRepository()
    store = _store(plans=plans)

    asyncio.run(store.toggle(TODAY, ActivityType.MEAL_930PM, True))

    plan = plans.plans[TODAY]
    assert plan.timeslots["9:30pm"].selected_foods == (PLACEHOLDER_FOOD,)
    assert PLACEHOLDER_FOOD.name == "Quick Meal"
    assert PLACEHOLDER_FOOD.amount == 1
    assert plan.timeslots["6pm"].selected_foods == ()
    assert store.meal_plans == [plan]


def test_existing_plan_is_not_replaced() -> None:
    plans = InMemoryMealPlanRepository()
    existing = MealPlan(
        user_id=USER_ID, date=TODAY, timeslots={"6pm": TimeslotMealData()}
    )
    store = _store(plans=plans)
    store.meal_plans = [existing]

    asyncio.run(store.toggle(TODAY, ActivityType.MEAL_6PM, True))

    assert plans.plans == {}


def test_stored_plan_missing_locally_is_not_replaced() -> None:
    existing = MealPlan(
        user_id=USER_ID,
        date=TODAY,
        timeslots={"6pm": TimeslotMealData(selected_foods=(SelectedFood("Eggs", 3),))},
    )
    plans = InMemoryMealPlanRepository(plans={TODAY: existing})
    store = _store(plans=plans)

    asyncio.run(store.toggle(TODAY, ActivityType.MEAL_6PM, True))

    assert plans.plans == {TODAY: existing}
    assert store.meal_plans == [existing]


def test_plan_lookup_failure_skips_placeholder() -> None:
    plans = InMemoryMealPlanRepository(fail_reads=True)
    history = InMemoryActivityHistoryRepository()
    store = _store(history, plans)

    asyncio.run(store.toggle(TODAY, ActivityType.MEAL_930PM, True))

    assert plans.plans == {}
    assert store.meal_plans == []
    assert store.activity_map(TODAY) == {ActivityType.MEAL_930PM: True}
    assert len(history.upserts) == 1


@pytest.mark.parametrize(
    ("activity", "completed"),
    [
        (ActivityType.MEAL_6PM, False),
        (ActivityType.GYM, True),
        (ActivityType.MORNING, True),
    ],
)
def test_no_placeholder_for_other_toggles(
    activity: ActivityType, completed: bool
) -> None:
    plans = InMemoryMealPlanRepository()
    store = _store(plans=plans)

    asyncio.run(store.toggle(TODAY, activity, completed))

    assert plans.plans == {}


def test_listeners_are_notified_after_successful_write() -> None:
    store = _store()
    seen: list[int] = []
    store.subscribe(lambda records: seen.append(len(records)))

    asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))

    assert seen == [1]


def test_unsubscribe_stops_notifications() -> None:
    store = _store()
    seen: list[int] = []
    unsubscribe = store.subscribe(lambda records: seen.append(len(records)))

    unsubscribe()
    asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))

    assert seen == []


def test_write_completing_after_close_is_tolerated() -> None:
    store = _store()
    seen: list[int] = []
    store.subscribe(lambda records: seen.append(len(records)))

    async def toggle_then_close() -> None:
        pending = asyncio.create_task(store.toggle(TODAY, ActivityType.GYM, True))
        store.close()
        await pending

    asyncio.run(toggle_then_close())

    assert seen == []
    assert store.activity_map(TODAY) == {ActivityType.GYM: True}


def test_apply_snapshot_replaces_local_state() -> None:
    store = _store()
    asyncio.run(store.toggle(TODAY, ActivityType.GYM, True))
    yesterday = date(2024, 3, 14)
    snapshot = [
        ActivityHistoryRecord(
            user_id=USER_ID,
            date=yesterday,
            activity_type=ActivityType.MORNING,
            completed=True,
        )
    ]

    store.apply_snapshot(snapshot)

    assert store.activity_map(TODAY) == {}
    assert store.activity_map(yesterday) == {ActivityType.MORNING: True}
