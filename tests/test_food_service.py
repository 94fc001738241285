"""Tests for the food service."""

from datetime import timedelta

import pytest

from macro_tracker.domain.errors import (
    ConflictError,
    NotFoundError,
    TransientStorageError,
    ValidationError,
)
from macro_tracker.services.foods import FoodService
from macro_tracker.services.validation import current_date
from tests.conftest import FrozenClock, InMemoryFoodRepository

USER_ID = "user-1"
CHICKEN = {
    "name": "Chicken Breast",
    "protein": 30,
    "carbs": 0,
    "fats": 3,
    "date": "2024-01-15",
}


def test_create_food_persists_entity(
    food_service: FoodService, food_repository: InMemoryFoodRepository
) -> None:
    entity = food_service.create_food(USER_ID, CHICKEN)

    assert entity.calories == 147
    assert entity.created_at == "2024-01-15T12:00:00.000Z"
    assert food_repository.items[(entity.pk, entity.sk)] == entity


def test_create_food_rejects_invalid_input_before_storage(
    food_service: FoodService, food_repository: InMemoryFoodRepository
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        food_service.create_food(USER_ID, {**CHICKEN, "protein": -1})

    assert excinfo.value.message == "Protein cannot be negative"
    assert food_repository.calls == []


def test_create_food_surfaces_conflict_and_throttling(
    food_repository: InMemoryFoodRepository, clock: FrozenClock
) -> None:
    service = FoodService(repository=food_repository, clock=clock)
    service.create_food(USER_ID, CHICKEN)

    food_repository.failure = TransientStorageError()
    with pytest.raises(TransientStorageError):
        service.create_food(USER_ID, CHICKEN)

    food_repository.failure = ConflictError()
    with pytest.raises(ConflictError):
        service.create_food(USER_ID, CHICKEN)


def test_get_food_is_scoped_to_owner(food_service: FoodService) -> None:
    created = food_service.create_food(USER_ID, CHICKEN)

    assert food_service.get_food(USER_ID, created.food_id) == created
    with pytest.raises(NotFoundError):
        food_service.get_food("someone-else", created.food_id)
    with pytest.raises(NotFoundError):
        food_service.get_food(USER_ID, "food-missing")


def test_list_foods_aggregates_totals(
    food_service: FoodService, clock: FrozenClock
) -> None:
    for calories in (100, 200, 150):
        clock.now += timedelta(minutes=1)
        food_service.create_food(
            USER_ID,
            {
                "name": f"fat {calories}",
                "fats": calories / 9,
                "date": "2024-01-15",
            },
        )
    food_service.create_food(USER_ID, {**CHICKEN, "date": "2024-01-16"})

    result = food_service.list_foods(USER_ID, "2024-01-15")

    assert result.count == 3
    assert result.totals.calories == 450
    assert [food.name for food in result.foods] == ["fat 100", "fat 200", "fat 150"]


def test_list_foods_defaults_to_today(
    food_service: FoodService, food_repository: InMemoryFoodRepository
) -> None:
    result = food_service.list_foods(USER_ID)

    assert result.date == current_date()
    assert result.count == 0
    assert food_repository.calls == [("list", current_date())]


def test_list_foods_rejects_bad_dates(food_service: FoodService) -> None:
    with pytest.raises(ValidationError) as excinfo:
        food_service.list_foods(USER_ID, "2024-02-30")

    assert excinfo.value.message == "Invalid date format. Use YYYY-MM-DD"


def test_update_food_in_place_when_date_unchanged(
    food_service: FoodService,
    food_repository: InMemoryFoodRepository,
    clock: FrozenClock,
) -> None:
    created = food_service.create_food(USER_ID, CHICKEN)
    clock.now += timedelta(hours=2)

    updated = food_service.update_food(
        USER_ID, created.food_id, {**CHICKEN, "protein": 40}
    )

    assert updated.sk == created.sk
    assert updated.calories == 187
    assert updated.created_at == created.created_at
    assert updated.updated_at == "2024-01-15T14:00:00.000Z"
    assert ("update", created.sk) in food_repository.calls
    assert food_repository.items[(created.pk, created.sk)] == updated


def test_update_food_moves_entry_when_date_changes(
    food_repository: InMemoryFoodRepository, clock: FrozenClock
) -> None:
    service = FoodService(repository=food_repository, clock=clock)
    created = service.create_food(USER_ID, {**CHICKEN, "date": "2024-01-10"})
    clock.now += timedelta(days=1)

    updated = service.update_food(
        USER_ID, created.food_id, {**CHICKEN, "date": "2024-01-20"}
    )

    assert updated.sk.startswith("DATE#2024-01-20#")
    assert (created.pk, created.sk) not in food_repository.items
    assert food_repository.items[(updated.pk, updated.sk)] == updated
    assert updated.created_at == created.created_at
    assert updated.updated_at == "2024-01-16T12:00:00.000Z"
    assert updated.timestamp == created.timestamp
    assert service.list_foods(USER_ID, "2024-01-10").count == 0
    assert service.list_foods(USER_ID, "2024-01-20").count == 1


def test_update_food_validates_before_lookup(
    food_service: FoodService, food_repository: InMemoryFoodRepository
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        food_service.update_food(USER_ID, "food-1", {"name": "Egg", "protein": 6})

    assert excinfo.value.message == "Date is required"
    assert food_repository.calls == []


def test_update_food_missing_entry(food_service: FoodService) -> None:
    with pytest.raises(NotFoundError):
        food_service.update_food(USER_ID, "food-missing", CHICKEN)


def test_delete_food_removes_entry(
    food_service: FoodService, food_repository: InMemoryFoodRepository
) -> None:
    created = food_service.create_food(USER_ID, CHICKEN)

    food_service.delete_food(USER_ID, created.food_id)

    assert food_repository.items == {}
    with pytest.raises(NotFoundError):
        food_service.delete_food(USER_ID, created.food_id)
