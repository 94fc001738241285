"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from macro_tracker.api.app import create_app
from macro_tracker.api.foods import require_user_id
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.errors import ConflictError, NotFoundError
from macro_tracker.domain.foods import FoodEntity
from macro_tracker.domain.keys import ALL_FOODS_PREFIX, date_prefix, user_partition_key
from macro_tracker.services.foods import FoodRepository, FoodService

TEST_USER_ID = "test-user-123"
FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository keyed like the DynamoDB table."""

    items: dict[tuple[str, str], FoodEntity] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    failure: Exception | None = None

    def create_food(self, entity: FoodEntity) -> None:
        self._record("create", entity.sk)
        key = (entity.pk, entity.sk)
        if key in self.items:
            raise ConflictError()
        self.items[key] = entity

    def find_food(self, user_id: str, food_id: str) -> FoodEntity | None:
        self._record("find", food_id)
        for food in self._partition(user_id, ALL_FOODS_PREFIX):
            if food.food_id == food_id:
                return food
        return None

    def list_foods(
        self, user_id: str, date: str, ascending: bool = True
    ) -> list[FoodEntity]:
        self._record("list", date)
        foods = self._partition(user_id, date_prefix(date))
        return foods if ascending else list(reversed(foods))

    def update_food(self, entity: FoodEntity) -> None:
        self._record("update", entity.sk)
        key = (entity.pk, entity.sk)
        if key not in self.items:
            raise NotFoundError()
        self.items[key] = entity

    def move_food(self, previous: FoodEntity, updated: FoodEntity) -> None:
        self._record("move", updated.sk)
        self.items.pop((previous.pk, previous.sk))
        self.items[(updated.pk, updated.sk)] = updated

    def delete_food(self, entity: FoodEntity) -> None:
        self._record("delete", entity.sk)
        self.items.pop((entity.pk, entity.sk), None)

    def add(self, entity: FoodEntity) -> FoodEntity:
        self.items[(entity.pk, entity.sk)] = entity
        return entity

    def _partition(self, user_id: str, prefix: str) -> list[FoodEntity]:
        pk = user_partition_key(user_id)
        return [
            self.items[key]
            for key in sorted(self.items)
            if key[0] == pk and key[1].startswith(prefix)
        ]

    def _record(self, action: str, detail: str) -> None:
        self.calls.append((action, detail))
        if self.failure is not None:
            raise self.failure


@dataclass
class FrozenClock:
    """Clock returning a settable instant."""

    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(table_name="test-table", aws_region="us-west-2")


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def food_service(
    food_repository: InMemoryFoodRepository, clock: FrozenClock
) -> FoodService:
    return FoodService(repository=food_repository, clock=clock)


@pytest.fixture
def container(settings: Settings, food_service: FoodService) -> AppContainer:
    return AppContainer(settings=settings, food_service=food_service)


@pytest.fixture
def app(container: AppContainer) -> FastAPI:
    return create_app(container)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Client whose requests carry an authorizer-verified identity."""
    app.dependency_overrides[require_user_id] = lambda: TEST_USER_ID
    return TestClient(app)


@pytest.fixture
def anonymous_client(app: FastAPI) -> TestClient:
    return TestClient(app)
