"""Food entry service orchestrating validation and storage."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from macro_tracker.domain.errors import NotFoundError, ValidationError
from macro_tracker.domain.foods import FoodEntity, FoodList, Invalid, ValidatedFood
from macro_tracker.services.entities import (
    apply_food_update,
    create_food_entity,
    summarize_foods,
)
from macro_tracker.services.validation import (
    INVALID_DATE_MESSAGE,
    current_date,
    is_valid_date_format,
    validate_food_input,
)

logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for food entries."""

    def create_food(self, entity: FoodEntity) -> None:
        """Insert an entity; raise ConflictError if its key is taken."""

    def find_food(self, user_id: str, food_id: str) -> FoodEntity | None:
        """Return the user's entity with the given id, if present."""

    def list_foods(
        self, user_id: str, date: str, ascending: bool = True
    ) -> list[FoodEntity]:
        """Return the user's entities logged on a date, ordered by time."""

    def update_food(self, entity: FoodEntity) -> None:
        """Overwrite the mutable fields of an entity at its current key."""

    def move_food(self, previous: FoodEntity, updated: FoodEntity) -> None:
        """Delete the previous key and insert the updated entity atomically."""

    def delete_food(self, entity: FoodEntity) -> None:
        """Delete an entity by its exact key."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FoodService:
    """Application service for the food CRUD operations."""

    repository: FoodRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def create_food(self, user_id: str, payload: dict[str, object]) -> FoodEntity:
        """Validate input and persist a new food entry."""
        data = _validated(payload)
        entity = create_food_entity(user_id, data, now=self.clock())
        self.repository.create_food(entity)
        logger.info(
            "Food created",
            extra={"food_id": entity.food_id, "user_id": user_id},
        )
        return entity

    def get_food(self, user_id: str, food_id: str) -> FoodEntity:
        """Return a food entry owned by the user."""
        entity = self.repository.find_food(user_id, food_id)
        if entity is None:
            raise NotFoundError()
        return entity

    def list_foods(self, user_id: str, date: str | None = None) -> FoodList:
        """Return a day's food entries with their totals."""
        resolved_date = date or current_date()
        if not is_valid_date_format(resolved_date):
            raise ValidationError(INVALID_DATE_MESSAGE)
        foods = self.repository.list_foods(user_id, resolved_date, ascending=True)
        logger.info(
            "Listed foods",
            extra={"user_id": user_id, "date": resolved_date, "count": len(foods)},
        )
        return FoodList(
            date=resolved_date, foods=foods, totals=summarize_foods(foods)
        )

    def update_food(
        self, user_id: str, food_id: str, payload: dict[str, object]
    ) -> FoodEntity:
        """Replace a food entry's values, re-keying it when the date changes."""
        data = _validated(payload, require_date=True)
        existing = self.get_food(user_id, food_id)
        updated = apply_food_update(existing, data, now=self.clock())
        if updated.sk != existing.sk:
            self.repository.move_food(existing, updated)
            logger.info(
                "Food moved to new date",
                extra={
                    "food_id": food_id,
                    "from_date": existing.date,
                    "to_date": updated.date,
                },
            )
        else:
            self.repository.update_food(updated)
            logger.info("Food updated", extra={"food_id": food_id})
        return updated

    def delete_food(self, user_id: str, food_id: str) -> None:
        """Delete a food entry owned by the user."""
        entity = self.get_food(user_id, food_id)
        self.repository.delete_food(entity)
        logger.info("Food deleted", extra={"food_id": food_id})


def _validated(
    payload: dict[str, object], *, require_date: bool = False
) -> ValidatedFood:
    result = validate_food_input(payload, require_date=require_date)
    if isinstance(result, Invalid):
        raise ValidationError(result.error)
    return result.data
