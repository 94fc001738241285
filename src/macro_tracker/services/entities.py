"""Assembly of storable food entities and their public views."""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from macro_tracker.domain.foods import FoodEntity, FoodTotals, ValidatedFood
from macro_tracker.domain.keys import food_keys


def generate_food_id() -> str:
    """Return a new unique food id."""
    return f"food-{uuid4()}"


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_epoch_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def to_iso_instant(moment: datetime) -> str:
    """Format an instant as UTC ISO-8601 with millisecond precision."""
    utc = moment.astimezone(UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_food_entity(
    user_id: str,
    data: ValidatedFood,
    food_id: str | None = None,
    now: datetime | None = None,
) -> FoodEntity:
    """Build a new entity, stamping ids, key and audit instants."""
    resolved_id = food_id or generate_food_id()
    moment = now or datetime.now(tz=UTC)
    timestamp = to_epoch_millis(moment)
    instant = to_iso_instant(moment)
    key = food_keys(user_id, data.date, timestamp, resolved_id)
    return FoodEntity(
        pk=key.pk,
        sk=key.sk,
        food_id=resolved_id,
        user_id=user_id,
        name=data.name,
        protein=data.protein,
        carbs=data.carbs,
        fats=data.fats,
        calories=data.calories,
        date=data.date,
        timestamp=timestamp,
        created_at=instant,
        updated_at=instant,
    )


def apply_food_update(
    entity: FoodEntity, data: ValidatedFood, now: datetime | None = None
) -> FoodEntity:
    """Return the entity with new values; the key follows the date."""
    moment = now or datetime.now(tz=UTC)
    key = food_keys(entity.user_id, data.date, entity.timestamp, entity.food_id)
    return replace(
        entity,
        pk=key.pk,
        sk=key.sk,
        name=data.name,
        protein=data.protein,
        carbs=data.carbs,
        fats=data.fats,
        calories=data.calories,
        date=data.date,
        updated_at=to_iso_instant(moment),
    )


def extract_response_data(entity: FoodEntity) -> dict[str, object]:
    """Return the public fields of an entity in API order."""
    return {
        "foodId": entity.food_id,
        "name": entity.name,
        "protein": entity.protein,
        "carbs": entity.carbs,
        "fats": entity.fats,
        "calories": entity.calories,
        "date": entity.date,
        "createdAt": entity.created_at,
        "updatedAt": entity.updated_at,
    }


def summarize_foods(foods: list[FoodEntity]) -> FoodTotals:
    """Sum macros and calories across entries."""
    total = FoodTotals(protein=0, carbs=0, fats=0, calories=0)
    for food in foods:
        total = FoodTotals(
            protein=total.protein + food.protein,
            carbs=total.carbs + food.carbs,
            fats=total.fats + food.fats,
            calories=total.calories + food.calories,
        )
    return total
