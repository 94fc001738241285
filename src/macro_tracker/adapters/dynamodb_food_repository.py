"""DynamoDB repository for food entries."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from macro_tracker.domain.errors import (
    ConfigurationError,
    ConflictError,
    InternalError,
    MacroTrackerError,
    NotFoundError,
    TransientStorageError,
)
from macro_tracker.domain.foods import FOOD_ENTITY_TYPE, FoodEntity
from macro_tracker.domain.keys import (
    ALL_FOODS_PREFIX,
    FoodKey,
    date_prefix,
    user_partition_key,
)
from macro_tracker.services.foods import FoodRepository

TRANSIENT_ERROR_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ProvisionedThroughputExceeded",
        "TransactionConflict",
        "ThrottlingException",
        "ThrottlingError",
        "RequestLimitExceeded",
        "ServiceUnavailable",
        "InternalServerError",
    }
)
CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
TRANSACTION_CANCELED = "TransactionCanceledException"


@dataclass
class DynamoDBFoodRepository(FoodRepository):
    """Single-table DynamoDB implementation for food entries."""

    resource: Any
    table_name: str | None

    def create_food(self, entity: FoodEntity) -> None:
        """Insert the entity only if nothing occupies its key."""
        try:
            self._table().put_item(
                Item=_to_item(entity),
                ConditionExpression="attribute_not_exists(PK)",
            )
        except ClientError as exc:
            raise _translate(exc, ConflictError()) from exc

    def find_food(self, user_id: str, food_id: str) -> FoodEntity | None:
        """Scan the user's partition for the entry with the given id.

        ``Limit`` is evaluated before the filter, so pages are followed until
        a match turns up or the partition is exhausted.
        """
        query: dict[str, object] = {
            "KeyConditionExpression": Key("PK").eq(user_partition_key(user_id))
            & Key("SK").begins_with(ALL_FOODS_PREFIX),
            "FilterExpression": Attr("foodId").eq(food_id),
        }
        table = self._table()
        while True:
            try:
                response = table.query(**query)
            except ClientError as exc:
                raise _translate(exc) from exc
            items = response.get("Items") or []
            if items:
                return _parse_item(items[0])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return None
            query["ExclusiveStartKey"] = last_key

    def list_foods(
        self, user_id: str, date: str, ascending: bool = True
    ) -> list[FoodEntity]:
        """Return every entry logged on the date, ordered by sort key."""
        query: dict[str, object] = {
            "KeyConditionExpression": Key("PK").eq(user_partition_key(user_id))
            & Key("SK").begins_with(date_prefix(date)),
            "ScanIndexForward": ascending,
        }
        table = self._table()
        foods: list[FoodEntity] = []
        while True:
            try:
                response = table.query(**query)
            except ClientError as exc:
                raise _translate(exc) from exc
            foods.extend(_parse_item(item) for item in response.get("Items") or [])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return foods
            query["ExclusiveStartKey"] = last_key

    def update_food(self, entity: FoodEntity) -> None:
        """Overwrite mutable fields at the entity's existing key."""
        try:
            self._table().update_item(
                Key=_key_of(entity).as_item_key(),
                UpdateExpression=(
                    "SET #name = :name, protein = :protein, carbs = :carbs, "
                    "fats = :fats, calories = :calories, updatedAt = :updatedAt"
                ),
                ConditionExpression="attribute_exists(PK)",
                # name is a reserved word
                ExpressionAttributeNames={"#name": "name"},
                ExpressionAttributeValues=_to_dynamo(
                    {
                        ":name": entity.name,
                        ":protein": entity.protein,
                        ":carbs": entity.carbs,
                        ":fats": entity.fats,
                        ":calories": entity.calories,
                        ":updatedAt": entity.updated_at,
                    }
                ),
            )
        except ClientError as exc:
            raise _translate(exc, NotFoundError()) from exc

    def move_food(self, previous: FoodEntity, updated: FoodEntity) -> None:
        """Delete the old key and put the new item in one transaction."""
        table = self._table()
        try:
            table.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Delete": {
                            "TableName": self.table_name,
                            "Key": _key_of(previous).as_item_key(),
                            "ConditionExpression": "attribute_exists(PK)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table_name,
                            "Item": _to_item(updated),
                            "ConditionExpression": "attribute_not_exists(PK)",
                        }
                    },
                ]
            )
        except ClientError as exc:
            raise _translate_transaction(exc) from exc

    def delete_food(self, entity: FoodEntity) -> None:
        """Delete the entity by its exact key."""
        try:
            self._table().delete_item(Key=_key_of(entity).as_item_key())
        except ClientError as exc:
            raise _translate(exc) from exc

    def _table(self) -> Any:
        if not self.table_name:
            raise ConfigurationError("TABLE_NAME is not configured")
        return self.resource.Table(self.table_name)


def _key_of(entity: FoodEntity) -> FoodKey:
    return FoodKey(pk=entity.pk, sk=entity.sk)


def _to_item(entity: FoodEntity) -> dict[str, object]:
    return _to_dynamo(
        {
            "PK": entity.pk,
            "SK": entity.sk,
            "entityType": entity.entity_type,
            "foodId": entity.food_id,
            "userId": entity.user_id,
            "name": entity.name,
            "protein": entity.protein,
            "carbs": entity.carbs,
            "fats": entity.fats,
            "calories": entity.calories,
            "date": entity.date,
            "timestamp": entity.timestamp,
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
    )


def _parse_item(item: dict[str, object]) -> FoodEntity:
    row = _from_dynamo(item)
    return FoodEntity(
        pk=str(row["PK"]),
        sk=str(row["SK"]),
        food_id=str(row["foodId"]),
        user_id=str(row["userId"]),
        name=str(row.get("name", "")),
        protein=float(row.get("protein", 0.0)),
        carbs=float(row.get("carbs", 0.0)),
        fats=float(row.get("fats", 0.0)),
        calories=int(row.get("calories", 0)),
        date=str(row["date"]),
        timestamp=int(row.get("timestamp", 0)),
        created_at=str(row.get("createdAt", "")),
        updated_at=str(row.get("updatedAt", "")),
        entity_type=str(row.get("entityType", FOOD_ENTITY_TYPE)),
    )


def _to_dynamo(value: Any) -> Any:
    """Convert floats to Decimal, which is the only number type boto3 accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _to_dynamo(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(item) for item in value]
    return value


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value % 1 == 0:
            return int(value)
        return float(value)
    if isinstance(value, dict):
        return {key: _from_dynamo(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(item) for item in value]
    return value


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _translate(
    exc: ClientError, on_condition_failed: MacroTrackerError | None = None
) -> MacroTrackerError:
    code = _error_code(exc)
    if code == CONDITIONAL_CHECK_FAILED and on_condition_failed is not None:
        return on_condition_failed
    if code in TRANSIENT_ERROR_CODES:
        return TransientStorageError()
    return InternalError()


def _translate_transaction(exc: ClientError) -> MacroTrackerError:
    if _error_code(exc) != TRANSACTION_CANCELED:
        return _translate(exc)
    reasons = [
        str(reason.get("Code", "None"))
        for reason in exc.response.get("CancellationReasons") or []
    ]
    if any(reason in TRANSIENT_ERROR_CODES for reason in reasons):
        return TransientStorageError()
    # reasons follow TransactItems order: [delete, put]
    if reasons[:1] == ["ConditionalCheckFailed"]:
        return NotFoundError()
    if reasons[1:2] == ["ConditionalCheckFailed"]:
        return ConflictError()
    return InternalError()
