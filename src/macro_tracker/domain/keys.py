"""Composite key layout for food entries.

PK: ``USER#<userId>``
SK: ``DATE#<date>#TIME#<timestamp>#FOOD#<foodId>``

Access patterns served by prefix matching on the sort key:

- every entry of a user: ``begins_with(SK, "DATE#")``
- entries of a user on one date: ``begins_with(SK, "DATE#<date>#")``
- a single entry: the full sort key
"""

from dataclasses import dataclass

ALL_FOODS_PREFIX = "DATE#"


@dataclass(frozen=True)
class FoodKey:
    """Partition and sort key of a stored food entry."""

    pk: str
    sk: str

    def as_item_key(self) -> dict[str, str]:
        return {"PK": self.pk, "SK": self.sk}


def user_partition_key(user_id: str) -> str:
    """Return the partition key holding all of a user's entries."""
    return f"USER#{user_id}"


def date_prefix(date: str) -> str:
    """Return the sort key prefix for entries logged on a date."""
    return f"DATE#{date}#"


def food_keys(user_id: str, date: str, timestamp: int, food_id: str) -> FoodKey:
    """Encode the storage key for a food entry.

    The timestamp is written as a plain decimal string without padding.
    """
    return FoodKey(
        pk=user_partition_key(user_id),
        sk=f"{date_prefix(date)}TIME#{timestamp}#FOOD#{food_id}",
    )
