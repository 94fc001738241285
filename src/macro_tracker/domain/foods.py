"""Domain models for food entries."""

from dataclasses import dataclass

FOOD_ENTITY_TYPE = "FOOD"


@dataclass(frozen=True)
class ValidatedFood:
    """Food input that passed validation, with derived calories."""

    name: str
    protein: float
    carbs: float
    fats: float
    calories: int
    date: str


@dataclass(frozen=True)
class Valid:
    """Successful validation outcome."""

    data: ValidatedFood


@dataclass(frozen=True)
class Invalid:
    """Failed validation outcome with a client-facing reason."""

    error: str


ValidationResult = Valid | Invalid


@dataclass(frozen=True)
class FoodEntity:
    """Food entry as stored in the single-table store."""

    pk: str
    sk: str
    food_id: str
    user_id: str
    name: str
    protein: float
    carbs: float
    fats: float
    calories: int
    date: str
    timestamp: int
    created_at: str
    updated_at: str
    entity_type: str = FOOD_ENTITY_TYPE


@dataclass(frozen=True)
class FoodTotals:
    """Summed macros for a set of food entries."""

    protein: float
    carbs: float
    fats: float
    calories: int


@dataclass(frozen=True)
class FoodList:
    """Food entries logged on one date."""

    date: str
    foods: list[FoodEntity]
    totals: FoodTotals

    @property
    def count(self) -> int:
        return len(self.foods)
