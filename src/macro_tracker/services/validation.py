"""Validation and calorie derivation for raw food input."""

import math
import re
from datetime import UTC, date, datetime

from macro_tracker.domain.foods import Invalid, Valid, ValidatedFood, ValidationResult

MAX_NAME_LENGTH = 200
MAX_MACRONUTRIENT_GRAMS = 10000
PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FATS_KCAL_PER_G = 9

INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD"

_NUMBER_PATTERN = re.compile(r"-?\d*\.?\d+([eE][+-]?\d+)?", re.ASCII)
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def calculate_calories(protein: float, carbs: float, fats: float) -> int:
    """Return calories from macronutrient grams, rounding halves up.

    Inputs are not re-validated; negative grams give negative calories.
    """
    total = (
        protein * PROTEIN_KCAL_PER_G
        + carbs * CARBS_KCAL_PER_G
        + fats * FATS_KCAL_PER_G
    )
    return math.floor(total + 0.5)


def parse_macronutrient(value: object, field_name: str) -> float | Invalid:
    """Parse a gram amount, treating absence as zero."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return Invalid(f"Invalid {field_name} value")
    if isinstance(value, str):
        trimmed = value.strip()
        if not _NUMBER_PATTERN.fullmatch(trimmed):
            return Invalid(f"Invalid {field_name} value")
        value = trimmed
    try:
        parsed = float(value)
    except OverflowError:
        # integers beyond float range
        parsed = math.inf if int(value) > 0 else -math.inf
    except ValueError:
        return Invalid(f"Invalid {field_name} value")
    if math.isnan(parsed):
        return Invalid(f"Invalid {field_name} value")
    if parsed < 0:
        return Invalid(f"{field_name} cannot be negative")
    if parsed > MAX_MACRONUTRIENT_GRAMS:
        return Invalid(f"{field_name} value is too large")
    return parsed


def is_valid_date_format(value: object) -> bool:
    """Return true for an existing calendar date written as YYYY-MM-DD."""
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        return False
    year, month, day = (int(part) for part in value.split("-"))
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def current_date() -> str:
    """Return today's UTC date as YYYY-MM-DD."""
    return datetime.now(tz=UTC).date().isoformat()


def validate_food_name(value: object) -> str | Invalid:
    """Return the trimmed name or the reason it is unusable."""
    if not value or not isinstance(value, str):
        return Invalid("Name is required")
    trimmed = value.strip()
    if not trimmed:
        return Invalid("Name is required")
    try:
        trimmed.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates from JSON escapes cannot be stored or echoed back
        return Invalid("Invalid Name value")
    if len(trimmed) > MAX_NAME_LENGTH:
        return Invalid(f"Name is too long (max {MAX_NAME_LENGTH} characters)")
    return trimmed


def validate_food_input(
    payload: dict[str, object], *, require_date: bool = False
) -> ValidationResult:
    """Validate raw food fields in order; the first failure is reported.

    Name, then protein, carbs and fats, then date. A missing date falls back
    to today unless ``require_date`` is set.
    """
    name = validate_food_name(payload.get("name"))
    if isinstance(name, Invalid):
        return name

    macros: list[float] = []
    for key, label in (("protein", "Protein"), ("carbs", "Carbs"), ("fats", "Fats")):
        parsed = parse_macronutrient(payload.get(key), label)
        if isinstance(parsed, Invalid):
            return parsed
        macros.append(parsed)
    protein, carbs, fats = macros

    raw_date = payload.get("date")
    if raw_date is None or raw_date == "":
        if require_date:
            return Invalid("Date is required")
        raw_date = current_date()
    if not is_valid_date_format(raw_date):
        return Invalid(INVALID_DATE_MESSAGE)

    return Valid(
        ValidatedFood(
            name=name,
            protein=protein,
            carbs=carbs,
            fats=fats,
            calories=calculate_calories(protein, carbs, fats),
            date=str(raw_date),
        )
    )
