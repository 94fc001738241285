"""Food entry endpoints."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from macro_tracker.domain.errors import AuthorizationError, ValidationError
from macro_tracker.services.entities import extract_response_data

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer
    from macro_tracker.services.foods import FoodService

router = APIRouter(prefix="/foods", tags=["foods"])


async def require_user_id(request: Request) -> str:
    """Return the caller id verified by the API Gateway authorizer."""
    event = request.scope.get("aws.event") or {}
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or (authorizer.get("jwt") or {}).get("claims")
    user_id = (claims or {}).get("sub")
    if not user_id:
        raise AuthorizationError()
    return str(user_id)


def _food_service(request: Request) -> FoodService:
    container: AppContainer = request.app.state.container
    return container.food_service


async def _read_payload(request: Request) -> dict[str, object]:
    body = await request.body()
    if not body.strip():
        raise ValidationError("Request body is required")
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Invalid request body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    return payload


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(
    request: Request, user_id: str = Depends(require_user_id)
) -> dict[str, object]:
    """Log a new food entry."""
    payload = await _read_payload(request)
    entity = _food_service(request).create_food(user_id, payload)
    return extract_response_data(entity)


@router.get("")
async def list_foods(
    request: Request,
    date: str | None = None,
    user_id: str = Depends(require_user_id),
) -> dict[str, object]:
    """Return a day's entries with totals; defaults to today."""
    result = _food_service(request).list_foods(user_id, date)
    return {
        "date": result.date,
        "foods": [extract_response_data(food) for food in result.foods],
        "totals": {
            "protein": result.totals.protein,
            "carbs": result.totals.carbs,
            "fats": result.totals.fats,
            "calories": result.totals.calories,
        },
        "count": result.count,
    }


@router.get("/{food_id}")
async def get_food(
    food_id: str, request: Request, user_id: str = Depends(require_user_id)
) -> dict[str, object]:
    """Return a single food entry."""
    entity = _food_service(request).get_food(user_id, food_id)
    return extract_response_data(entity)


@router.put("/{food_id}")
async def update_food(
    food_id: str, request: Request, user_id: str = Depends(require_user_id)
) -> dict[str, object]:
    """Replace a food entry's values."""
    payload = await _read_payload(request)
    entity = _food_service(request).update_food(user_id, food_id, payload)
    return extract_response_data(entity)


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food(
    food_id: str, request: Request, user_id: str = Depends(require_user_id)
) -> Response:
    """Delete a food entry."""
    _food_service(request).delete_food(user_id, food_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
