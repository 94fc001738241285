"""Dependency container wiring for the application."""

from dataclasses import dataclass

import boto3

from macro_tracker.adapters.dynamodb_food_repository import DynamoDBFoodRepository
from macro_tracker.config import Settings
from macro_tracker.services.foods import FoodService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_service: FoodService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resource = boto3.resource(
        "dynamodb",
        region_name=resolved_settings.aws_region,
        endpoint_url=resolved_settings.dynamodb_endpoint_url,
    )
    repository = DynamoDBFoodRepository(
        resource=resource, table_name=resolved_settings.table_name
    )
    return AppContainer(
        settings=resolved_settings,
        food_service=FoodService(repository),
    )
