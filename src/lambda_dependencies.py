"""Shared dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across
invocations to keep warm starts cheap.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from restaurant_manager.clock import resolve_timezone
from restaurant_manager.handlers.api_handler import create_app
from restaurant_manager.observability import configure_logging
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository
from restaurant_manager.services.analytics_service import AnalyticsService
from restaurant_manager.services.menu_service import MenuService
from restaurant_manager.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_menu_repository: MenuItemRepository | None = None
_order_repository: OrderRepository | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource."""
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    # Local DynamoDB for development, AWS otherwise
    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_menu_repository() -> MenuItemRepository:
    """Create or retrieve cached menu item repository."""
    global _menu_repository

    if _menu_repository is None:
        table_name = os.getenv("DYNAMODB_MENU_TABLE", "restaurant-menu-items")
        _menu_repository = MenuItemRepository(
            dynamodb_resource=get_dynamodb_resource(), table_name=table_name
        )

    return _menu_repository


def get_order_repository() -> OrderRepository:
    """Create or retrieve cached order repository."""
    global _order_repository

    if _order_repository is None:
        table_name = os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders")
        _order_repository = OrderRepository(
            dynamodb_resource=get_dynamodb_resource(), table_name=table_name
        )

    return _order_repository


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application."""
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    # Get repositories
    menu_repository = get_menu_repository()
    order_repository = get_order_repository()

    # Empty API_KEYS disables access control
    api_keys = [key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip()]
    if not api_keys:
        logger.warning("No API_KEYS configured - API access control is disabled")

    # Create FastAPI app with services
    _fastapi_app = create_app(
        menu_service=MenuService(menu_repository=menu_repository),
        order_service=OrderService(
            order_repository=order_repository, menu_repository=menu_repository
        ),
        analytics_service=AnalyticsService(
            order_repository=order_repository,
            menu_repository=menu_repository,
            timezone=resolve_timezone(os.getenv("RESTAURANT_TIMEZONE")),
        ),
        api_keys=api_keys,
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure logging once during Lambda cold start."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Lambda environment initialized")
