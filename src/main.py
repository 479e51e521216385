"""Main application entry point for the restaurant management service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from restaurant_manager.clock import resolve_timezone, utc_now
from restaurant_manager.handlers.api_handler import create_app
from restaurant_manager.observability import configure_logging, setup_observability
from restaurant_manager.repositories.dynamodb import create_tables
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository
from restaurant_manager.seed import seed_sample_data
from restaurant_manager.services.analytics_service import AnalyticsService
from restaurant_manager.services.menu_service import MenuService
from restaurant_manager.services.order_service import OrderService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # boto3 default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def parse_list(value: str | None) -> list[str]:
    """Split a comma-separated environment value, dropping blanks."""
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource (and local tables when running locally)
    3. Initializes repositories and services
    4. Optionally seeds sample data
    5. Creates the FastAPI app and sets up observability

    Returns:
        Configured FastAPI application instance
    """
    # Configure logging first
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Initializing restaurant management service...")

    # Create DynamoDB resource
    dynamodb_resource = get_dynamodb_resource()

    # Get table names from environment
    menu_table = os.getenv("DYNAMODB_MENU_TABLE", "restaurant-menu-items")
    orders_table = os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders")

    # Local DynamoDB starts empty
    if os.getenv("DYNAMODB_ENDPOINT"):
        create_tables(dynamodb_resource, menu_table=menu_table, orders_table=orders_table)

    # Create repositories
    menu_repository = MenuItemRepository(dynamodb_resource=dynamodb_resource, table_name=menu_table)
    order_repository = OrderRepository(dynamodb_resource=dynamodb_resource, table_name=orders_table)
    logger.info(f"Repositories configured - menu: {menu_table}, orders: {orders_table}")

    timezone = resolve_timezone(os.getenv("RESTAURANT_TIMEZONE"))

    # Create services
    menu_service = MenuService(menu_repository=menu_repository, clock=utc_now)
    order_service = OrderService(
        order_repository=order_repository, menu_repository=menu_repository, clock=utc_now
    )
    analytics_service = AnalyticsService(
        order_repository=order_repository,
        menu_repository=menu_repository,
        clock=utc_now,
        timezone=timezone,
    )
    logger.info(f"Services initialized (reporting timezone: {timezone})")

    # Optionally load sample data
    if os.getenv("SEED_SAMPLE_DATA", "false").lower() == "true":
        seed_sample_data(menu_repository, order_repository, clock=utc_now)

    api_keys = parse_list(os.getenv("API_KEYS"))
    if not api_keys:
        logger.warning("No API_KEYS configured - API access control is disabled")

    # Create FastAPI app with all dependencies
    app = create_app(
        menu_service=menu_service,
        order_service=order_service,
        analytics_service=analytics_service,
        api_keys=api_keys,
        cors_origins=parse_list(os.getenv("CORS_ORIGINS", "http://localhost:5000")),
    )

    # Setup OpenTelemetry instrumentation
    setup_observability(app)

    logger.info("Restaurant management service initialized successfully")
    return app


# Skip building the real app during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "5001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
