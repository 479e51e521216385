"""FastAPI application for the restaurant management API."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_manager.auth.api_dependencies import get_api_key_from_header
from restaurant_manager.auth.api_key_validator import APIKeyValidator
from restaurant_manager.errors import (
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from restaurant_manager.handlers.analytics_routes import register_analytics_routes
from restaurant_manager.handlers.menu_routes import register_menu_routes
from restaurant_manager.handlers.order_routes import register_order_routes
from restaurant_manager.services.analytics_service import AnalyticsService
from restaurant_manager.services.menu_service import MenuService
from restaurant_manager.services.order_service import OrderService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def error_response(
    status_code: int, message: str, errors: list[str] | None = None, **extra: Any
) -> JSONResponse:
    """Build the ``{"status": "error", ...}`` envelope."""
    content: dict[str, Any] = {"status": "error", "message": message}
    if errors is not None:
        content["errors"] = errors
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _request_error_messages(exc: RequestValidationError) -> list[str]:
    messages = []
    for detail in exc.errors():
        location = [str(part) for part in detail.get("loc", ()) if part not in ("query", "path", "body")]
        prefix = ".".join(location)
        messages.append(f"{prefix}: {detail['msg']}" if prefix else detail["msg"])
    return messages


def register_error_handlers(app: FastAPI) -> None:
    """Translate service errors into response envelopes."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        return error_response(400, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(400, "Validation error", _request_error_messages(exc))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return error_response(404, exc.message)

    @app.exception_handler(InvalidTransitionError)
    async def handle_invalid_transition(
        _request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return error_response(
            409, exc.message, currentStatus=exc.current, requestedStatus=exc.requested
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
        return error_response(500, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return error_response(404, f"Route {request.url.path} not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, GENERIC_ERROR_MESSAGE)


def create_app(
    menu_service: MenuService,
    order_service: OrderService,
    analytics_service: AnalyticsService,
    api_keys: list[str] | None = None,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for the menu catalog
        order_service: Service for orders
        analytics_service: Service for reports
        api_keys: Accepted X-API-Key values; None or empty disables access control
        cors_origins: Origins allowed to call the API from a browser

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Management API",
        description="Menu catalog, order tracking and sales analytics",
        version="1.0.0",
    )

    app.state.menu_service = menu_service
    app.state.order_service = order_service
    app.state.analytics_service = analytics_service
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys) if api_keys else None

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)

    def validate_api_key(x_api_key: str | None = Header(None)) -> str | None:
        """Dependency to validate API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    guard = [Depends(validate_api_key)]

    @app.get("/api/health", tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "success",
            "message": "Restaurant Management System API is running!",
            "timestamp": datetime.now(UTC).isoformat(),
        }

    register_menu_routes(app, guard)
    register_order_routes(app, guard)
    register_analytics_routes(app, guard)

    return app
