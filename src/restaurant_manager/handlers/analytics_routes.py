"""Analytics endpoints."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Query
from fastapi.params import Depends

from restaurant_manager.models.common import CamelModel


def _listing(rows: Sequence[CamelModel]) -> dict[str, Any]:
    return {
        "status": "success",
        "results": len(rows),
        "data": [row.to_response() for row in rows],
    }


def register_analytics_routes(app: FastAPI, guard: list[Depends]) -> None:
    """Attach the /api/analytics endpoints to the application.

    Args:
        app: Application whose ``state.analytics_service`` serves the requests
        guard: Dependencies run before every endpoint (API key check)
    """

    @app.get("/api/analytics/sales", dependencies=guard, tags=["Analytics"])
    async def sales(
        period: str = "daily",
        start_date: datetime | None = Query(None, alias="startDate"),
        end_date: datetime | None = Query(None, alias="endDate"),
    ) -> dict[str, Any]:
        """Sales per day or month."""
        rows = await app.state.analytics_service.sales_over_time(period, start_date, end_date)
        return _listing(rows)

    @app.get("/api/analytics/popular-items", dependencies=guard, tags=["Analytics"])
    async def popular_items(limit: int = 10) -> dict[str, Any]:
        """Most ordered menu items."""
        return _listing(await app.state.analytics_service.popular_items(limit))

    @app.get("/api/analytics/category-revenue", dependencies=guard, tags=["Analytics"])
    async def category_revenue() -> dict[str, Any]:
        """Revenue per menu category."""
        return _listing(await app.state.analytics_service.category_revenue())

    @app.get("/api/analytics/peak-hours", dependencies=guard, tags=["Analytics"])
    async def peak_hours() -> dict[str, Any]:
        """Orders and revenue per hour of day."""
        return _listing(await app.state.analytics_service.peak_hours())

    @app.get("/api/analytics/summary", dependencies=guard, tags=["Analytics"])
    async def summary() -> dict[str, Any]:
        """Dashboard headline figures."""
        result = await app.state.analytics_service.summary()
        return {"status": "success", "data": result.to_response()}

    @app.get("/api/analytics/trends", dependencies=guard, tags=["Analytics"])
    async def trends(days: int = 7) -> dict[str, Any]:
        """Daily revenue over the trailing days."""
        return _listing(await app.state.analytics_service.trends(days))

    @app.get("/api/analytics/status-breakdown", dependencies=guard, tags=["Analytics"])
    async def status_breakdown() -> dict[str, Any]:
        """Order count and value per status."""
        return _listing(await app.state.analytics_service.status_breakdown())

    @app.get("/api/analytics/realtime", dependencies=guard, tags=["Analytics"])
    async def realtime(window_minutes: int = Query(60, alias="windowMinutes")) -> dict[str, Any]:
        """Recent orders plus current kitchen gauges."""
        result = await app.state.analytics_service.recent_activity(window_minutes)
        return {"status": "success", "data": result.to_response()}
