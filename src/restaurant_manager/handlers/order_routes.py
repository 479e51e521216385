"""Order endpoints."""

from datetime import datetime
from typing import Any

from fastapi import Body, FastAPI, Query
from fastapi.params import Depends

from restaurant_manager.models.order_models import Order
from restaurant_manager.services.order_service import OrderListFilters
from restaurant_manager.services.query import DEFAULT_PAGE_SIZE


def register_order_routes(app: FastAPI, guard: list[Depends]) -> None:
    """Attach the /api/orders endpoints to the application.

    Args:
        app: Application whose ``state.order_service`` serves the requests
        guard: Dependencies run before every endpoint (API key check)
    """

    async def order_response(order: Order, message: str | None = None) -> dict[str, Any]:
        [detail] = await app.state.order_service.with_catalog_details([order])
        body: dict[str, Any] = {"status": "success"}
        if message:
            body["message"] = message
        body["order"] = detail.to_response()
        return body

    @app.get("/api/orders", dependencies=guard, tags=["Orders"])
    async def list_orders(
        status: str | None = None,
        order_type: str | None = Query(None, alias="orderType"),
        customer_id: str | None = Query(None, alias="customerId"),
        start_date: datetime | None = Query(None, alias="startDate"),
        end_date: datetime | None = Query(None, alias="endDate"),
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort_by: str = Query("createdAt", alias="sortBy"),
        sort_order: str = Query("desc", alias="sortOrder"),
    ) -> dict[str, Any]:
        """List orders with filters, sorting and pagination."""
        filters = OrderListFilters(
            status=status,
            order_type=order_type,
            customer_id=customer_id,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        result = await app.state.order_service.list_orders(filters)
        details = await app.state.order_service.with_catalog_details(result.records)
        return {
            "status": "success",
            "results": len(details),
            "orders": [detail.to_response() for detail in details],
            "pagination": result.pagination.to_response(),
        }

    @app.get("/api/orders/{order_id}", dependencies=guard, tags=["Orders"])
    async def get_order(order_id: str) -> dict[str, Any]:
        """Get one order with catalog details on each line."""
        order = await app.state.order_service.get_order(order_id)
        return await order_response(order)

    @app.post("/api/orders", status_code=201, dependencies=guard, tags=["Orders"])
    async def create_order(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Place a new order; the total is computed server-side."""
        order = await app.state.order_service.create_order(payload)
        return await order_response(order, "Order created successfully")

    @app.put("/api/orders/{order_id}/status", dependencies=guard, tags=["Orders"])
    async def update_order_status(
        order_id: str, payload: dict[str, Any] = Body(...)
    ) -> dict[str, Any]:
        """Move an order to its next status (body: ``{"status": ...}``)."""
        order = await app.state.order_service.transition_status(order_id, payload.get("status"))
        return await order_response(order, "Order status updated successfully")

    @app.put("/api/orders/{order_id}/items", dependencies=guard, tags=["Orders"])
    async def update_order_items(
        order_id: str, payload: dict[str, Any] = Body(...)
    ) -> dict[str, Any]:
        """Replace an order's lines; any client-supplied total is recomputed."""
        order = await app.state.order_service.replace_items(order_id, payload)
        return await order_response(order, "Order items updated successfully")

    @app.delete("/api/orders/{order_id}", dependencies=guard, tags=["Orders"])
    async def cancel_order(order_id: str) -> dict[str, Any]:
        """Cancel an order; orders are never removed."""
        order = await app.state.order_service.cancel_order(order_id)
        return await order_response(order, "Order cancelled successfully")
