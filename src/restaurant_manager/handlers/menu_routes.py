"""Menu catalog endpoints."""

from decimal import Decimal
from typing import Any

from fastapi import Body, FastAPI, Query
from fastapi.params import Depends

from restaurant_manager.services.menu_service import MenuSearchFilters
from restaurant_manager.services.query import DEFAULT_PAGE_SIZE


def register_menu_routes(app: FastAPI, guard: list[Depends]) -> None:
    """Attach the /api/menu endpoints to the application.

    Args:
        app: Application whose ``state.menu_service`` serves the requests
        guard: Dependencies run before every endpoint (API key check)
    """

    @app.get("/api/menu", dependencies=guard, tags=["Menu"])
    async def list_menu_items(
        search: str | None = None,
        category: str | None = None,
        tags: str | None = Query(None, description="Comma-separated; matches any"),
        min_price: Decimal | None = Query(None, alias="minPrice"),
        max_price: Decimal | None = Query(None, alias="maxPrice"),
        availability: bool | None = Query(None, description="Defaults to available only"),
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort_by: str = Query("name", alias="sortBy"),
        sort_order: str = Query("asc", alias="sortOrder"),
    ) -> dict[str, Any]:
        """Search the catalog with filters, sorting and pagination."""
        filters = MenuSearchFilters(
            search=search,
            category=category,
            tags=[tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None,
            min_price=min_price,
            max_price=max_price,
            availability=True if availability is None else availability,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        result = await app.state.menu_service.search(filters)
        return {
            "status": "success",
            "results": len(result.records),
            "menuItems": [item.to_response() for item in result.records],
            "pagination": result.pagination.to_response(),
        }

    @app.get("/api/menu/{item_id}", dependencies=guard, tags=["Menu"])
    async def get_menu_item(item_id: str) -> dict[str, Any]:
        """Get one menu item."""
        menu_item = await app.state.menu_service.get_item(item_id)
        return {"status": "success", "menuItem": menu_item.to_response()}

    @app.post("/api/menu", status_code=201, dependencies=guard, tags=["Menu"])
    async def create_menu_item(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Create a menu item."""
        menu_item = await app.state.menu_service.create_item(payload)
        return {
            "status": "success",
            "message": "Menu item created successfully",
            "menuItem": menu_item.to_response(),
        }

    @app.put("/api/menu/{item_id}", dependencies=guard, tags=["Menu"])
    async def update_menu_item(item_id: str, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Merge the given fields into a menu item."""
        menu_item = await app.state.menu_service.update_item(item_id, payload)
        return {
            "status": "success",
            "message": "Menu item updated successfully",
            "menuItem": menu_item.to_response(),
        }

    @app.delete("/api/menu/{item_id}", dependencies=guard, tags=["Menu"])
    async def delete_menu_item(item_id: str) -> dict[str, Any]:
        """Soft delete: mark the item unavailable."""
        menu_item = await app.state.menu_service.soft_delete_item(item_id)
        return {
            "status": "success",
            "message": "Menu item deleted successfully (marked as unavailable)",
            "menuItem": menu_item.to_response(),
        }
