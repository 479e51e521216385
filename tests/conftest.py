"""Shared pytest fixtures and configuration for all tests."""

import os

# Entry-point modules skip building the real app when imported under test
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import Callable  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from restaurant_manager.models.menu_models import MenuCategory, MenuItem  # noqa: E402
from restaurant_manager.models.order_models import (  # noqa: E402
    Order,
    OrderLine,
    OrderStatus,
    OrderTimestamps,
    OrderType,
)

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


def make_menu_item(
    item_id: str = "item_1",
    name: str = "Margherita Pizza",
    category: MenuCategory = MenuCategory.MAIN,
    price: str = "14.99",
    **overrides: Any,
) -> MenuItem:
    """Build a stored menu item with sensible defaults."""
    data: dict[str, Any] = {
        "id": item_id,
        "name": name,
        "description": f"Freshly made {name.lower()}",
        "category": category,
        "price": Decimal(price),
        "tags": ["popular"],
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }
    data.update(overrides)
    return MenuItem(**data)


def make_line(
    menu_item_id: str = "item_1", name: str = "Margherita Pizza", price: str = "14.99", quantity: int = 1
) -> OrderLine:
    """Build an order line."""
    return OrderLine(menu_item_id=menu_item_id, name=name, price=Decimal(price), quantity=quantity)


def make_order(
    order_id: str = "ord_1",
    status: OrderStatus = OrderStatus.PLACED,
    total: str = "10.00",
    created_at: datetime = FIXED_NOW,
    items: list[OrderLine] | None = None,
    **overrides: Any,
) -> Order:
    """Build a stored order; the total is taken as given."""
    data: dict[str, Any] = {
        "id": order_id,
        "order_number": f"ORD-1705320000000-{order_id}",
        "customer_name": "John Smith",
        "customer_phone": "+1-555-0123",
        "order_type": OrderType.DINE_IN,
        "items": items if items is not None else [make_line(price=total)],
        "status": status,
        "total_amount": Decimal(total),
        "timestamps": OrderTimestamps(placed=created_at),
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return Order(**data)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixture providing the instant returned by the test clock."""
    return FIXED_NOW


@pytest.fixture
def menu_item_factory() -> Callable[..., MenuItem]:
    """Fixture providing the menu item builder."""
    return make_menu_item


@pytest.fixture
def line_factory() -> Callable[..., OrderLine]:
    """Fixture providing the order line builder."""
    return make_line


@pytest.fixture
def order_factory() -> Callable[..., Order]:
    """Fixture providing the order builder."""
    return make_order


@pytest.fixture
def mock_menu_repository() -> MagicMock:
    """Fixture providing a menu repository stub with an empty catalog."""
    repository = MagicMock()
    repository.list_items.return_value = []
    repository.get_item.return_value = None
    return repository


@pytest.fixture
def mock_order_repository() -> MagicMock:
    """Fixture providing an order repository stub with no orders."""
    repository = MagicMock()
    repository.list_orders.return_value = []
    repository.get_order.return_value = None
    repository.order_number_exists.return_value = False
    return repository


@pytest.fixture
def menu_item_payload() -> dict[str, Any]:
    """Fixture providing a valid create-menu-item request body."""
    return {
        "name": "Caesar Salad",
        "description": "Crisp romaine lettuce with Caesar dressing",
        "category": "salad",
        "price": 12.99,
        "ingredients": ["romaine lettuce", "parmesan cheese"],
        "tags": ["vegetarian", "healthy"],
    }


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """Fixture providing a valid create-order request body."""
    return {
        "customerName": "Sarah Johnson",
        "customerPhone": "+1-555-0456",
        "orderType": "takeout",
        "items": [
            {"menuItemId": "item_1", "name": "Margherita Pizza", "price": 14.99, "quantity": 2},
            {"menuItemId": "item_2", "name": "Caesar Salad", "price": 12.99, "quantity": 1},
        ],
    }
