"""Sample data for local development databases."""

import logging
from datetime import datetime, timedelta
from typing import Any

from restaurant_manager.clock import Clock, utc_now
from restaurant_manager.models.order_models import (
    Order,
    OrderLine,
    OrderStatus,
    OrderTimestamps,
    OrderType,
    PaymentStatus,
)
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository
from restaurant_manager.services.menu_service import new_menu_item
from restaurant_manager.services.order_lifecycle import ORDER_NUMBER_PREFIX, compute_total

logger = logging.getLogger(__name__)

SAMPLE_MENU_ITEMS: list[dict[str, Any]] = [
    {
        "name": "Margherita Pizza",
        "description": "Classic pizza with fresh tomato sauce, mozzarella cheese, and basil leaves",
        "category": "main",
        "price": "14.99",
        "ingredients": ["tomato sauce", "mozzarella cheese", "fresh basil", "pizza dough"],
        "tags": ["vegetarian", "italian", "popular"],
        "nutritionalInfo": {"calories": 285, "protein": 12, "carbs": 36, "fat": 10},
    },
    {
        "name": "Caesar Salad",
        "description": "Crisp romaine lettuce with Caesar dressing, parmesan and croutons",
        "category": "salad",
        "price": "12.99",
        "ingredients": ["romaine lettuce", "parmesan cheese", "croutons", "caesar dressing"],
        "tags": ["vegetarian", "healthy", "classic"],
        "nutritionalInfo": {"calories": 180, "protein": 8, "carbs": 12, "fat": 12},
    },
    {
        "name": "Grilled Salmon",
        "description": "Atlantic salmon with lemon butter sauce and seasonal vegetables",
        "category": "main",
        "price": "24.99",
        "ingredients": ["atlantic salmon", "lemon", "butter", "herbs", "seasonal vegetables"],
        "tags": ["healthy", "gluten-free", "high-protein"],
        "nutritionalInfo": {"calories": 320, "protein": 35, "carbs": 8, "fat": 16},
    },
    {
        "name": "Chicken Wings",
        "description": "Crispy buffalo chicken wings with celery sticks and blue cheese dip",
        "category": "appetizer",
        "price": "11.99",
        "ingredients": ["chicken wings", "buffalo sauce", "celery", "blue cheese"],
        "tags": ["spicy", "popular", "shareable"],
        "nutritionalInfo": {"calories": 425, "protein": 28, "carbs": 5, "fat": 32},
    },
    {
        "name": "Chocolate Brownie",
        "description": "Warm fudgy chocolate brownie with vanilla ice cream and chocolate sauce",
        "category": "dessert",
        "price": "8.99",
        "ingredients": ["chocolate", "flour", "eggs", "butter", "vanilla ice cream"],
        "tags": ["sweet", "indulgent"],
        "nutritionalInfo": {"calories": 450, "protein": 6, "carbs": 58, "fat": 24},
    },
    {
        "name": "Fresh Orange Juice",
        "description": "Freshly squeezed orange juice, no additives or preservatives",
        "category": "beverage",
        "price": "4.99",
        "ingredients": ["fresh oranges"],
        "tags": ["healthy", "fresh", "vitamin-c"],
        "nutritionalInfo": {"calories": 110, "protein": 2, "carbs": 26, "fat": 0},
    },
]


def _sample_order(
    now: datetime,
    line: OrderLine,
    customer_name: str,
    customer_phone: str,
    order_type: OrderType,
    status: OrderStatus,
    timestamps: OrderTimestamps,
    sequence: int,
) -> Order:
    return Order(
        id=f"ord_sample_{sequence:03d}",
        order_number=f"{ORDER_NUMBER_PREFIX}-{int(now.timestamp() * 1000)}-{sequence:03d}",
        customer_name=customer_name,
        customer_phone=customer_phone,
        order_type=order_type,
        items=[line],
        status=status,
        total_amount=compute_total([line]),
        payment_status=PaymentStatus.PAID,
        timestamps=timestamps,
        created_at=timestamps.placed,
        updated_at=now,
    )


def seed_sample_data(
    menu_repository: MenuItemRepository,
    order_repository: OrderRepository,
    clock: Clock = utc_now,
) -> bool:
    """Fill empty tables with the sample menu and two sample orders.

    Tables that already hold data are left alone. Must stay synchronous:
    uvicorn imports the app from inside its running event loop.

    Returns:
        bool: True if anything was inserted
    """
    # Only empty tables are seeded
    existing_items = menu_repository.list_items()
    existing_orders = order_repository.list_orders()
    if existing_items and existing_orders:
        logger.info("Database already contains data, skipping seed")
        return False

    inserted = False
    if not existing_items:
        now = clock()
        for attributes in SAMPLE_MENU_ITEMS:
            menu_item = new_menu_item(attributes, now)
            menu_repository.save_item(menu_item)
            existing_items.append(menu_item)
        logger.info(f"Inserted {len(SAMPLE_MENU_ITEMS)} sample menu items")
        inserted = True

    if not existing_orders and len(existing_items) >= 2:
        # Sample orders reference the first two menu items
        now = clock()
        first, second = existing_items[0], existing_items[1]
        day_ago = now - timedelta(days=1)
        half_hour_ago = now - timedelta(minutes=30)

        orders = [
            _sample_order(
                now,
                OrderLine(
                    menu_item_id=first.id,
                    name=first.name,
                    price=first.price,
                    quantity=2,
                    special_notes="Extra cheese please",
                ),
                customer_name="John Smith",
                customer_phone="+1-555-0123",
                order_type=OrderType.DINE_IN,
                status=OrderStatus.DELIVERED,
                timestamps=OrderTimestamps(
                    placed=day_ago,
                    preparing=day_ago + timedelta(seconds=20),
                    ready=day_ago + timedelta(minutes=1),
                    delivered=day_ago + timedelta(minutes=2),
                ),
                sequence=1,
            ),
            _sample_order(
                now,
                OrderLine(
                    menu_item_id=second.id,
                    name=second.name,
                    price=second.price,
                    quantity=1,
                ),
                customer_name="Sarah Johnson",
                customer_phone="+1-555-0456",
                order_type=OrderType.TAKEOUT,
                status=OrderStatus.READY,
                timestamps=OrderTimestamps(
                    placed=half_hour_ago,
                    preparing=half_hour_ago + timedelta(minutes=10),
                    ready=half_hour_ago + timedelta(minutes=25),
                ),
                sequence=2,
            ),
        ]
        for order in orders:
            order_repository.create_order(order)
        logger.info(f"Inserted {len(orders)} sample orders")
        inserted = True

    return inserted
