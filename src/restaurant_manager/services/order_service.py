"""Order service: order creation, listing, item edits and status lifecycle."""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from restaurant_manager.clock import Clock, utc_now
from restaurant_manager.errors import (
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from restaurant_manager.models.common import Page, paginate
from restaurant_manager.models.menu_models import MenuItem
from restaurant_manager.models.order_models import (
    Order,
    OrderDetail,
    OrderDraft,
    OrderLine,
    OrderStatus,
    OrderTimestamps,
    OrderType,
)
from restaurant_manager.observability import traced
from restaurant_manager.observability.metrics import (
    record_order_created,
    record_rejected_transition,
    record_status_transition,
)
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository
from restaurant_manager.services.order_lifecycle import (
    compute_total,
    ensure_transition_allowed,
    generate_order_number,
    is_terminal,
)
from restaurant_manager.services.query import (
    DEFAULT_PAGE_SIZE,
    as_aware,
    check_paging,
    sort_records,
    validate_model,
)

logger = logging.getLogger(__name__)

# Fresh order numbers drawn before giving up on finding an unused one
ORDER_NUMBER_ATTEMPTS = 5

ORDER_SORT_KEYS = {
    "createdAt": lambda order: order.created_at,
    "updatedAt": lambda order: order.updated_at,
    "totalAmount": lambda order: order.total_amount,
    "orderNumber": lambda order: order.order_number,
    "status": lambda order: order.status.value,
    "customerName": lambda order: order.customer_name.lower(),
}


class OrderItemsUpdate(BaseModel):
    """Body of an item-list replacement; any client total is ignored."""

    items: list[OrderLine] = Field(..., min_length=1)


@dataclass
class OrderListFilters:
    """Order listing criteria; all filters combine with AND.

    ``start_date`` and ``end_date`` bound the creation instant inclusively.
    """

    status: str | None = None
    order_type: str | None = None
    customer_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "createdAt"
    sort_order: str = "desc"


def parse_status(value: Any) -> OrderStatus:
    """Parse a status name.

    Raises:
        ValidationError: If the value is not a known status
    """
    try:
        return OrderStatus(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError("Invalid order status", [f"status: must be one of {allowed}"]) from e


def _parse_order_type(value: str) -> OrderType:
    try:
        return OrderType(value)
    except ValueError as e:
        allowed = ", ".join(t.value for t in OrderType)
        raise ValidationError(
            "Invalid order filters", [f"orderType: must be one of {allowed}"]
        ) from e


class OrderService:
    """Service for orders and their status lifecycle.

    The service is the only writer of ``total_amount``: it is recomputed from
    the lines whenever they are written, whatever total the client sends.
    Orders are never deleted; cancelling is a status transition.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        menu_repository: MenuItemRepository,
        clock: Clock = utc_now,
        order_number_factory: Callable[[datetime], str] = generate_order_number,
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for orders
            menu_repository: Repository used to resolve catalog details for display
            clock: Source of the current instant
            order_number_factory: Builds a candidate order number from the creation instant
        """
        self.order_repository = order_repository
        self.menu_repository = menu_repository
        self.clock = clock
        self.order_number_factory = order_number_factory

    @traced("orders.create")
    async def create_order(self, draft_data: dict[str, Any]) -> Order:
        """Validate a draft and store it as a new placed order.

        Args:
            draft_data: Customer details, order type and lines

        Returns:
            The stored Order

        Raises:
            ValidationError: Listing every failing field
        """
        draft = validate_model(OrderDraft, draft_data)
        now = self.clock()

        # Total is always recomputed from the lines
        order = Order(
            id=f"ord_{uuid.uuid4().hex}",
            order_number=self._new_order_number(now),
            customer_id=draft.customer_id,
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            order_type=draft.order_type,
            items=draft.items,
            status=OrderStatus.PLACED,
            total_amount=compute_total(draft.items),
            payment_status=draft.payment_status,
            timestamps=OrderTimestamps(placed=now),
            delivery_address=draft.delivery_address,
            created_at=now,
            updated_at=now,
        )
        self.order_repository.create_order(order)

        record_order_created(order.order_type.value, float(order.total_amount))
        logger.info(f"Created order {order.order_number} totalling {order.total_amount}")
        return order

    async def get_order(self, order_id: str) -> Order:
        """Get an order by id.

        Raises:
            NotFoundError: If no order has that id
        """
        order = self.order_repository.get_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    @traced("orders.list")
    async def list_orders(self, filters: OrderListFilters) -> Page[Order]:
        """Filter, sort and paginate orders.

        An empty result is an empty page, never an error.

        Raises:
            ValidationError: For unknown status, order type, sort field or bad paging
        """
        page, limit = check_paging(filters.page, filters.limit)
        status = parse_status(filters.status) if filters.status else None
        order_type = _parse_order_type(filters.order_type) if filters.order_type else None
        start = as_aware(filters.start_date) if filters.start_date else None
        end = as_aware(filters.end_date) if filters.end_date else None

        found = []
        for order in self.order_repository.list_orders():
            if status is not None and order.status != status:
                continue
            if order_type is not None and order.order_type != order_type:
                continue
            if filters.customer_id and order.customer_id != filters.customer_id:
                continue
            if start is not None and order.created_at < start:
                continue
            if end is not None and order.created_at > end:
                continue
            found.append(order)

        ordered = sort_records(found, filters.sort_by, filters.sort_order, ORDER_SORT_KEYS)
        return paginate(ordered, page, limit)

    @traced("orders.replace_items")
    async def replace_items(self, order_id: str, body: dict[str, Any]) -> Order:
        """Replace an order's lines wholesale and recompute its total.

        Status and timestamps are left untouched.

        Args:
            order_id: Order identifier
            body: ``{"items": [...]}``; a ``totalAmount`` key is ignored

        Raises:
            ValidationError: If the lines are invalid or empty
            NotFoundError: If no order has that id
        """
        update = validate_model(OrderItemsUpdate, body)

        # Client totals are ignored
        total = compute_total(update.items)

        order = self.order_repository.replace_items(order_id, update.items, total, self.clock())
        if order is None:
            raise NotFoundError("Order", order_id)

        logger.info(f"Replaced items of order {order.order_number}, new total {total}")
        return order

    @traced("orders.transition_status")
    async def transition_status(self, order_id: str, requested: Any) -> Order:
        """Move an order to a new status and stamp the stage timestamp.

        Args:
            order_id: Order identifier
            requested: Target status name

        Returns:
            The updated Order

        Raises:
            ValidationError: If ``requested`` is not a known status
            NotFoundError: If no order has that id
            InvalidTransitionError: If the lifecycle does not allow the move
        """
        new_status = parse_status(requested)
        current = await self.get_order(order_id)

        try:
            ensure_transition_allowed(current.status, new_status)
        except InvalidTransitionError:
            record_rejected_transition(current.status.value, new_status.value)
            if is_terminal(current.status):
                logger.warning(
                    f"Rejected status change of order {current.order_number}: "
                    f"order is already {current.status.value}"
                )
            else:
                logger.warning(
                    f"Rejected status change of order {current.order_number}: "
                    f"{current.status.value} -> {new_status.value}"
                )
            raise

        order = self.order_repository.update_status(order_id, new_status, self.clock())
        if order is None:
            raise NotFoundError("Order", order_id)

        record_status_transition(current.status.value, new_status.value)
        logger.info(
            f"Order {order.order_number} moved {current.status.value} -> {new_status.value}"
        )
        return order

    async def cancel_order(self, order_id: str) -> Order:
        """Cancel a non-terminal order."""
        return await self.transition_status(order_id, OrderStatus.CANCELLED)

    async def with_catalog_details(self, orders: list[Order]) -> list[OrderDetail]:
        """Join order lines against the live catalog for display.

        The stored orders are not modified.
        """
        menu_ids = {line.menu_item_id for order in orders for line in order.items}
        catalog: dict[str, MenuItem] = {}

        # Point reads for a single order, one scan otherwise
        if len(orders) == 1:
            for menu_id in menu_ids:
                menu_item = self.menu_repository.get_item(menu_id)
                if menu_item is not None:
                    catalog[menu_id] = menu_item
        elif menu_ids:
            catalog = {
                item.id: item
                for item in self.menu_repository.list_items()
                if item.id in menu_ids
            }

        return [OrderDetail.from_order(order, catalog) for order in orders]

    def _new_order_number(self, now: datetime) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            order_number = self.order_number_factory(now)
            if not self.order_repository.order_number_exists(order_number):
                return order_number
            logger.warning(f"Order number {order_number} already issued, drawing another")

        raise StorageError("Could not allocate a unique order number")
