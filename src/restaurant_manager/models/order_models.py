"""Order models.

An order owns a snapshot of each ordered line (name and unit price captured
when the line was written) so later catalog edits never alter historical
orders. Lines keep the menu item id for reporting joins.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, model_validator

from restaurant_manager.models.common import CamelModel, Money
from restaurant_manager.models.menu_models import MenuItem, MenuItemSummary


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PLACED = "placed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    """How the order reaches the customer."""

    DINE_IN = "dine-in"
    TAKEOUT = "takeout"
    DELIVERY = "delivery"


class PaymentStatus(str, Enum):
    """Payment state recorded on the order."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class LineCustomization(CamelModel):
    """A customization chosen for one order line."""

    name: str = Field(..., min_length=1)
    value: str = ""
    additional_price: Money = Field(default=Decimal("0"), ge=0)


class OrderLine(CamelModel):
    """One ordered menu item with its captured name and unit price."""

    model_config = ConfigDict(str_strip_whitespace=True)

    menu_item_id: str = Field(..., min_length=1, description="Referenced menu item")
    name: str = Field(..., min_length=1, description="Item name at order time")
    price: Money = Field(..., ge=0, description="Unit price at order time")
    quantity: int = Field(..., ge=1)
    customizations: list[LineCustomization] = Field(default_factory=list)
    special_notes: str | None = Field(None, max_length=200)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to a nested DynamoDB map."""
        item: dict[str, Any] = {
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "customizations": [
                {
                    "name": customization.name,
                    "value": customization.value,
                    "additional_price": customization.additional_price,
                }
                for customization in self.customizations
            ],
        }

        if self.special_notes:
            item["special_notes"] = self.special_notes

        return item


class OrderTimestamps(CamelModel):
    """Instant at which each lifecycle stage was reached."""

    placed: datetime
    preparing: datetime | None = None
    ready: datetime | None = None
    delivered: datetime | None = None
    cancelled: datetime | None = None

    def to_dynamodb_item(self) -> dict[str, str]:
        return {
            stage: value.isoformat()
            for stage, value in self.model_dump().items()
            if value is not None
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, str]) -> "OrderTimestamps":
        return cls(**{stage: datetime.fromisoformat(value) for stage, value in item.items()})


class OrderDraft(CamelModel):
    """Caller-supplied fields for a new order.

    Any client-supplied total, status or order number is ignored; the order
    service assigns those.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    customer_id: str | None = None
    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: str = Field(..., min_length=1)
    order_type: OrderType
    items: list[OrderLine] = Field(..., min_length=1)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    delivery_address: str | None = Field(None, max_length=300)

    @model_validator(mode="after")
    def require_delivery_address(self) -> "OrderDraft":
        """Delivery orders must say where to deliver."""
        if self.order_type == OrderType.DELIVERY and not self.delivery_address:
            raise ValueError("deliveryAddress is required for delivery orders")
        return self


class Order(CamelModel):
    """Stored order."""

    id: str
    order_number: str
    customer_id: str | None = None
    customer_name: str
    customer_phone: str
    order_type: OrderType
    items: list[OrderLine]
    status: OrderStatus = OrderStatus.PLACED
    total_amount: Money = Field(..., ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    timestamps: OrderTimestamps
    delivery_address: str | None = None
    created_at: datetime
    updated_at: datetime

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "order_type": self.order_type.value,
            "items": [line.to_dynamodb_item() for line in self.items],
            "status": self.status.value,
            "total_amount": self.total_amount,
            "payment_status": self.payment_status.value,
            "timestamps": self.timestamps.to_dynamodb_item(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.customer_id is not None:
            item["customer_id"] = self.customer_id

        if self.delivery_address is not None:
            item["delivery_address"] = self.delivery_address

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "order_number": item["order_number"],
            "customer_name": item["customer_name"],
            "customer_phone": item["customer_phone"],
            "order_type": OrderType(item["order_type"]),
            "items": item.get("items", []),
            "status": OrderStatus(item.get("status", OrderStatus.PLACED.value)),
            "total_amount": item["total_amount"],
            "payment_status": PaymentStatus(item.get("payment_status", PaymentStatus.PENDING.value)),
            "timestamps": OrderTimestamps.from_dynamodb_item(item["timestamps"]),
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if "customer_id" in item:
            data["customer_id"] = item["customer_id"]

        if "delivery_address" in item:
            data["delivery_address"] = item["delivery_address"]

        return cls.model_validate(data)


class OrderLineDetail(OrderLine):
    """Order line joined with the live catalog record, for display."""

    menu_item: MenuItemSummary | None = None


class OrderDetail(Order):
    """Order whose lines carry their catalog details."""

    items: list[OrderLineDetail]

    @classmethod
    def from_order(cls, order: Order, catalog: dict[str, MenuItem]) -> "OrderDetail":
        """Attach catalog details without touching the stored snapshot.

        Args:
            order: Stored order
            catalog: Menu items keyed by id

        Returns:
            OrderDetail: Copy of the order with ``menu_item`` set per line
        """
        lines = []
        for line in order.items:
            menu_item = catalog.get(line.menu_item_id)
            lines.append(
                OrderLineDetail(
                    **line.model_dump(),
                    menu_item=MenuItemSummary.from_menu_item(menu_item) if menu_item else None,
                )
            )
        return cls(**order.model_dump(exclude={"items"}), items=lines)
