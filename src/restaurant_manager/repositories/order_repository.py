"""DynamoDB repository for orders.

Orders are keyed by ``id`` with a global secondary index on
``order_number``. Status changes and item replacement are single
``update_item`` calls, so concurrent writers to the same order follow
last-write-wins semantics.
"""

import logging
from datetime import datetime
from decimal import Decimal

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_manager.errors import StorageError
from restaurant_manager.models.order_models import Order, OrderLine, OrderStatus
from restaurant_manager.repositories.dynamodb import (
    ORDER_NUMBER_INDEX,
    is_conditional_check_failure,
    scan_all,
)

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for order CRUD operations."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def create_order(self, order: Order) -> Order:
        """Insert a new order; never overwrites an existing id.

        Args:
            order: Order to insert

        Returns:
            Order: The stored order

        Raises:
            StorageError: If DynamoDB fails or the id already exists
        """
        try:
            self.table.put_item(
                Item=order.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(id)",
            )
        except ClientError as e:
            logger.error(f"Failed to create order {order.order_number}: {e}")
            raise StorageError("Failed to create order") from e

        return order

    def get_order(self, order_id: str) -> Order | None:
        """Retrieve an order by id.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.get_item(Key={"id": order_id})
        except ClientError as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise StorageError("Failed to get order") from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def order_number_exists(self, order_number: str) -> bool:
        """Check whether an order number has already been issued.

        Args:
            order_number: Human-facing order number

        Returns:
            bool: True if an order already carries this number

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.query(
                IndexName=ORDER_NUMBER_INDEX,
                KeyConditionExpression="order_number = :number",
                ExpressionAttributeValues={":number": order_number},
                Limit=1,
            )
        except ClientError as e:
            logger.error(f"Failed to look up order number {order_number}: {e}")
            raise StorageError("Failed to look up order number") from e

        return bool(response.get("Items"))

    def list_orders(self) -> list[Order]:
        """List every order.

        Returns:
            list: All Order records (empty list if none)

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            items = scan_all(self.table)
        except ClientError as e:
            logger.error(f"Failed to list orders: {e}")
            raise StorageError("Failed to list orders") from e

        return [Order.from_dynamodb_item(item) for item in items]

    def update_status(
        self, order_id: str, status: OrderStatus, changed_at: datetime
    ) -> Order | None:
        """Set the order status and stamp the matching lifecycle timestamp.

        Earlier timestamps are left as they are.

        Args:
            order_id: Order identifier
            status: New status
            changed_at: Instant of the transition

        Returns:
            The updated Order, or None if no order has that id

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.update_item(
                Key={"id": order_id},
                UpdateExpression=(
                    "SET #status = :status, #timestamps.#stage = :changed_at, "
                    "updated_at = :changed_at"
                ),
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames={
                    "#status": "status",
                    "#timestamps": "timestamps",
                    "#stage": status.value,
                },
                ExpressionAttributeValues={
                    ":status": status.value,
                    ":changed_at": changed_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update status of order {order_id}: {e}")
            raise StorageError("Failed to update order status") from e

        return Order.from_dynamodb_item(response["Attributes"])

    def replace_items(
        self,
        order_id: str,
        items: list[OrderLine],
        total_amount: Decimal,
        changed_at: datetime,
    ) -> Order | None:
        """Replace the whole item list and its total.

        Args:
            order_id: Order identifier
            items: New order lines
            total_amount: Total recomputed from ``items``
            changed_at: Modification instant

        Returns:
            The updated Order, or None if no order has that id

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.update_item(
                Key={"id": order_id},
                UpdateExpression=(
                    "SET #items = :items, total_amount = :total, updated_at = :changed_at"
                ),
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames={"#items": "items"},
                ExpressionAttributeValues={
                    ":items": [line.to_dynamodb_item() for line in items],
                    ":total": total_amount,
                    ":changed_at": changed_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to replace items of order {order_id}: {e}")
            raise StorageError("Failed to update order items") from e

        return Order.from_dynamodb_item(response["Attributes"])
