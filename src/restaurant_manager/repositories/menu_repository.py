"""DynamoDB repository for menu items.

Menu items are keyed by ``id``. Items are never deleted: soft delete flips
``availability`` with a single atomic ``update_item``.
"""

import logging
from datetime import datetime

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_manager.errors import StorageError
from restaurant_manager.models.menu_models import MenuItem
from restaurant_manager.repositories.dynamodb import is_conditional_check_failure, scan_all

logger = logging.getLogger(__name__)


class MenuItemRepository:
    """Repository for menu item CRUD operations."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_item(self, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by id.

        Args:
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.get_item(Key={"id": item_id})
        except ClientError as e:
            logger.error(f"Failed to get menu item {item_id}: {e}")
            raise StorageError("Failed to get menu item") from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def save_item(self, menu_item: MenuItem) -> MenuItem:
        """Create or fully overwrite a menu item.

        Args:
            menu_item: MenuItem to save

        Returns:
            MenuItem: The saved item

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            self.table.put_item(Item=menu_item.to_dynamodb_item())
        except ClientError as e:
            logger.error(f"Failed to save menu item {menu_item.id}: {e}")
            raise StorageError("Failed to save menu item") from e

        return menu_item

    def list_items(self) -> list[MenuItem]:
        """List every menu item, available or not.

        Returns:
            list: All MenuItem records (empty list if none)

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            items = scan_all(self.table)
        except ClientError as e:
            logger.error(f"Failed to list menu items: {e}")
            raise StorageError("Failed to list menu items") from e

        return [MenuItem.from_dynamodb_item(item) for item in items]

    def set_availability(
        self, item_id: str, availability: bool, updated_at: datetime
    ) -> MenuItem | None:
        """Set the availability flag of an existing item.

        Args:
            item_id: Menu item identifier
            availability: New availability value
            updated_at: Modification instant

        Returns:
            The updated MenuItem, or None if no item has that id

        Raises:
            StorageError: If DynamoDB fails
        """
        try:
            response = self.table.update_item(
                Key={"id": item_id},
                UpdateExpression="SET availability = :availability, updated_at = :updated_at",
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeValues={
                    ":availability": availability,
                    ":updated_at": updated_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update availability of menu item {item_id}: {e}")
            raise StorageError("Failed to update menu item") from e

        return MenuItem.from_dynamodb_item(response["Attributes"])
