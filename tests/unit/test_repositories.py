"""Unit tests for the DynamoDB repositories."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from restaurant_manager.errors import StorageError
from restaurant_manager.models.menu_models import MenuItem
from restaurant_manager.models.order_models import Order, OrderStatus
from restaurant_manager.repositories.dynamodb import (
    ORDER_NUMBER_INDEX,
    create_tables,
    is_conditional_check_failure,
    scan_all,
)
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.repositories.order_repository import OrderRepository


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


@pytest.mark.unit
class TestDynamoDBHelpers:
    """Test suite for shared DynamoDB helpers."""

    def test_scan_all_follows_pagination(self) -> None:
        """Test that every scan page is read."""
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": [{"id": "a"}], "LastEvaluatedKey": {"id": "a"}},
            {"Items": [{"id": "b"}]},
        ]

        items = scan_all(table)

        assert items == [{"id": "a"}, {"id": "b"}]
        assert table.scan.call_count == 2
        table.scan.assert_called_with(ExclusiveStartKey={"id": "a"})

    def test_conditional_check_detection(self) -> None:
        """Test that only failed conditions are recognized."""
        assert is_conditional_check_failure(
            client_error("ConditionalCheckFailedException", "UpdateItem")
        )
        assert not is_conditional_check_failure(client_error("InternalServerError", "UpdateItem"))

    def test_create_tables_skips_existing(self) -> None:
        """Test that only missing tables are created."""
        existing = MagicMock()
        existing.name = "menu"
        dynamodb = MagicMock()
        dynamodb.tables.all.return_value = [existing]

        created = create_tables(dynamodb, menu_table="menu", orders_table="orders")

        assert created == ["orders"]
        dynamodb.create_table.assert_called_once()
        kwargs = dynamodb.create_table.call_args.kwargs
        assert kwargs["TableName"] == "orders"
        assert kwargs["GlobalSecondaryIndexes"][0]["IndexName"] == ORDER_NUMBER_INDEX
        dynamodb.Table.return_value.wait_until_exists.assert_called_once()


@pytest.mark.unit
class TestMenuItemRepository:
    """Test suite for MenuItemRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> MenuItemRepository:
        """Create a MenuItemRepository with mocked DynamoDB."""
        return MenuItemRepository(dynamodb_resource=mock_dynamodb, table_name="test-menu")

    def test_repository_initialization(self, mock_dynamodb: MagicMock) -> None:
        """Test that repository initializes correctly."""
        repo = MenuItemRepository(dynamodb_resource=mock_dynamodb, table_name="test-table")
        assert repo.table_name == "test-table"
        mock_dynamodb.Table.assert_called_once_with("test-table")

    def test_get_item_success(
        self,
        repository: MenuItemRepository,
        mock_dynamodb: MagicMock,
        menu_item_factory: Callable[..., MenuItem],
    ) -> None:
        """Test successfully retrieving a menu item."""
        menu_item = menu_item_factory()
        mock_dynamodb.Table.return_value.get_item.return_value = {
            "Item": menu_item.to_dynamodb_item()
        }

        result = repository.get_item("item_1")

        assert result == menu_item
        mock_dynamodb.Table.return_value.get_item.assert_called_once_with(Key={"id": "item_1"})

    def test_get_item_not_found(
        self, repository: MenuItemRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test retrieving a missing item returns None."""
        mock_dynamodb.Table.return_value.get_item.return_value = {}

        assert repository.get_item("missing") is None

    def test_get_item_dynamodb_error(
        self, repository: MenuItemRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that DynamoDB errors raise StorageError."""
        mock_dynamodb.Table.return_value.get_item.side_effect = client_error(
            "InternalServerError", "GetItem"
        )

        with pytest.raises(StorageError):
            repository.get_item("item_1")

    def test_save_item(
        self,
        repository: MenuItemRepository,
        mock_dynamodb: MagicMock,
        menu_item_factory: Callable[..., MenuItem],
    ) -> None:
        """Test that save writes the full item."""
        menu_item = menu_item_factory()

        result = repository.save_item(menu_item)

        assert result == menu_item
        mock_dynamodb.Table.return_value.put_item.assert_called_once_with(
            Item=menu_item.to_dynamodb_item()
        )

    def test_save_item_dynamodb_error(
        self,
        repository: MenuItemRepository,
        mock_dynamodb: MagicMock,
        menu_item_factory: Callable[..., MenuItem],
    ) -> None:
        """Test that write failures raise StorageError."""
        mock_dynamodb.Table.return_value.put_item.side_effect = client_error(
            "ProvisionedThroughputExceededException", "PutItem"
        )

        with pytest.raises(StorageError, match="Failed to save menu item"):
            repository.save_item(menu_item_factory())

    def test_list_items(
        self,
        repository: MenuItemRepository,
        mock_dynamodb: MagicMock,
        menu_item_factory: Callable[..., MenuItem],
    ) -> None:
        """Test listing parses every scanned item."""
        mock_dynamodb.Table.return_value.scan.return_value = {
            "Items": [
                menu_item_factory("item_1").to_dynamodb_item(),
                menu_item_factory("item_2", name="Caesar Salad").to_dynamodb_item(),
            ]
        }

        items = repository.list_items()

        assert [item.id for item in items] == ["item_1", "item_2"]

    def test_set_availability(
        self,
        repository: MenuItemRepository,
        mock_dynamodb: MagicMock,
        menu_item_factory: Callable[..., MenuItem],
        fixed_now: datetime,
    ) -> None:
        """Test that availability is updated conditionally and atomically."""
        updated = menu_item_factory(availability=False)
        table = mock_dynamodb.Table.return_value
        table.update_item.return_value = {"Attributes": updated.to_dynamodb_item()}

        result = repository.set_availability("item_1", False, fixed_now)

        assert result is not None
        assert result.availability is False
        kwargs = table.update_item.call_args.kwargs
        assert kwargs["ConditionExpression"] == "attribute_exists(id)"
        assert kwargs["ExpressionAttributeValues"][":availability"] is False
        assert kwargs["ReturnValues"] == "ALL_NEW"

    def test_set_availability_missing_item(
        self, repository: MenuItemRepository, mock_dynamodb: MagicMock, fixed_now: datetime
    ) -> None:
        """Test that a failed existence condition maps to None."""
        mock_dynamodb.Table.return_value.update_item.side_effect = client_error(
            "ConditionalCheckFailedException", "UpdateItem"
        )

        assert repository.set_availability("missing", False, fixed_now) is None


@pytest.mark.unit
class TestOrderRepository:
    """Test suite for OrderRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> OrderRepository:
        """Create an OrderRepository with mocked DynamoDB."""
        return OrderRepository(dynamodb_resource=mock_dynamodb, table_name="test-orders")

    def test_create_order_is_conditional(
        self,
        repository: OrderRepository,
        mock_dynamodb: MagicMock,
        order_factory: Callable[..., Order],
    ) -> None:
        """Test that creation never overwrites an existing id."""
        order = order_factory()

        repository.create_order(order)

        mock_dynamodb.Table.return_value.put_item.assert_called_once_with(
            Item=order.to_dynamodb_item(),
            ConditionExpression="attribute_not_exists(id)",
        )

    def test_create_order_dynamodb_error(
        self,
        repository: OrderRepository,
        mock_dynamodb: MagicMock,
        order_factory: Callable[..., Order],
    ) -> None:
        """Test that write failures raise StorageError."""
        mock_dynamodb.Table.return_value.put_item.side_effect = client_error(
            "InternalServerError", "PutItem"
        )

        with pytest.raises(StorageError, match="Failed to create order"):
            repository.create_order(order_factory())

    def test_get_order(
        self,
        repository: OrderRepository,
        mock_dynamodb: MagicMock,
        order_factory: Callable[..., Order],
    ) -> None:
        """Test retrieving an order by id."""
        order = order_factory()
        mock_dynamodb.Table.return_value.get_item.return_value = {"Item": order.to_dynamodb_item()}

        assert repository.get_order("ord_1") == order

    def test_get_order_not_found(
        self, repository: OrderRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test retrieving a missing order returns None."""
        mock_dynamodb.Table.return_value.get_item.return_value = {}

        assert repository.get_order("missing") is None

    def test_order_number_exists_queries_index(
        self, repository: OrderRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test the order number lookup uses the secondary index."""
        table = mock_dynamodb.Table.return_value
        table.query.return_value = {"Items": [{"id": "ord_1", "order_number": "ORD-1-001"}]}

        assert repository.order_number_exists("ORD-1-001") is True
        assert table.query.call_args.kwargs["IndexName"] == ORDER_NUMBER_INDEX

        table.query.return_value = {"Items": []}
        assert repository.order_number_exists("ORD-1-002") is False

    def test_list_orders_dynamodb_error(
        self, repository: OrderRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that scan failures raise StorageError."""
        mock_dynamodb.Table.return_value.scan.side_effect = client_error(
            "InternalServerError", "Scan"
        )

        with pytest.raises(StorageError, match="Failed to list orders"):
            repository.list_orders()

    def test_update_status_stamps_stage(
        self,
        repository: OrderRepository,
        mock_dynamodb: MagicMock,
        order_factory: Callable[..., Order],
        fixed_now: datetime,
    ) -> None:
        """Test that the status and its stage timestamp are written together."""
        updated = order_factory(status=OrderStatus.PREPARING)
        table = mock_dynamodb.Table.return_value
        table.update_item.return_value = {"Attributes": updated.to_dynamodb_item()}

        result = repository.update_status("ord_1", OrderStatus.PREPARING, fixed_now)

        assert result is not None
        assert result.status == OrderStatus.PREPARING
        kwargs = table.update_item.call_args.kwargs
        assert kwargs["ExpressionAttributeNames"]["#stage"] == "preparing"
        assert kwargs["ExpressionAttributeValues"][":status"] == "preparing"
        assert kwargs["ExpressionAttributeValues"][":changed_at"] == fixed_now.isoformat()
        assert kwargs["ConditionExpression"] == "attribute_exists(id)"

    def test_update_status_missing_order(
        self, repository: OrderRepository, mock_dynamodb: MagicMock, fixed_now: datetime
    ) -> None:
        """Test that a missing order maps to None."""
        mock_dynamodb.Table.return_value.update_item.side_effect = client_error(
            "ConditionalCheckFailedException", "UpdateItem"
        )

        assert repository.update_status("missing", OrderStatus.READY, fixed_now) is None

    def test_update_status_dynamodb_error(
        self, repository: OrderRepository, mock_dynamodb: MagicMock, fixed_now: datetime
    ) -> None:
        """Test that other update failures raise StorageError."""
        mock_dynamodb.Table.return_value.update_item.side_effect = client_error(
            "InternalServerError", "UpdateItem"
        )

        with pytest.raises(StorageError):
            repository.update_status("ord_1", OrderStatus.READY, fixed_now)

    def test_replace_items(
        self,
        repository: OrderRepository,
        mock_dynamodb: MagicMock,
        order_factory: Callable[..., Order],
        line_factory: Callable[..., object],
        fixed_now: datetime,
    ) -> None:
        """Test that lines and total are replaced in one update."""
        lines = [line_factory(quantity=3)]
        updated = order_factory(items=lines, total="44.97")
        table = mock_dynamodb.Table.return_value
        table.update_item.return_value = {"Attributes": updated.to_dynamodb_item()}

        result = repository.replace_items("ord_1", lines, Decimal("44.97"), fixed_now)

        assert result is not None
        assert result.total_amount == Decimal("44.97")
        values = table.update_item.call_args.kwargs["ExpressionAttributeValues"]
        assert values[":total"] == Decimal("44.97")
        assert values[":items"][0]["quantity"] == 3
