"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from src.main import create_application, get_dynamodb_resource, parse_list


@pytest.mark.unit
class TestGetDynamoDBResource:
    """Tests for get_dynamodb_resource function."""

    @patch.dict(os.environ, {"DYNAMODB_ENDPOINT": "", "AWS_REGION": "us-west-2"}, clear=True)
    @patch("src.main.boto3.resource")
    def test_creates_aws_resource_when_no_endpoint(self, mock_boto3_resource: Mock) -> None:
        """Test that AWS DynamoDB resource is created when no local endpoint configured."""
        mock_resource = MagicMock()
        mock_boto3_resource.return_value = mock_resource

        result = get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with("dynamodb", region_name="us-west-2")
        assert result == mock_resource

    @patch.dict(
        os.environ,
        {"DYNAMODB_ENDPOINT": "http://localhost:8000", "AWS_REGION": "us-east-1"},
        clear=True,
    )
    @patch("src.main.boto3.resource")
    def test_creates_local_resource_when_endpoint_provided(self, mock_boto3_resource: Mock) -> None:
        """Test that local DynamoDB resource is created when endpoint configured."""
        result = get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with(
            "dynamodb",
            endpoint_url="http://localhost:8000",
            region_name="us-east-1",
            aws_access_key_id="dummy",
            aws_secret_access_key="dummy",
        )
        assert result == mock_boto3_resource.return_value


@pytest.mark.unit
def test_parse_list_drops_blanks() -> None:
    """Test comma-separated environment parsing."""
    assert parse_list(" key-1, ,key-2,") == ["key-1", "key-2"]
    assert parse_list(None) == []


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.seed_sample_data")
    @patch("src.main.create_tables")
    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch("src.main.MenuItemRepository")
    @patch("src.main.OrderRepository")
    @patch("src.main.create_app")
    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "DEBUG",
            "DYNAMODB_MENU_TABLE": "test-menu",
            "DYNAMODB_ORDERS_TABLE": "test-orders",
            "API_KEYS": "key-1,key-2",
            "CORS_ORIGINS": "http://dashboard.example.com",
            "RESTAURANT_TIMEZONE": "Europe/London",
        },
        clear=True,
    )
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_app: Mock,
        mock_order_repo: Mock,
        mock_menu_repo: Mock,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_create_tables: Mock,
        mock_seed: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that application is created with all dependencies properly wired."""
        mock_dynamodb = MagicMock()
        mock_get_dynamodb.return_value = mock_dynamodb
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        result = create_application()

        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_menu_repo.assert_called_once_with(
            dynamodb_resource=mock_dynamodb, table_name="test-menu"
        )
        mock_order_repo.assert_called_once_with(
            dynamodb_resource=mock_dynamodb, table_name="test-orders"
        )
        # No local endpoint, no table bootstrap or seeding
        mock_create_tables.assert_not_called()
        mock_seed.assert_not_called()

        kwargs = mock_create_app.call_args.kwargs
        assert kwargs["api_keys"] == ["key-1", "key-2"]
        assert kwargs["cors_origins"] == ["http://dashboard.example.com"]
        assert kwargs["menu_service"].menu_repository == mock_menu_repo.return_value
        assert kwargs["order_service"].order_repository == mock_order_repo.return_value
        assert str(kwargs["analytics_service"].timezone) == "Europe/London"

        mock_setup_observability.assert_called_once_with(mock_app)
        assert result == mock_app

    @patch("src.main.setup_observability")
    @patch("src.main.seed_sample_data")
    @patch("src.main.create_tables")
    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch("src.main.create_app")
    @patch.dict(
        os.environ,
        {"DYNAMODB_ENDPOINT": "http://localhost:8000", "SEED_SAMPLE_DATA": "true"},
        clear=True,
    )
    def test_bootstraps_local_tables_and_seeds(
        self,
        mock_create_app: Mock,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_create_tables: Mock,
        mock_seed: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test local development setup with default table names."""
        create_application()

        mock_create_tables.assert_called_once_with(
            mock_get_dynamodb.return_value,
            menu_table="restaurant-menu-items",
            orders_table="restaurant-orders",
        )
        mock_seed.assert_called_once()

        kwargs = mock_create_app.call_args.kwargs
        assert kwargs["api_keys"] == []
        assert kwargs["cors_origins"] == ["http://localhost:5000"]

    @pytest.mark.asyncio
    @patch("src.main.setup_observability")
    @patch("src.main.create_tables")
    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch("src.main.MenuItemRepository")
    @patch("src.main.OrderRepository")
    @patch.dict(
        os.environ,
        {"DYNAMODB_ENDPOINT": "http://localhost:8000", "SEED_SAMPLE_DATA": "true"},
        clear=True,
    )
    async def test_seeds_inside_running_event_loop(
        self,
        mock_order_repo: Mock,
        mock_menu_repo: Mock,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_create_tables: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that seeding works while uvicorn imports the app from its event loop."""
        mock_menu_repo.return_value.list_items.return_value = []
        mock_order_repo.return_value.list_orders.return_value = []

        app = create_application()

        assert isinstance(app, FastAPI)
        assert mock_menu_repo.return_value.save_item.call_count == 6
        assert mock_order_repo.return_value.create_order.call_count == 2
