"""Unit tests for Lambda dependency factory."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest

import src.lambda_dependencies as deps
from src.lambda_dependencies import (
    get_dynamodb_resource,
    get_fastapi_app,
    get_menu_repository,
    get_order_repository,
    initialize_lambda_environment,
)


def reset_caches() -> None:
    deps._dynamodb_resource = None
    deps._menu_repository = None
    deps._order_repository = None
    deps._fastapi_app = None


@pytest.mark.unit
class TestGetDynamoDBResource:
    """Tests for get_dynamodb_resource function."""

    def teardown_method(self) -> None:
        """Clear cached resources after each test."""
        reset_caches()

    @patch.dict(os.environ, {"DYNAMODB_ENDPOINT": "", "AWS_REGION": "us-west-2"}, clear=True)
    @patch("src.lambda_dependencies.boto3.resource")
    def test_creates_aws_resource_when_no_endpoint(self, mock_boto3_resource: Mock) -> None:
        """Test that AWS DynamoDB resource is created when no local endpoint configured."""
        result = get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with("dynamodb", region_name="us-west-2")
        assert result == mock_boto3_resource.return_value

    @patch.dict(os.environ, {"DYNAMODB_ENDPOINT": "http://localhost:8000"}, clear=True)
    @patch("src.lambda_dependencies.boto3.resource")
    def test_creates_local_resource_when_endpoint_provided(self, mock_boto3_resource: Mock) -> None:
        """Test that local DynamoDB resource is created when endpoint configured."""
        get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with(
            "dynamodb",
            endpoint_url="http://localhost:8000",
            region_name="us-east-1",
            aws_access_key_id="dummy",
            aws_secret_access_key="dummy",
        )

    @patch.dict(os.environ, {}, clear=True)
    @patch("src.lambda_dependencies.boto3.resource")
    def test_caches_resource_across_calls(self, mock_boto3_resource: Mock) -> None:
        """Test that the resource is created once per container."""
        first = get_dynamodb_resource()
        second = get_dynamodb_resource()

        assert first is second
        mock_boto3_resource.assert_called_once()


@pytest.mark.unit
class TestRepositoriesAndApp:
    """Tests for repository and application factories."""

    def teardown_method(self) -> None:
        """Clear cached dependencies after each test."""
        reset_caches()

    @patch.dict(
        os.environ,
        {"DYNAMODB_MENU_TABLE": "prod-menu", "DYNAMODB_ORDERS_TABLE": "prod-orders"},
        clear=True,
    )
    @patch("src.lambda_dependencies.get_dynamodb_resource")
    def test_repositories_use_configured_tables(self, mock_get_dynamodb: Mock) -> None:
        """Test table names come from the environment and repositories are cached."""
        mock_dynamodb = MagicMock()
        mock_get_dynamodb.return_value = mock_dynamodb

        menu_repository = get_menu_repository()
        order_repository = get_order_repository()

        assert menu_repository.table_name == "prod-menu"
        assert order_repository.table_name == "prod-orders"
        assert get_menu_repository() is menu_repository
        assert get_order_repository() is order_repository

    @patch.dict(os.environ, {"API_KEYS": "lambda-key"}, clear=True)
    @patch("src.lambda_dependencies.create_app")
    @patch("src.lambda_dependencies.get_dynamodb_resource")
    def test_fastapi_app_is_built_once(
        self, mock_get_dynamodb: Mock, mock_create_app: Mock
    ) -> None:
        """Test that the application is wired once with the configured keys."""
        first = get_fastapi_app()
        second = get_fastapi_app()

        assert first is second
        mock_create_app.assert_called_once()
        assert mock_create_app.call_args.kwargs["api_keys"] == ["lambda-key"]


@pytest.mark.unit
@patch("src.lambda_dependencies.configure_logging")
@patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
def test_initialize_lambda_environment(mock_configure_logging: Mock) -> None:
    """Test that cold start configures logging."""
    initialize_lambda_environment()

    mock_configure_logging.assert_called_once_with("WARNING")
