"""DynamoDB helpers shared by the repositories, plus local table bootstrap."""

import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

logger = logging.getLogger(__name__)

ORDER_NUMBER_INDEX = "order_number-index"


def is_conditional_check_failure(error: ClientError) -> bool:
    """Whether a ClientError came from a failed ConditionExpression."""
    return bool(error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException")


def scan_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Read every item of a table, following ``LastEvaluatedKey`` pages."""
    response = table.scan(**kwargs)
    items = list(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


def create_tables(
    dynamodb_resource: DynamoDBServiceResource, menu_table: str, orders_table: str
) -> list[str]:
    """Create the menu and order tables when they do not exist yet.

    Intended for a local DynamoDB endpoint; deployed tables are provisioned
    outside the service.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource
        menu_table: Menu items table name
        orders_table: Orders table name

    Returns:
        list: Names of the tables that were created
    """
    existing = {table.name for table in dynamodb_resource.tables.all()}
    created: list[str] = []

    if menu_table not in existing:
        dynamodb_resource.create_table(
            TableName=menu_table,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        created.append(menu_table)

    if orders_table not in existing:
        dynamodb_resource.create_table(
            TableName=orders_table,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "order_number", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": ORDER_NUMBER_INDEX,
                    "KeySchema": [{"AttributeName": "order_number", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "KEYS_ONLY"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        created.append(orders_table)

    for name in created:
        dynamodb_resource.Table(name).wait_until_exists()
        logger.info(f"Created DynamoDB table {name}")

    return created
