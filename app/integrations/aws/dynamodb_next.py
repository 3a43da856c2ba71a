"""AWS DynamoDB Next Module

Simplified DynamoDB operations on top of client_next.execute_aws_api_call.
Every function returns an OperationResult; conditional write failures come
back with status CONFLICT.

Usage:
    result = get_item(
        table_name="retry-records",
        Key={"record_id": {"S": "3f0c..."}},
    )
    if result.is_success:
        item = result.data.get("Item")
"""

from typing import Any, Dict, List

from integrations.aws.client_next import execute_aws_api_call
from infrastructure.operations import OperationResult


def get_item(
    table_name: str,
    Key: Dict[str, Any],
    **kwargs,
) -> OperationResult:
    """Get an item from a DynamoDB table.

    Args:
        table_name: DynamoDB table name
        Key: Primary key attributes (DynamoDB format)
        **kwargs: Additional parameters for get_item (e.g. ConsistentRead)

    Returns:
        OperationResult: response dict ("Item" present when found)
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="get_item",
        TableName=table_name,
        Key=Key,
        **kwargs,
    )


def put_item(
    table_name: str,
    Item: Dict[str, Any],
    **kwargs,
) -> OperationResult:
    """Put an item into a DynamoDB table.

    Args:
        table_name: DynamoDB table name
        Item: Item attributes (DynamoDB format)
        **kwargs: Additional parameters (e.g. ConditionExpression)
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="put_item",
        TableName=table_name,
        Item=Item,
        **kwargs,
    )


def query(
    table_name: str,
    KeyConditionExpression: str,
    **kwargs,
) -> OperationResult:
    """Query a DynamoDB table or index, collecting every page.

    Args:
        table_name: DynamoDB table name
        KeyConditionExpression: Key condition
        **kwargs: Additional parameters (IndexName, ExpressionAttributeValues, ...)

    Returns:
        OperationResult: list of items (DynamoDB format) as data
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="query",
        paginate=True,
        keys=["Items"],
        TableName=table_name,
        KeyConditionExpression=KeyConditionExpression,
        **kwargs,
    )


def transact_write_items(
    TransactItems: List[Dict[str, Any]],
    **kwargs,
) -> OperationResult:
    """Write several items atomically.

    Args:
        TransactItems: Put/Update/Delete/ConditionCheck entries
        **kwargs: Additional parameters (e.g. ClientRequestToken)

    Returns:
        OperationResult: CONFLICT when a condition in the transaction failed
    """
    return execute_aws_api_call(
        service_name="dynamodb",
        method="transact_write_items",
        TransactItems=TransactItems,
        **kwargs,
    )
