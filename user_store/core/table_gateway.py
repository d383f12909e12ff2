"""
Thin DynamoDB Table Gateway

Wraps the boto3 Table handle of the users table with the handful of calls the
user access patterns make (GetItem, Query on GSI1, bounded Scan, conditional
PutItem/UpdateItem, DeleteItem).

Every call translates failures into the user store error taxonomy:
- ClientError codes via map_dynamodb_error
- botocore connect/read timeouts and endpoint failures to RetryableError,
  never to "not found"
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ..config import DynamoDBConfig
from ..exceptions import (
    ConnectionError,
    ConflictError,
    ValidationError,
    RetryableError
)

logger = logging.getLogger(__name__)

# Transport failures raised by botocore before any DynamoDB response exists
TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError)

# Error code -> message label, grouped by the exception raised for it
THROTTLING_CODES = {
    'ProvisionedThroughputExceededException': "Throughput exceeded",
    'RequestLimitExceeded': "Request limit exceeded",
    'ThrottlingException': "Throttled",
}
UNAVAILABLE_CODES = {
    'InternalServerError': "Service unavailable",
    'ServiceUnavailable': "Service unavailable",
    'RequestTimeoutException': "Request timeout",
}
DEPLOYMENT_CODES = {
    'ResourceNotFoundException': "Table not found",
    'IndexNotFoundException': "Index not found",
    'UnrecognizedClientException': "Authentication failed",
    'AccessDeniedException': "Access denied",
    'ExpiredTokenException': "Credentials expired",
}


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None
) -> Exception:
    """Translate a DynamoDB ClientError into a user store exception.

    A missing table or index is a deployment fault and maps to ConnectionError,
    so it can never be reported to callers as a missing user.

    Args:
        error: The boto3 ClientError
        operation: DynamoDB operation name (e.g. "Query")
        table_name: Table the call targeted
        resource_id: User key or index name, for context

    Returns:
        The exception to raise
    """
    code = error.response['Error']['Code']
    where = f"{operation} on {table_name}" + (f" ({resource_id})" if resource_id else "")
    detail = f"{where}: {error.response['Error'].get('Message', '')}"

    if code == 'ConditionalCheckFailedException':
        return ConflictError(f"Condition not met - {detail}", resource_id, original_error=error)
    if code == 'ValidationException':
        return ValidationError(f"Rejected request - {detail}", original_error=error)
    if code in THROTTLING_CODES:
        return RetryableError(f"{THROTTLING_CODES[code]} - {detail}", original_error=error)
    if code in UNAVAILABLE_CODES:
        return RetryableError(f"{UNAVAILABLE_CODES[code]} - {detail}", original_error=error)
    if code in DEPLOYMENT_CODES:
        return ConnectionError(f"{DEPLOYMENT_CODES[code]} - {detail}", original_error=error)

    logger.warning(f"Unmapped DynamoDB error code '{code}' from {where}")
    return ConnectionError(f"DynamoDB call failed - {detail}", original_error=error)


def map_timeout_error(error: Exception, operation: str, table_name: str) -> RetryableError:
    """Map a botocore transport failure to a retryable error."""
    return RetryableError(
        f"{operation} on {table_name} did not complete: {error}",
        original_error=error
    )


def _resource_id(key: Dict[str, Any]) -> Optional[str]:
    return key.get('PK')


class TableGateway:
    """
    Thin gateway for the users table.

    Read/write APIs call these wrappers instead of the boto3 Table so that
    every call shares the same error mapping.
    """

    def __init__(self, config: DynamoDBConfig, table_name: str):
        self.config = config
        self.table_name = table_name
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """boto3 DynamoDB resource, created on first use with bounded timeouts."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )
                self._dynamodb = session.resource(
                    'dynamodb',
                    region_name=self.config.region_name,
                    endpoint_url=self.config.endpoint_url,
                    config=Config(
                        retries={'max_attempts': self.config.retries},
                        max_pool_connections=self.config.max_pool_connections,
                        read_timeout=self.config.timeout_seconds,
                        connect_timeout=self.config.timeout_seconds
                    )
                )
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._dynamodb

    @property
    def table(self):
        """boto3 Table handle for the users table."""
        if self._table is None:
            self._table = self.dynamodb.Table(self.table_name)
        return self._table

    def get_item(self, key: Dict[str, Any], consistent_read: bool = False) -> Optional[Dict[str, Any]]:
        """
        Fetch a single item by its full primary key.

        Returns:
            The stored item, or None when no item exists at that key
        """
        try:
            response = self.table.get_item(Key=key, ConsistentRead=consistent_read)
        except ClientError as e:
            raise map_dynamodb_error(e, "GetItem", self.table_name, _resource_id(key)) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "GetItem", self.table_name) from e
        return response.get('Item')

    def query(self, **kwargs) -> Dict[str, Any]:
        """
        Raw Query pass-through, used for GSI1 lookups.

        Example:
            response = gateway.query(
                IndexName='GSI1',
                KeyConditionExpression=Key('GSI1PK').eq('EMAIL#a@b.io'),
            )
        """
        try:
            return self.table.query(**kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "Query", self.table_name, kwargs.get('IndexName')) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "Query", self.table_name) from e

    def scan(self, **kwargs) -> Dict[str, Any]:
        """
        Raw Scan pass-through.

        Scans read the whole table; callers bound them with Limit and resume
        with ExclusiveStartKey.
        """
        if 'Limit' not in kwargs:
            logger.warning(f"Scan on {self.table_name} without Limit - consider adding one")
        try:
            return self.table.scan(**kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "Scan", self.table_name) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "Scan", self.table_name) from e

    def put_item(self, item: Dict[str, Any], condition_expression=None) -> None:
        """
        Write a full item, optionally guarded by a condition.

        Example:
            gateway.put_item(item, condition_expression=Attr('PK').not_exists())
        """
        key = {'PK': item.get('PK'), 'SK': item.get('SK')}
        put_kwargs = {'Item': item}
        if condition_expression is not None:
            put_kwargs['ConditionExpression'] = condition_expression

        try:
            self.table.put_item(**put_kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "PutItem", self.table_name, _resource_id(key)) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "PutItem", self.table_name) from e
        logger.info(f"Put item in {self.table_name}: {key}")

    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_names: Dict[str, str],
        expression_attribute_values: Optional[Dict[str, Any]] = None,
        condition_expression=None
    ) -> None:
        """
        Apply a SET/REMOVE update expression to one item.

        Args:
            key: Primary key of the item
            update_expression: UpdateExpression using ``#name`` placeholders
            expression_attribute_names: Placeholder -> attribute name
            expression_attribute_values: Placeholder -> value (absent for REMOVE-only updates)
            condition_expression: Optional guard, e.g. ``Attr('PK').exists()``
        """
        update_kwargs = {
            'Key': key,
            'UpdateExpression': update_expression,
            'ExpressionAttributeNames': expression_attribute_names,
        }
        if expression_attribute_values:
            update_kwargs['ExpressionAttributeValues'] = expression_attribute_values
        if condition_expression is not None:
            update_kwargs['ConditionExpression'] = condition_expression

        try:
            self.table.update_item(**update_kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "UpdateItem", self.table_name, _resource_id(key)) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "UpdateItem", self.table_name) from e
        logger.info(f"Updated item in {self.table_name}: {key}")

    def delete_item(self, key: Dict[str, Any]) -> None:
        """Delete one item; deleting an absent key is not an error."""
        try:
            self.table.delete_item(Key=key)
        except ClientError as e:
            raise map_dynamodb_error(e, "DeleteItem", self.table_name, _resource_id(key)) from e
        except TIMEOUT_ERRORS as e:
            raise map_timeout_error(e, "DeleteItem", self.table_name) from e
        logger.info(f"Deleted item from {self.table_name}: {key}")


def create_table_gateway(config: DynamoDBConfig, table_name: Optional[str] = None) -> TableGateway:
    """
    Build a TableGateway for a base table name (default: the users table).

    The name is expanded with the configured prefix and environment.
    """
    return TableGateway(config, config.get_table_name(table_name or config.users_table))
