"""
Tests for TableGateway (core/table_gateway.py)

These tests verify the thin DynamoDB wrapper under the user read/write APIs:
lazy resource creation, parameter pass-through and error mapping.
"""

import pytest
from unittest.mock import Mock, patch
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from user_store.config import DynamoDBConfig
from user_store.core.table_gateway import TableGateway, create_table_gateway, map_dynamodb_error
from user_store.exceptions import (
    ConflictError,
    ConnectionError,
    RetryableError,
    ValidationError,
)

KEY = {'PK': 'USER#abc', 'SK': 'USER#abc'}


def client_error(code, operation='GetItem', message='boom'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


@pytest.fixture
def mock_config():
    """Mock configuration for testing."""
    return DynamoDBConfig(
        region_name="us-east-1",
        table_prefix="test",
        environment="dev",
        aws_access_key_id="fake_key",
        aws_secret_access_key="fake_secret",
        timeout_seconds=2.5,
        retries=4
    )


@pytest.fixture
def mock_table():
    """Mock DynamoDB table resource."""
    table = Mock()
    table.get_item.return_value = {}
    table.query.return_value = {'Items': []}
    table.scan.return_value = {'Items': []}
    table.put_item.return_value = None
    table.update_item.return_value = {}
    table.delete_item.return_value = {}
    return table


@pytest.fixture
def gateway(mock_config, mock_table):
    """Gateway with the table resource already resolved."""
    gateway = TableGateway(mock_config, "test_dev_users")
    gateway._table = mock_table
    return gateway


class TestTableGateway:
    """Test TableGateway resource handling."""

    def test_initialization(self, mock_config):
        """Test TableGateway initialization."""
        gateway = TableGateway(mock_config, "test_table")

        assert gateway.config == mock_config
        assert gateway.table_name == "test_table"
        assert gateway._dynamodb is None
        assert gateway._table is None

    def test_dynamodb_property_uses_configured_timeouts(self, mock_config):
        """Test that the resource is created once with timeouts and retries from config."""
        with patch('boto3.Session') as mock_session_class:
            mock_session = Mock()
            mock_session_class.return_value = mock_session

            gateway = TableGateway(mock_config, "test_table")
            first = gateway.dynamodb
            second = gateway.dynamodb

            assert first is second
            mock_session.resource.assert_called_once()
            boto_config = mock_session.resource.call_args.kwargs['config']
            assert boto_config.read_timeout == 2.5
            assert boto_config.connect_timeout == 2.5
            assert boto_config.retries == {'max_attempts': 4}

    def test_dynamodb_connection_error(self, mock_config):
        """Test DynamoDB connection error handling."""
        with patch('boto3.Session') as mock_session_class:
            mock_session_class.side_effect = Exception("Connection failed")

            gateway = TableGateway(mock_config, "test_table")

            with pytest.raises(ConnectionError, match="Failed to connect to DynamoDB"):
                _ = gateway.dynamodb

    def test_create_table_gateway_resolves_table_name(self, mock_config):
        """Test the factory applies prefix and environment to the users table."""
        gateway = create_table_gateway(mock_config)

        assert gateway.table_name == "test_dev_users"

    def test_prod_table_name_has_no_environment(self):
        config = DynamoDBConfig(environment="prod", table_prefix="", users_table="users")

        assert create_table_gateway(config).table_name == "users"


class TestTableGatewayOperations:
    """Test pass-through of DynamoDB operations."""

    def test_get_item_returns_item(self, gateway, mock_table):
        mock_table.get_item.return_value = {'Item': {'PK': 'USER#abc'}}

        assert gateway.get_item(KEY, consistent_read=True) == {'PK': 'USER#abc'}
        mock_table.get_item.assert_called_once_with(Key=KEY, ConsistentRead=True)

    def test_get_item_missing_returns_none(self, gateway):
        assert gateway.get_item(KEY) is None

    def test_put_item_with_condition(self, gateway, mock_table):
        condition = Attr('PK').not_exists()

        gateway.put_item({**KEY, 'Username': 'ada'}, condition_expression=condition)

        mock_table.put_item.assert_called_once_with(
            Item={**KEY, 'Username': 'ada'},
            ConditionExpression=condition
        )

    def test_update_item_builds_request(self, gateway, mock_table):
        gateway.update_item(
            key=KEY,
            update_expression='SET #a0 = :v0',
            expression_attribute_values={':v0': 'ada'},
            expression_attribute_names={'#a0': 'Username'}
        )

        mock_table.update_item.assert_called_once_with(
            Key=KEY,
            UpdateExpression='SET #a0 = :v0',
            ExpressionAttributeValues={':v0': 'ada'},
            ExpressionAttributeNames={'#a0': 'Username'}
        )

    def test_delete_item_without_condition(self, gateway, mock_table):
        assert gateway.delete_item(KEY) is None
        mock_table.delete_item.assert_called_once_with(Key=KEY)

    def test_scan_passes_parameters(self, gateway, mock_table):
        gateway.scan(Limit=5, ExclusiveStartKey=KEY)

        mock_table.scan.assert_called_once_with(Limit=5, ExclusiveStartKey=KEY)

    def test_scan_without_limit_warns(self, gateway, caplog):
        gateway.scan()

        assert "without Limit" in caplog.text


class TestErrorMapping:
    """Test ClientError and transport failure mapping."""

    @pytest.mark.parametrize("code,expected", [
        ('ConditionalCheckFailedException', ConflictError),
        ('ResourceNotFoundException', ConnectionError),
        ('ValidationException', ValidationError),
        ('ProvisionedThroughputExceededException', RetryableError),
        ('ThrottlingException', RetryableError),
        ('InternalServerError', RetryableError),
        ('RequestTimeoutException', RetryableError),
        ('AccessDeniedException', ConnectionError),
        ('IndexNotFoundException', ConnectionError),
        ('SomethingNew', ConnectionError),
    ])
    def test_map_dynamodb_error(self, code, expected):
        error = map_dynamodb_error(client_error(code), "GetItem", "test_users", "USER#abc")

        assert isinstance(error, expected)
        assert error.original_error is not None

    def test_conflict_carries_resource_id(self):
        error = map_dynamodb_error(client_error('ConditionalCheckFailedException'), "PutItem", "t", "USER#abc")

        assert error.resource_id == "USER#abc"

    def test_client_error_is_mapped_and_chained(self, gateway, mock_table):
        original = client_error('ConditionalCheckFailedException', 'PutItem')
        mock_table.put_item.side_effect = original

        with pytest.raises(ConflictError) as exc_info:
            gateway.put_item(KEY, condition_expression=Attr('PK').not_exists())

        assert exc_info.value.__cause__ is original

    @pytest.mark.parametrize("timeout", [
        ReadTimeoutError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com"),
        ConnectTimeoutError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com"),
        EndpointConnectionError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com"),
    ])
    def test_timeouts_are_retryable(self, gateway, mock_table, timeout):
        """A timed out read is reported as unavailable, never as a missing item."""
        mock_table.get_item.side_effect = timeout

        with pytest.raises(RetryableError):
            gateway.get_item(KEY)

    @pytest.mark.parametrize("operation", ['query', 'scan'])
    def test_read_timeouts_on_paged_operations(self, gateway, mock_table, operation):
        getattr(mock_table, operation).side_effect = ReadTimeoutError(endpoint_url="http://x")

        with pytest.raises(RetryableError):
            getattr(gateway, operation)(Limit=1)

    def test_update_timeout_is_retryable(self, gateway, mock_table):
        mock_table.update_item.side_effect = ReadTimeoutError(endpoint_url="http://x")

        with pytest.raises(RetryableError):
            gateway.update_item(KEY, 'SET #a0 = :v0', {'#a0': 'x'}, {':v0': 1})

    def test_missing_index_is_not_reported_as_missing_item(self, gateway, mock_table):
        """A query against an absent GSI is a deployment fault, not an empty result."""
        mock_table.query.side_effect = client_error('IndexNotFoundException', 'Query')

        with pytest.raises(ConnectionError, match="Index not found"):
            gateway.query(IndexName='GSI1')
