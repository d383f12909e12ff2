"""
Test configuration and fixtures for the user store.

Provides a moto-backed users table (PK/SK primary key plus the GSI1 email
index) and read/write APIs bound to it.
"""

import boto3
import pytest
from moto import mock_aws

from user_store import (
    DynamoDBConfig,
    UserReadApi,
    UserService,
    UserWriteApi,
)


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing; resolves to table 'test_users'."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="test",
        table_prefix=""
    )


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def users_table(mock_dynamodb_resource):
    """Create the single users table for testing."""
    table = mock_dynamodb_resource.create_table(
        TableName='test_users',
        KeySchema=[
            {'AttributeName': 'PK', 'KeyType': 'HASH'},
            {'AttributeName': 'SK', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'PK', 'AttributeType': 'S'},
            {'AttributeName': 'SK', 'AttributeType': 'S'},
            {'AttributeName': 'GSI1PK', 'AttributeType': 'S'},
            {'AttributeName': 'GSI1SK', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': 'GSI1',
                'KeySchema': [
                    {'AttributeName': 'GSI1PK', 'KeyType': 'HASH'},
                    {'AttributeName': 'GSI1SK', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'},
                'ProvisionedThroughput': {'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
            }
        ],
        BillingMode='PROVISIONED',
        ProvisionedThroughput={'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
    )
    return table


# CQRS API Fixtures

@pytest.fixture
def user_read_api(mock_dynamodb_config, users_table):
    """User read API with mocked DynamoDB."""
    return UserReadApi(mock_dynamodb_config)


@pytest.fixture
def user_write_api(mock_dynamodb_config, users_table):
    """User write API with mocked DynamoDB."""
    return UserWriteApi(mock_dynamodb_config)


@pytest.fixture
def user_service(mock_dynamodb_config, user_read_api, user_write_api):
    """User service wired to the mocked read/write APIs."""
    return UserService(mock_dynamodb_config, user_read_api, user_write_api)


# Sample Data Fixtures

@pytest.fixture
def sample_user_data():
    """Sample create request body, keyed by wire attribute names."""
    return {
        "Username": "ada",
        "FirstName": "Ada",
        "LastName": "Lovelace",
        "Email": "ada@example.com",
        "ProfilePhoto": "https://example.com/ada.png",
        "Summary": "First programmer",
        "PhoneNumber": "5550100"
    }
