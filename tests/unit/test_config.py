import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from user_store.config import DynamoDBConfig, configure_logging


class TestDynamoDBConfig:
    """Test cases for DynamoDBConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {"AWS_REGION": "us-west-2"}, clear=True):
            config = DynamoDBConfig()

            assert config.region_name == "us-west-2"
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 10.0
            assert config.environment == "dev"
            assert config.users_table == "users"
            assert config.email_index_name == "GSI1"
            assert config.enable_debug_logging is False

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:8000",
            "DYNAMODB_TABLE_PREFIX": "classifind",
            "USERS_TABLE_NAME": "people",
            "ENVIRONMENT": "staging",
            "DYNAMODB_DEBUG_LOGGING": "true"
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = DynamoDBConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.endpoint_url == "http://localhost:8000"
            assert config.environment == "staging"
            assert config.enable_debug_logging is True
            assert config.get_table_name(config.users_table) == "classifind_staging_people"

    def test_table_name_generation(self):
        """Test table name generation with prefix and environment."""
        config = DynamoDBConfig(table_prefix="myapp", environment="dev")

        assert config.get_table_name("users") == "myapp_dev_users"

    def test_table_name_generation_prod(self):
        """Test table name generation in production (no environment suffix)."""
        config = DynamoDBConfig(table_prefix="myapp", environment="prod")

        assert config.get_table_name("users") == "myapp_users"

    def test_table_name_generation_no_prefix(self):
        """Test table name generation without prefix."""
        config = DynamoDBConfig(table_prefix="", environment="dev")

        assert config.get_table_name("users") == "dev_users"

    def test_environment_is_kept_as_plain_string(self):
        config = DynamoDBConfig(environment="test")

        config.environment = "staging"

        assert config.get_table_name("users").endswith("staging_users")

    def test_invalid_assignment_is_rejected(self):
        config = DynamoDBConfig(environment="dev")

        with pytest.raises(PydanticValidationError):
            config.environment = "qa"

    def test_invalid_environment(self):
        with pytest.raises(PydanticValidationError, match="Environment must be one of"):
            DynamoDBConfig(environment="qa")

    def test_invalid_timeout(self):
        with pytest.raises(PydanticValidationError, match="timeout_seconds must be positive"):
            DynamoDBConfig(timeout_seconds=0)


class TestConfigureLogging:

    def test_debug_logging(self):
        configure_logging(DynamoDBConfig(enable_debug_logging=True))

        assert logging.getLogger("user_store").level == logging.DEBUG

    def test_default_logging(self):
        configure_logging(DynamoDBConfig(enable_debug_logging=False))

        assert logging.getLogger("user_store").level == logging.INFO
