import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

ENVIRONMENTS = ('dev', 'staging', 'prod', 'test')


def _env(name: str, default: Optional[str] = None):
    return lambda: os.getenv(name, default)


class DynamoDBConfig(BaseModel):
    """Where the users table lives and how calls to it are bounded.

    Every field defaults from the process environment (or ``.env``).
    """

    # Credentials; None falls back to the default boto3 credential chain
    aws_access_key_id: Optional[str] = Field(default_factory=_env("AWS_ACCESS_KEY_ID"))
    aws_secret_access_key: Optional[str] = Field(default_factory=_env("AWS_SECRET_ACCESS_KEY"))

    region_name: str = Field(default_factory=_env("AWS_REGION", "us-east-1"))
    endpoint_url: Optional[str] = Field(
        default_factory=_env("DYNAMODB_ENDPOINT_URL"),
        description="Override for DynamoDB Local / LocalStack"
    )

    # Table naming: <prefix>_<environment>_<users_table>, environment omitted in prod
    table_prefix: str = Field(default_factory=_env("DYNAMODB_TABLE_PREFIX", ""))
    environment: str = Field(default_factory=_env("ENVIRONMENT", "dev"))
    users_table: str = Field(default_factory=_env("USERS_TABLE_NAME", "users"))
    email_index_name: str = Field(
        default_factory=_env("USERS_EMAIL_INDEX", "GSI1"),
        description="GSI keyed on GSI1PK (EMAIL#) / GSI1SK (USERNAME#)"
    )

    # botocore client bounds
    max_pool_connections: int = 50
    retries: int = Field(default=3, description="botocore max_attempts")
    timeout_seconds: float = Field(default=10.0, description="Connect and read timeout per call")

    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        if v not in ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {list(ENVIRONMENTS)}")
        return v

    @field_validator('timeout_seconds')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Full table name for ``base_name`` in this environment.

        Examples:
            prefix "classifind", environment "dev"  -> "classifind_dev_users"
            no prefix, environment "prod"           -> "users"
        """
        parts = [self.table_prefix] if self.table_prefix else []
        if self.environment != "prod":
            parts.append(self.environment)
        parts.append(base_name)
        return "_".join(parts)

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Configuration built purely from the environment."""
        return cls()


def configure_logging(config: DynamoDBConfig) -> None:
    """Apply the configured log level to the package logger."""
    level = logging.DEBUG if config.enable_debug_logging else logging.INFO
    logging.getLogger("user_store").setLevel(level)
