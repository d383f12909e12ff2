from .config import DynamoDBConfig, configure_logging
from .exceptions import (
    ConflictError,
    ConnectionError,
    ItemNotFoundError,
    MalformedTokenError,
    MissingFieldError,
    RetryableError,
    UserStoreError,
    ValidationError,
)
from .models import (
    # Domain model
    User,
    # Write DTOs
    CreateUserArgs,
    UpdateUserArgs,
    # Request boundary
    HandlerResponse,
    Permission,
)
from .core import (
    # TableGateway architecture
    TableGateway,
    create_table_gateway,
    # Pagination
    PaginatedResult,
    PaginationToken,
)
from .handlers.users import (
    # User CQRS APIs
    UserReadApi,
    UserWriteApi,
)
from .service import UserService

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",
    "configure_logging",

    # Exceptions
    "ConflictError",
    "ConnectionError",
    "ItemNotFoundError",
    "MalformedTokenError",
    "MissingFieldError",
    "RetryableError",
    "UserStoreError",
    "ValidationError",

    # Models
    "User",
    "CreateUserArgs",
    "UpdateUserArgs",
    "HandlerResponse",
    "Permission",

    # Core
    "TableGateway",
    "create_table_gateway",
    "PaginatedResult",
    "PaginationToken",

    # CQRS APIs
    "UserReadApi",
    "UserWriteApi",

    # Orchestration
    "UserService",
]
