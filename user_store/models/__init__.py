# Base mixins and utilities
from .base import (
    DateTimeMixin,
    DynamoDBMixin,
)

# Core domain model
from .domain_models import (
    OPTIONAL_ATTRIBUTES,
    User,
)

# Write-side DTOs
from .dtos import (
    AttributeAction,
    CreateUserArgs,
    UpdateUserArgs,
    UserArgs,
)

# Request boundary
from .permissions import Permission
from .responses import HandlerResponse

__all__ = [
    # Base mixins and utilities
    "DateTimeMixin",
    "DynamoDBMixin",

    # Domain model
    "OPTIONAL_ATTRIBUTES",
    "User",

    # Write Models (DTOs)
    "AttributeAction",
    "CreateUserArgs",
    "UpdateUserArgs",
    "UserArgs",

    # Request boundary
    "HandlerResponse",
    "Permission",
]
