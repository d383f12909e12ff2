# Base exception class
from .base import UserStoreError

from .domain_exceptions import (
    ValidationError,
    MalformedTokenError,
    ItemNotFoundError,
    ConflictError,
    MissingFieldError,
    ConnectionError,
    RetryableError,
)

__all__ = [
    # Base exception
    "UserStoreError",

    # Domain exceptions (alphabetically ordered)
    "ConflictError",
    "ConnectionError",
    "ItemNotFoundError",
    "MalformedTokenError",
    "MissingFieldError",
    "RetryableError",
    "ValidationError",
]
