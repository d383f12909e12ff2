"""
Domain-Specific Exceptions for the User Store

Every exception extends UserStoreError and maps onto one failure class of the
user data-access layer:

1. Input Errors (ValidationError, MalformedTokenError)
2. Resource Not Found Errors (ItemNotFoundError)
3. Conflict Errors (ConflictError)
4. Stored Data Errors (MissingFieldError)
5. Infrastructure and Retry Errors (ConnectionError, RetryableError)
"""

from typing import Any, Dict, Optional

from .base import UserStoreError


# =============================================================================
# Input Errors
# =============================================================================

class ValidationError(UserStoreError):
    """Raised when request data fails to parse or validate.

    Used for:
    - Request bodies that are not valid JSON or miss required fields
    - Query parameters out of range (e.g. page size)
    - DynamoDB ValidationException responses
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


class MalformedTokenError(ValidationError):
    """Raised when a pagination token cannot be decoded into a resume key."""

    def __init__(self, token: str, reason: str, original_error: Optional[Exception] = None):
        self.token = token
        self.reason = reason
        super().__init__(f"Malformed pagination token: {reason}", original_error=original_error)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class ItemNotFoundError(UserStoreError):
    """Raised when a specific item is not found in DynamoDB.

    Used for:
    - Lookups by id or email that return no results
    - Update/Delete operations on non-existent users
    """

    def __init__(self, table_name: str, key: dict, original_error: Optional[Exception] = None):
        """Initialize item not found error.

        Args:
            table_name: Name of the DynamoDB table
            key: The key that was not found
            original_error: The original exception that caused this error
        """
        self.table_name = table_name
        self.key = key
        message = f"Item not found in table '{table_name}' with key: {key}"
        context = {
            'table_name': table_name,
            'key': key
        }
        super().__init__(message, original_error, context)


# =============================================================================
# Conflict Errors
# =============================================================================

class ConflictError(UserStoreError):
    """Raised when a write collides with existing data.

    Used for:
    - ConditionalCheckFailedException from DynamoDB
    - Creating a user with an email address that is already registered
    """

    def __init__(self, message: str, resource_id: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize conflict error.

        Args:
            message: Human-readable error message
            resource_id: ID of the conflicting resource (e.g., user_id)
            original_error: The original exception that caused this error
        """
        self.resource_id = resource_id
        context = {}
        if resource_id:
            context['resource_id'] = resource_id
        super().__init__(message, original_error, context)


# =============================================================================
# Stored Data Errors
# =============================================================================

class MissingFieldError(UserStoreError):
    """Raised when a stored item lacks a mandatory attribute.

    A stored user without its keys, id, username, email or timestamps violates
    the entity invariants. This is data corruption, never a caller mistake.
    """

    def __init__(self, field_name: str, key: Optional[Dict[str, Any]] = None):
        self.field_name = field_name
        context = {'field': field_name}
        if key:
            context['key'] = key
        super().__init__(f"Stored item is missing required attribute '{field_name}'", context=context)


# =============================================================================
# Infrastructure and Retry Errors
# =============================================================================

class ConnectionError(UserStoreError):
    """Raised when connection to DynamoDB fails.

    Used for:
    - Authentication/authorization failures
    - Missing tables or invalid endpoint configurations
    - Unknown DynamoDB error codes
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., endpoint, region)
        """
        super().__init__(message, original_error, context)


class RetryableError(UserStoreError):
    """Raised when the store is temporarily unavailable and the call can be retried.

    Used for:
    - ProvisionedThroughputExceededException and other throttling
    - Temporary service unavailability
    - Client-side connect/read timeouts (never reported as not-found)
    """

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None, original_error: Optional[Exception] = None):
        """Initialize retryable error.

        Args:
            message: Human-readable error message
            retry_after_seconds: Suggested retry delay in seconds
            original_error: The original exception that caused this error
        """
        self.retry_after_seconds = retry_after_seconds
        context = {}
        if retry_after_seconds:
            context['retry_after_seconds'] = retry_after_seconds
        super().__init__(message, original_error, context)
