"""
User Service

Request orchestration for the user endpoints. Each operation validates its
input, runs the lookups and writes it needs through the read/write APIs and
returns a HandlerResponse; it never raises for expected failures.

Error mapping:
- bad request body or query parameter    -> 400
- malformed pagination token             -> 400
- user not found                         -> 404
- email already registered on create     -> 409
- store throttled or timed out           -> 503
- corrupt stored item / other store error -> 500

Store error detail is logged, never echoed back to the caller.
"""

import logging
from http import HTTPStatus
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from ulid import ULID

from .config import DynamoDBConfig
from .exceptions import (
    ItemNotFoundError,
    MalformedTokenError,
    MissingFieldError,
    RetryableError,
    UserStoreError,
    ValidationError,
)
from .handlers import UserReadApi, UserWriteApi
from .models import CreateUserArgs, HandlerResponse, UpdateUserArgs, User

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

PARSE_ERROR_MESSAGE = "Error parsing incoming request object"
MISSING_USER_ID_MESSAGE = "Error locating User ID within path parameters"
NOT_FOUND_MESSAGE = "User not found"

ArgsT = TypeVar("ArgsT", bound=BaseModel)
RequestBody = Union[str, bytes, dict, None]


def is_ulid(value: str) -> bool:
    """True when ``value`` is a well-formed ULID string."""
    try:
        ULID.from_str(value)
    except ValueError:
        return False
    return True


def parse_body(body: RequestBody, model: Type[ArgsT]) -> ArgsT:
    """Parse a request body (JSON text or an already decoded dict) into ``model``.

    Raises:
        ValidationError: body is missing, not JSON, or fails model validation
    """
    if body is None or body == "" or body == b"":
        raise ValidationError("Request body is required")
    try:
        if isinstance(body, (str, bytes)):
            return model.model_validate_json(body)
        return model.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(
            PARSE_ERROR_MESSAGE,
            errors={'body': e.errors(include_url=False)},
            original_error=e
        ) from e


def parse_limit(limit: Any) -> int:
    """Parse the page size; absent means DEFAULT_PAGE_SIZE."""
    if limit is None or limit == "":
        return DEFAULT_PAGE_SIZE
    if isinstance(limit, bool):
        raise ValidationError("limit must be an integer", {'limit': limit})
    try:
        value = int(limit)
    except (TypeError, ValueError) as e:
        raise ValidationError("limit must be an integer", {'limit': limit}, original_error=e) from e
    if not 1 <= value <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", {'limit': value})
    return value


class UserService:
    """Orchestrates the five user operations over UserReadApi and UserWriteApi."""

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        read_api: Optional[UserReadApi] = None,
        write_api: Optional[UserWriteApi] = None
    ):
        self.config = config or DynamoDBConfig.from_env()
        self.read_api = read_api or UserReadApi(self.config)
        self.write_api = write_api or UserWriteApi(self.config)

    def create_user(self, body: RequestBody) -> HandlerResponse:
        """Create a user unless the email is already registered; 201 with the stored user."""
        try:
            args = parse_body(body, CreateUserArgs)
        except ValidationError as e:
            logger.info(f"Rejected create request: {e.errors}")
            return HandlerResponse.failure(PARSE_ERROR_MESSAGE)

        logger.info(f"Create new user: {args.username}")

        try:
            existing = self.read_api.get_by_email(args.email)
            if existing:
                # The first match decides, duplicates are reported by the read API
                user_id = existing[0].user_id
                return HandlerResponse.failure(
                    f"User record exists with matching email address {{ UserID: {user_id} }}",
                    HTTPStatus.CONFLICT
                )

            user_id = self.write_api.create_user(args)
        except UserStoreError as e:
            return self._store_failure(e, "creating user")

        try:
            user = self.read_api.get_by_id(user_id, consistent_read=True)
        except UserStoreError as e:
            return self._store_failure(e, f"fetching created user {user_id}")

        if user is None:
            logger.error(f"Created user {user_id} could not be read back")
            return HandlerResponse.failure("Error fetching created user", HTTPStatus.INTERNAL_SERVER_ERROR)

        return HandlerResponse.success(user.to_response(), HTTPStatus.CREATED)

    def get_user(self, user_id_or_email: Optional[str]) -> HandlerResponse:
        """Look up a user by ULID, or by email when the value is not a ULID."""
        if not user_id_or_email:
            return HandlerResponse.failure(MISSING_USER_ID_MESSAGE)

        try:
            user = self._find_user(user_id_or_email)
        except UserStoreError as e:
            return self._store_failure(e, f"fetching user {user_id_or_email}")

        if user is None:
            return HandlerResponse.failure(NOT_FOUND_MESSAGE, HTTPStatus.NOT_FOUND)
        return HandlerResponse.success(user.to_response())

    def update_user(self, user_id: Optional[str], body: RequestBody) -> HandlerResponse:
        """Replace the mutable fields of an existing user; 204 on success."""
        if not user_id:
            return HandlerResponse.failure(MISSING_USER_ID_MESSAGE)

        try:
            args = parse_body(body, UpdateUserArgs)
        except ValidationError as e:
            logger.info(f"Rejected update request for {user_id}: {e.errors}")
            return HandlerResponse.failure(PARSE_ERROR_MESSAGE)

        try:
            if self.read_api.get_by_id(user_id) is None:
                return HandlerResponse.failure(NOT_FOUND_MESSAGE, HTTPStatus.NOT_FOUND)
            self.write_api.update_user(user_id, args)
        except UserStoreError as e:
            return self._store_failure(e, f"updating user {user_id}")

        return HandlerResponse.success()

    def delete_user(self, user_id: Optional[str]) -> HandlerResponse:
        """Delete an existing user; 204 on success, 404 if it does not exist."""
        if not user_id:
            return HandlerResponse.failure(MISSING_USER_ID_MESSAGE)

        try:
            if self.read_api.get_by_id(user_id) is None:
                return HandlerResponse.failure(NOT_FOUND_MESSAGE, HTTPStatus.NOT_FOUND)
            self.write_api.delete_user(user_id)
        except UserStoreError as e:
            return self._store_failure(e, f"deleting user {user_id}")

        return HandlerResponse.success()

    def list_users(self, limit: Any = None, pagination_token: Optional[str] = None) -> HandlerResponse:
        """One page of users as ``{"data": [...], "token": ... | null}``."""
        try:
            page_size = parse_limit(limit)
        except ValidationError as e:
            return HandlerResponse.failure(e.message)

        try:
            page = self.read_api.list_users(page_size, pagination_token or None)
        except UserStoreError as e:
            return self._store_failure(e, "listing users")

        return HandlerResponse.success({
            "data": [user.to_response() for user in page.data],
            "token": page.token,
        })

    def _find_user(self, user_id_or_email: str) -> Optional[User]:
        if is_ulid(user_id_or_email):
            return self.read_api.get_by_id(user_id_or_email)

        users = self.read_api.get_by_email(user_id_or_email)
        if not users:
            return None
        return users[0]

    def _store_failure(self, error: UserStoreError, action: str) -> HandlerResponse:
        """Turn an exception raised below the service into an error response."""
        if isinstance(error, ItemNotFoundError):
            return HandlerResponse.failure(NOT_FOUND_MESSAGE, HTTPStatus.NOT_FOUND)

        if isinstance(error, MalformedTokenError):
            logger.info(f"Rejected pagination token while {action}: {error}")
            return HandlerResponse.failure(error.message)

        if isinstance(error, RetryableError):
            logger.warning(f"Store unavailable while {action}: {error}")
            return HandlerResponse.failure(
                "Service temporarily unavailable, please retry",
                HTTPStatus.SERVICE_UNAVAILABLE
            )

        if isinstance(error, (MissingFieldError, ValidationError)):
            logger.error(f"Invalid user data while {action}: {error}")
        else:
            logger.exception(f"Store error while {action}: {error}")
        return HandlerResponse.failure("Error processing user data", HTTPStatus.INTERNAL_SERVER_ERROR)
