"""
User Write API

Write operations for user items:
- create_user: PutItem of the full item, guarded by attribute_not_exists(PK)
- update_user: UpdateItem replacing every mutable attribute (SET/REMOVE),
  guarded by attribute_exists(PK)
- delete_user: unconditional DeleteItem, idempotent

Writes are last-writer-wins; there is no version check between concurrent
updates to the same user.
"""

import logging
from typing import Optional

from boto3.dynamodb.conditions import Attr
from ulid import ULID

from ...config import DynamoDBConfig
from ...core import TableGateway, create_table_gateway, keys
from ...exceptions import ConflictError, ItemNotFoundError
from ...models import CreateUserArgs, UpdateUserArgs
from ...utils import build_update_expression, utc_now

logger = logging.getLogger(__name__)


class UserWriteApi:
    """
    Write-only API for user mutations.

    Callers are expected to have checked existence and email uniqueness
    first; the conditions here only stop writes from silently creating or
    resurrecting items.
    """

    def __init__(self, config: DynamoDBConfig, gateway: Optional[TableGateway] = None):
        """Initialize write API with configuration."""
        self.config = config
        self.gateway = gateway or create_table_gateway(config, config.users_table)

    def create_user(self, user_data: CreateUserArgs) -> str:
        """
        Create a new user with a system-assigned ULID.

        DynamoDB Operation: PutItem with ConditionExpression
        Condition: attribute_not_exists(PK) - never overwrites an existing user

        Args:
            user_data: Validated CreateUserArgs DTO

        Returns:
            The new user id
        """
        user_id = str(ULID())
        user = user_data.to_user(user_id, utc_now())

        self.gateway.put_item(
            user.to_dynamodb_item(),
            condition_expression=Attr(keys.PARTITION_KEY).not_exists()
        )
        logger.info(f"Created user: {user_id}")
        return user_id

    def update_user(self, user_id: str, user_data: UpdateUserArgs) -> bool:
        """
        Replace every mutable attribute of a user.

        DynamoDB Operation: UpdateItem with SET/REMOVE and ConditionExpression
        Condition: attribute_exists(PK) - never creates a partial item

        Optional attributes missing from ``user_data`` are removed. The GSI1
        keys are rewritten from the new email and username.

        Returns:
            True once the update is stored

        Raises:
            ItemNotFoundError: the user does not exist (e.g. deleted concurrently)
        """
        key = keys.primary_key(user_id)
        set_values, remove_attributes = user_data.to_update(utc_now())
        update_expression, names, values = build_update_expression(set_values, remove_attributes)

        try:
            self.gateway.update_item(
                key=key,
                update_expression=update_expression,
                expression_attribute_values=values,
                expression_attribute_names=names,
                condition_expression=Attr(keys.PARTITION_KEY).exists()
            )
        except ConflictError as e:
            raise ItemNotFoundError(self.gateway.table_name, key, original_error=e) from e

        logger.info(f"Updated user {user_id}: removed {remove_attributes}")
        return True

    def delete_user(self, user_id: str) -> bool:
        """
        Delete a user.

        DynamoDB Operation: DeleteItem without condition. Deleting a user that
        does not exist succeeds and leaves the table unchanged.

        Returns:
            True
        """
        self.gateway.delete_item(key=keys.primary_key(user_id))
        logger.info(f"Deleted user: {user_id}")
        return True
