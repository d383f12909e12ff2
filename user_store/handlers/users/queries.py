"""
User Read API

Read access patterns over the single users table:

- get_by_id:    GetItem on (USER#<id>, USER#<id>)
- get_by_email: Query on GSI1, GSI1PK = EMAIL#<email>, GSI1SK begins_with USERNAME#
- list_users:   paged range scan over every USER# key, resumable with an
                opaque pagination token

Store failures are raised by the TableGateway as domain exceptions and
propagate unchanged.
"""

import logging
from typing import List, Optional

from boto3.dynamodb.conditions import Attr, Key

from ...config import DynamoDBConfig
from ...core import PaginatedResult, PaginationToken, TableGateway, create_table_gateway, keys
from ...exceptions import MalformedTokenError, ValidationError
from ...models import User

logger = logging.getLogger(__name__)


class UserReadApi:
    """
    Read-only API for user lookups and listings.

    Uses the DynamoDB access patterns of the single-table layout:
    - Primary key lookups with get_item
    - GSI1 queries for email lookups
    - Key-prefix range scans with ExclusiveStartKey for listings
    """

    def __init__(self, config: DynamoDBConfig, gateway: Optional[TableGateway] = None):
        """Initialize read API with configuration."""
        self.config = config
        self.gateway = gateway or create_table_gateway(config, config.users_table)

    def get_by_id(self, user_id: str, consistent_read: bool = False) -> Optional[User]:
        """
        Get a user by id.

        DynamoDB Operation: GetItem with primary key

        Args:
            user_id: ULID of the user
            consistent_read: Use a strongly consistent read (read-after-write)

        Returns:
            User if found, None otherwise
        """
        item = self.gateway.get_item(keys.primary_key(user_id), consistent_read=consistent_read)
        if item is None:
            return None
        return User.from_dynamodb_item(item)

    def get_by_email(self, email: str) -> Optional[List[User]]:
        """
        Get every user stored under an email address.

        DynamoDB Operation: Query on GSI1
        GSI Structure: PK=GSI1PK (EMAIL#<email>), SK=GSI1SK (USERNAME#<username>)

        Email uniqueness is only checked at create time, so more than one
        user can come back; callers decide what to do with duplicates.

        Returns:
            List of users (one or more), or None when nothing matches
        """
        gsi1pk, _ = keys.email_index_key(email, "")
        query_kwargs = {
            'IndexName': self.config.email_index_name,
            'KeyConditionExpression': (
                Key(keys.GSI1_PARTITION_KEY).eq(gsi1pk)
                & Key(keys.GSI1_SORT_KEY).begins_with(keys.USERNAME_PREFIX)
            ),
        }

        users: List[User] = []
        while True:
            response = self.gateway.query(**query_kwargs)
            users.extend(User.from_dynamodb_item(item) for item in response.get('Items', []))

            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            query_kwargs['ExclusiveStartKey'] = last_key

        if not users:
            return None
        if len(users) > 1:
            logger.warning(f"{len(users)} users share one email address: {[u.user_id for u in users]}")
        return users

    def list_users(
        self,
        limit: int,
        pagination_token: Optional[str] = None
    ) -> PaginatedResult[User]:
        """
        List users one page at a time.

        DynamoDB Operation: Scan bounded by Limit, restricted to user keys with
        begins_with(PK, "USER#") AND begins_with(SK, "USER#").

        Every user owns its partition, so no single partition holds all users
        and a partition-scoped Query cannot list them; the full-table range
        scan is the only listing this key scheme supports.

        Args:
            limit: Maximum items to evaluate for this page
            pagination_token: Token returned by the previous page

        Returns:
            PaginatedResult with the page of users and the next token
            (None once the scan is exhausted)

        Raises:
            ValidationError: limit is not positive
            MalformedTokenError: token cannot be decoded or does not address a user item
        """
        if limit < 1:
            raise ValidationError("Page size limit must be at least 1", {'limit': limit})

        scan_kwargs = {
            'Limit': limit,
            'FilterExpression': (
                Attr(keys.PARTITION_KEY).begins_with(keys.USER_PREFIX)
                & Attr(keys.SORT_KEY).begins_with(keys.USER_PREFIX)
            ),
        }

        if pagination_token:
            start = PaginationToken.decode(pagination_token)
            # Unsigned tokens are untrusted: only resume inside the user key space
            if not keys.is_user_key(start.pk, start.sk):
                raise MalformedTokenError(pagination_token, "key does not address a user item")
            scan_kwargs['ExclusiveStartKey'] = start.to_exclusive_start_key()

        response = self.gateway.scan(**scan_kwargs)

        users = [User.from_dynamodb_item(item) for item in response.get('Items', [])]

        next_token = None
        last_key = response.get('LastEvaluatedKey')
        if last_key:
            next_token = PaginationToken.from_last_evaluated_key(last_key).encode()

        logger.debug(f"Listed {len(users)} users (more: {next_token is not None})")
        return PaginatedResult[User](data=users, token=next_token)
