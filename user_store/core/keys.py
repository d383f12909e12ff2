"""
Single-table key scheme for user items.

Every user lives in its own partition with a sort key equal to the partition
key, and is projected into GSI1 by email and username:

    PK     = USER#<user_id>
    SK     = USER#<user_id>
    GSI1PK = EMAIL#<email>
    GSI1SK = USERNAME#<username>

These helpers are pure; callers pass already validated, non-empty values.
"""

from typing import Dict, Tuple

USER_PREFIX = "USER#"
EMAIL_PREFIX = "EMAIL#"
USERNAME_PREFIX = "USERNAME#"

PARTITION_KEY = "PK"
SORT_KEY = "SK"
GSI1_PARTITION_KEY = "GSI1PK"
GSI1_SORT_KEY = "GSI1SK"


def user_key(user_id: str) -> Tuple[str, str]:
    """Return the (PK, SK) pair of a user item."""
    key = USER_PREFIX + user_id
    return key, key


def primary_key(user_id: str) -> Dict[str, str]:
    """Return the boto3 ``Key`` map for a user item."""
    pk, sk = user_key(user_id)
    return {PARTITION_KEY: pk, SORT_KEY: sk}


def email_index_key(email: str, username: str) -> Tuple[str, str]:
    """Return the (GSI1PK, GSI1SK) pair derived from email and username."""
    return EMAIL_PREFIX + email, USERNAME_PREFIX + username


def index_attributes(email: str, username: str) -> Dict[str, str]:
    gsi1pk, gsi1sk = email_index_key(email, username)
    return {GSI1_PARTITION_KEY: gsi1pk, GSI1_SORT_KEY: gsi1sk}


def is_user_key(pk: str, sk: str) -> bool:
    """Check that a (PK, SK) pair addresses a user item."""
    return pk == sk and pk.startswith(USER_PREFIX) and len(pk) > len(USER_PREFIX)
