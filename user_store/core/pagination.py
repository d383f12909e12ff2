"""
Opaque continuation tokens for paged scans.

A token carries the (PK, SK) of the last item returned by a page so that the
next, stateless invocation can resume right after it. The wire format is

    <hex(PK)>.<hex(SK)>

Hex keeps the token URL-safe without a special base64 alphabet. Tokens are
neither signed nor encrypted: decode() only guarantees a well-formed key pair,
so callers must check that the key belongs to the scan they are resuming.
"""

import binascii
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from ..exceptions import MalformedTokenError, MissingFieldError
from .keys import PARTITION_KEY, SORT_KEY

TOKEN_SEPARATOR = "."

T = TypeVar("T")


def _decode_part(token: str, part: str, name: str) -> str:
    try:
        raw = binascii.unhexlify(part)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(token, f"{name} is not valid hex", e) from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedTokenError(token, f"{name} is not valid UTF-8", e) from e


class PaginationToken(BaseModel):
    """Resume point of a paged scan: the key of the last returned item."""

    pk: str = Field(..., description="Partition key of the last returned item")
    sk: str = Field(..., description="Sort key of the last returned item")

    def encode(self) -> str:
        """Render the token as ``<hex(pk)>.<hex(sk)>``."""
        return TOKEN_SEPARATOR.join([
            self.pk.encode("utf-8").hex(),
            self.sk.encode("utf-8").hex(),
        ])

    @classmethod
    def decode(cls, token: str) -> "PaginationToken":
        """Parse an encoded token.

        Raises:
            MalformedTokenError: separator missing, either half not hex,
                or the decoded bytes are not UTF-8
        """
        hex_pk, separator, hex_sk = token.partition(TOKEN_SEPARATOR)
        if not separator:
            raise MalformedTokenError(token, "missing separator")

        return cls(
            pk=_decode_part(token, hex_pk, "partition key"),
            sk=_decode_part(token, hex_sk, "sort key"),
        )

    @classmethod
    def from_last_evaluated_key(cls, key: Dict[str, Any]) -> "PaginationToken":
        """Build a token from a DynamoDB ``LastEvaluatedKey``."""
        for field in (PARTITION_KEY, SORT_KEY):
            if not isinstance(key.get(field), str):
                raise MissingFieldError(field, key)
        return cls(pk=key[PARTITION_KEY], sk=key[SORT_KEY])

    def to_exclusive_start_key(self) -> Dict[str, str]:
        """Render the token as a DynamoDB ``ExclusiveStartKey``."""
        return {PARTITION_KEY: self.pk, SORT_KEY: self.sk}


def encode_token(pk: str, sk: str) -> str:
    return PaginationToken(pk=pk, sk=sk).encode()


def decode_token(token: str) -> PaginationToken:
    return PaginationToken.decode(token)


class PaginatedResult(BaseModel, Generic[T]):
    """One page of results plus the token to fetch the next page."""

    data: List[T] = Field(default_factory=list)
    token: Optional[str] = Field(None, description="Continuation token, None on the last page")
