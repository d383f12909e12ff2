"""
User CQRS APIs

Queries (Read Operations):
- Primary key lookup by user id
- GSI1 lookup by email
- Paged key-prefix scan with opaque pagination tokens

Commands (Write Operations):
- Conditional create with a system-assigned ULID
- Full-replacement update that recomputes GSI1 keys
- Idempotent delete

Usage:
    read_api = UserReadApi(config)
    write_api = UserWriteApi(config)
"""

from .queries import UserReadApi
from .commands import UserWriteApi

__all__ = [
    "UserReadApi",
    "UserWriteApi",
]
