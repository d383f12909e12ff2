"""
Core infrastructure components for the users table.

This module contains the foundational components used by the read/write APIs:
- TableGateway: Thin wrapper over boto3 DynamoDB operations
- Key scheme helpers for the single-table layout
- Pagination token codec
"""

from .table_gateway import TableGateway, create_table_gateway, map_dynamodb_error
from .pagination import PaginatedResult, PaginationToken, decode_token, encode_token
from . import keys

__all__ = [
    "TableGateway",
    "create_table_gateway",
    "map_dynamodb_error",
    "PaginatedResult",
    "PaginationToken",
    "decode_token",
    "encode_token",
    "keys",
]
