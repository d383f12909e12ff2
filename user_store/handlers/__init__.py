"""
Handler Layer for the User Store

Application-layer read and write APIs over the users table, split by
Command Query Responsibility Segregation (CQRS):

- users/queries.py  (read)
- users/commands.py (write)

Architecture:
service (orchestration) -> handlers/ (this layer) -> core/ (infrastructure) -> DynamoDB
handlers/ (this layer) <- models/ (domain models)
"""

from .users import UserReadApi, UserWriteApi

__all__ = [
    'UserReadApi',
    'UserWriteApi',
]
