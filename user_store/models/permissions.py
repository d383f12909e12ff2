from enum import Enum
from typing import Iterable


class Permission(str, Enum):
    """Permission strings granted by the API authorizer."""

    USER_GET = "user:get"
    USER_LIST = "user:list"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"

    def granted_by(self, permissions: Iterable[str]) -> bool:
        return self.value in set(permissions)
