"""
Lambda entry points, one per user operation.

Route                                   Handler               Permission
POST   /users                           create_user_handler   user:create
GET    /users/{userId}                  get_user_handler      user:get
PUT    /users/{userId}                  update_user_handler   user:update
DELETE /users/{userId}                  delete_user_handler   user:delete
GET    /users?limit=&paginationToken=   list_users_handler    user:list
"""

from typing import Any, Dict, Optional

from ..config import DynamoDBConfig, configure_logging
from ..models import Permission
from ..service import UserService
from .adapter import handle_request, request_body

_service: Optional[UserService] = None


def get_service() -> UserService:
    """UserService shared by invocations of a warm Lambda container."""
    global _service
    if _service is None:
        config = DynamoDBConfig.from_env()
        configure_logging(config)
        _service = UserService(config)
    return _service


def _path_user_id(event: Dict[str, Any]) -> Optional[str]:
    return (event.get("pathParameters") or {}).get("userId")


def _query_parameter(event: Dict[str, Any], name: str) -> Optional[str]:
    return (event.get("queryStringParameters") or {}).get(name)


def create_user_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handle_request(
        event, context, Permission.USER_CREATE,
        lambda: get_service().create_user(request_body(event))
    )


def get_user_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handle_request(
        event, context, Permission.USER_GET,
        lambda: get_service().get_user(_path_user_id(event))
    )


def update_user_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handle_request(
        event, context, Permission.USER_UPDATE,
        lambda: get_service().update_user(_path_user_id(event), request_body(event))
    )


def delete_user_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handle_request(
        event, context, Permission.USER_DELETE,
        lambda: get_service().delete_user(_path_user_id(event))
    )


def list_users_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handle_request(
        event, context, Permission.USER_LIST,
        lambda: get_service().list_users(
            _query_parameter(event, "limit"),
            _query_parameter(event, "paginationToken")
        )
    )
