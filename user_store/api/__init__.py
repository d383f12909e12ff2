"""
HTTP boundary for the user store: API Gateway adapter and Lambda entry points.
"""

from .adapter import caller_permissions, handle_request, render_response
from .lambdas import (
    create_user_handler,
    delete_user_handler,
    get_user_handler,
    list_users_handler,
    update_user_handler,
)

__all__ = [
    "caller_permissions",
    "handle_request",
    "render_response",
    "create_user_handler",
    "delete_user_handler",
    "get_user_handler",
    "list_users_handler",
    "update_user_handler",
]
