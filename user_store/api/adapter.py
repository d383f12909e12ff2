"""
API Gateway Adapter

Bridges API Gateway REST (v1 proxy) events and the UserService:

1. Logs the request metadata
2. Reads the caller's permission set from the authorizer context and rejects
   the request with 403 unless it grants the operation's permission
3. Runs the operation and renders its HandlerResponse as a proxy response
"""

import base64
import binascii
import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional

from ..exceptions import ValidationError
from ..models import HandlerResponse, Permission
from ..service import PARSE_ERROR_MESSAGE

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}
UNAUTHORIZED_MESSAGE = "User unauthorized to perform this action"


def request_metadata(event: Dict[str, Any], context: Any = None) -> Dict[str, str]:
    """Request fields worth logging; never the body or the authorizer claims."""
    request_context = event.get("requestContext") or {}
    return {
        "domain_name": request_context.get("domainName", ""),
        "function_name": getattr(context, "function_name", ""),
        "path": request_context.get("path", event.get("path", "")),
        "request_id": request_context.get("requestId", ""),
        "request_time": request_context.get("requestTime", ""),
        "resource_path": request_context.get("resourcePath", event.get("resource", "")),
        "stage": request_context.get("stage", ""),
    }


def caller_permissions(event: Dict[str, Any]) -> Optional[List[str]]:
    """Permission strings from ``requestContext.authorizer.permissions``.

    The authorizer passes them as a JSON array string; a list is accepted as
    is. Returns None when they are missing or cannot be parsed.
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    permissions = authorizer.get("permissions")

    if isinstance(permissions, str):
        try:
            permissions = json.loads(permissions)
        except json.JSONDecodeError:
            logger.warning("Authorizer permissions are not valid JSON")
            return None

    if not isinstance(permissions, list) or not all(isinstance(p, str) for p in permissions):
        logger.warning(f"Authorizer permissions missing or invalid: {type(permissions).__name__}")
        return None
    return permissions


def request_body(event: Dict[str, Any]) -> Optional[str]:
    """Raw request body, base64-decoded when API Gateway encoded it.

    Raises:
        ValidationError: The encoded body is not base64 or not UTF-8 text
    """
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValidationError(PARSE_ERROR_MESSAGE, original_error=e) from e


def json_response(status_code: int, body: Any = None) -> Dict[str, Any]:
    return {
        "statusCode": int(status_code),
        "headers": dict(JSON_HEADERS),
        "body": "" if body is None else json.dumps(body),
    }


def error_response(status_code: int, message: str) -> Dict[str, Any]:
    return json_response(status_code, {"error": message})


def render_response(result: HandlerResponse) -> Dict[str, Any]:
    """Render a tri-state HandlerResponse as an API Gateway proxy response."""
    status = result.resolved_status()

    if 200 <= status < 300:
        if result.body is None:
            return json_response(HTTPStatus.NO_CONTENT)
        return json_response(status, result.body)

    if result.error is None:
        return error_response(HTTPStatus.BAD_REQUEST, "Unhandled Exception")
    return error_response(status, result.error)


def handle_request(
    event: Dict[str, Any],
    context: Any,
    permission: Permission,
    operation: Callable[[], HandlerResponse]
) -> Dict[str, Any]:
    """
    Run ``operation`` for an API Gateway event if the caller holds ``permission``.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context (may be None outside Lambda)
        permission: Permission the operation requires
        operation: Zero-argument callable producing the HandlerResponse

    Returns:
        Proxy response dict with statusCode, headers and a JSON body
    """
    logger.info(f"Request Data: {json.dumps(request_metadata(event, context))}")

    permissions = caller_permissions(event)
    if permissions is None or not permission.granted_by(permissions):
        logger.info(f"Denied {permission.value}: caller permissions {permissions}")
        return error_response(HTTPStatus.FORBIDDEN, UNAUTHORIZED_MESSAGE)

    try:
        result = operation()
    except ValidationError as e:
        logger.info(f"Rejected {permission.value} request: {e}")
        return error_response(HTTPStatus.BAD_REQUEST, e.message)
    except Exception:
        logger.exception(f"Unhandled error in {permission.value} operation")
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")

    response = render_response(result)
    logger.info(f"{permission.value} completed with status {response['statusCode']}")
    return response
