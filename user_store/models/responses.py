"""
Handler results

The request orchestrator never builds transport responses itself. Each
operation returns a HandlerResponse in one of three shapes:

- success with a body (``body`` set, ``error`` None)
- success without a body (both None, rendered as 204)
- error with a message and a status code (``error`` set)

The API adapter renders it into an API Gateway proxy response.
"""

from http import HTTPStatus
from typing import Any, Optional

from pydantic import BaseModel, Field


class HandlerResponse(BaseModel):
    """Tri-state result of a user operation."""

    body: Optional[Any] = Field(None, description="JSON-serializable payload")
    error: Optional[str] = Field(None, description="Message shown to the caller")
    status_code: Optional[int] = Field(None, description="Explicit status; derived when None")

    @classmethod
    def success(cls, body: Any = None, status_code: Optional[int] = None) -> "HandlerResponse":
        return cls(body=body, status_code=status_code)

    @classmethod
    def failure(cls, message: str, status_code: int = HTTPStatus.BAD_REQUEST) -> "HandlerResponse":
        return cls(error=message, status_code=int(status_code))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def resolved_status(self) -> int:
        """Status to send: explicit if set, else 400 for errors, 200 with a body, 204 without."""
        if self.status_code is not None:
            return self.status_code
        if self.is_error:
            return HTTPStatus.BAD_REQUEST
        if self.body is None:
            return HTTPStatus.NO_CONTENT
        return HTTPStatus.OK
