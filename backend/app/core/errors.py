"""Error taxonomy shared by repositories, services and routes."""
from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base application error rendered as an error envelope."""

    code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, details: Optional[str] = None, *, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.details:
            return f"Error {self.code}: {self.message} - {self.details}"
        return f"Error {self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidArgumentError(ServiceError):
    code = 400
    default_message = "Bad request"


class NotFoundError(ServiceError):
    code = 404
    default_message = "Resource not found"


class ConflictError(ServiceError):
    code = 409
    default_message = "Conflict"


class InternalError(ServiceError):
    code = 500
    default_message = "Internal server error"


class RequestCancelledError(ServiceError):
    code = 503
    default_message = "Request cancelled"

    def __init__(self, details: Optional[str] = "The client cancelled the request.", **kwargs: Any) -> None:
        super().__init__(details, **kwargs)


class RequestTimedOutError(ServiceError):
    code = 504
    default_message = "Request timed out"

    def __init__(self, details: Optional[str] = "The request exceeded its allotted time.", **kwargs: Any) -> None:
        super().__init__(details, **kwargs)
