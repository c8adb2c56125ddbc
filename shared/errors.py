"""
Shared error handling for the Identity Access service.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

UNAUTHENTICATED_MESSAGE = "Missing or invalid authentication token"


class ErrorDetail(BaseModel):
    """Caller-visible error body."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error envelope: ``{"error": {"code": ..., "message": ...}}``."""

    error: ErrorDetail


class ServiceException(Exception):
    """Base exception for service errors.

    ``details`` is for server-side logs only and is never rendered to the
    caller.
    """

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=ErrorDetail(code=self.code, message=self.message))


class AuthenticationError(ServiceException):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = UNAUTHENTICATED_MESSAGE, details: Optional[Dict[str, Any]] = None):
        super().__init__("UNAUTHENTICATED", message, details)


class ExternalServiceError(ServiceException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)
