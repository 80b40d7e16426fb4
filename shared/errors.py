"""
Shared error handling for the Feature Proxy.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class ProxyException(Exception):
    """Base exception for proxy errors."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class MetricsValidationError(ProxyException):
    """Client metrics payload failed schema validation."""

    status_code = 400

    def __init__(self, message: str = "Invalid metrics payload", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class UpstreamError(ProxyException):
    """Evaluation client failure surfaced explicitly."""

    status_code = 502

    def __init__(self, service: str, message: str = "Upstream error", details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_ERROR", f"{service}: {message}", details)
