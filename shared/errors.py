"""
Shared error handling for the rate limiter service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class RateLimiterException(Exception):
    """Base exception for rate limiter services."""

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


class BackendConfigurationError(RateLimiterException):
    """A storage backend was selected without its mandatory parameters."""

    def __init__(self, variable: str, backend: str = "redis", details: Optional[Dict[str, Any]] = None):
        self.variable = variable
        self.backend = backend
        super().__init__(
            "BACKEND_CONFIGURATION_ERROR",
            f"{variable} env is required when using {backend} storage backend with env configuration",
            {"variable": variable, "backend": backend, **(details or {})}
        )


class RateLimitError(RateLimiterException):
    """Rate limiting errors."""

    def __init__(self, message: str = "Rate limit exceeded", details: Optional[Dict[str, Any]] = None):
        super().__init__("RATE_LIMIT_ERROR", message, details)
