"""
Error handling for the secret cache.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class SecretCacheException(Exception):
    """Base exception for secret cache errors."""

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


class SecretStoreError(SecretCacheException):
    """Remote secret store errors."""

    def __init__(self, operation: str, message: str = "Secret store error", details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        super().__init__("SECRET_STORE_ERROR", f"{operation}: {message}", details)


class RefreshInterruptedError(SecretCacheException):
    """Raised when a forced refresh is interrupted while waiting."""

    def __init__(self, message: str = "Refresh interrupted", details: Optional[Dict[str, Any]] = None):
        super().__init__("REFRESH_INTERRUPTED", message, details)


class CacheConfigurationError(SecretCacheException):
    """Invalid cache configuration."""

    def __init__(self, message: str = "Invalid cache configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
