"""
Shared error handling for City Explorer Access Layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from .logging import request_id_var


GENERIC_FAILURE_MESSAGE = "Sorry, something went wrong"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class ExplorerException(Exception):
    """Base exception for City Explorer services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(ExplorerException):
    """Inbound request validation errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConfigurationError(ExplorerException):
    """Invalid static configuration detected at startup."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class NoUpstreamData(ExplorerException):
    """An upstream provider answered successfully but with zero entries."""

    def __init__(self, kind: str, details: Optional[Dict[str, Any]] = None):
        self.kind = kind
        super().__init__("NO_UPSTREAM_DATA", f"{kind}: upstream returned no data", details)


class ProviderError(ExplorerException):
    """Network or HTTP failure from an upstream provider."""

    def __init__(self, provider: str, message: str = "Upstream provider error", details: Optional[Dict[str, Any]] = None):
        self.provider = provider
        super().__init__("PROVIDER_ERROR", f"{provider}: {message}", details)


class UpstreamUnavailable(ProviderError):
    """Upstream provider did not answer within the configured timeout."""

    def __init__(self, provider: str, message: str = "Upstream provider timed out", details: Optional[Dict[str, Any]] = None):
        super().__init__(provider, message, details)
        self.code = "UPSTREAM_UNAVAILABLE"


class StorageError(ExplorerException):
    """Query, insert or delete failure in the storage engine."""

    def __init__(self, operation: str, message: str = "Storage error", details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        super().__init__("STORAGE_ERROR", f"{operation}: {message}", details)
