"""
Exception hierarchy for the zoning search application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ZoningSearchException(Exception):
    """Base exception for all zoning search application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ZoningSearchException):
    """Raised when a required setting (usually a credential) is missing."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class ValidationError(ZoningSearchException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UpstreamServiceError(ZoningSearchException):
    """Base exception for failures of external HTTP services."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        status_code: int | None = None,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream service error.

        Args:
            message: Error message
            service: Name of the failing service (legistar, reducto, voyage)
            status_code: HTTP status code, when a response was received
            retryable: Whether repeating the call may succeed
            details: Additional context
        """
        details = details or {}
        if service:
            details["service"] = service
        if status_code is not None:
            details["status_code"] = status_code
        self.service = service
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(message, details)


class DiscoveryError(UpstreamServiceError):
    """Raised when legislative record discovery fails."""

    pass


class ExtractionError(UpstreamServiceError):
    """Raised when layout-aware PDF extraction fails."""

    pass


class EmbeddingError(UpstreamServiceError):
    """Raised when embedding generation fails."""

    pass


class VectorStoreError(ZoningSearchException):
    """Raised when chunk store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, search, count)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class InvalidTransitionError(ZoningSearchException):
    """Raised when a pipeline job is moved to a state it cannot reach."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Cannot transition pipeline job from {current} to {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target
