"""Domain exceptions for the platform.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class PlatformException(Exception):
    """Base exception for all platform application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PlatformException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class TenantNotFoundException(PlatformException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str, role: str | None = None) -> None:
        """Initialize with the missing tenant identifier.

        Args:
            tenant_id: The tenant ID that was not found.
            role: Optional side of a copy operation ('source' or 'target').
        """
        label = f"{role.capitalize()} tenant" if role else "Tenant"
        details: dict[str, Any] = {"tenant_id": tenant_id}
        if role:
            details["role"] = role
        super().__init__(
            f"{label} not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            details,
        )


class CopyTimeoutException(PlatformException):
    """Raised when a tenant copy exceeds its transaction timeout. Nothing is copied."""

    def __init__(
        self, source_tenant_id: str, target_tenant_id: str, timeout_seconds: float
    ) -> None:
        """Initialize with both tenants and the timeout that elapsed.

        Args:
            source_tenant_id: Tenant the data was read from.
            target_tenant_id: Tenant the data was being written to.
            timeout_seconds: Configured transaction timeout.
        """
        super().__init__(
            f"Tenant copy exceeded {timeout_seconds:g}s and was rolled back",
            "COPY_TIMEOUT",
            {
                "source_tenant_id": source_tenant_id,
                "target_tenant_id": target_tenant_id,
                "timeout_seconds": timeout_seconds,
            },
        )


class SqlNotConfiguredException(PlatformException):
    """Raised when an operation requires the database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
