"""Domain exception hierarchy for type-safe error handling.

Exceptions carry a machine-readable error code and structured context so the
API layer can render consistent problem responses and log the same fields.

Storage failures form their own branch under :class:`StorageError`. Each
subclass names the phase of a unit of work that failed; all of them are
rendered to clients as one opaque internal error.

Example:
    >>> from admin_deletion.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("User", "someone@example.com")
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AuditWriteFailedError",
    "AuthenticationError",
    "AuthorizationError",
    "CommitFailedError",
    "DomainError",
    "NotFoundError",
    "QueryFailedError",
    "StorageError",
    "TransactionStartFailedError",
    "UpdateFailedError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (identifiers, field names).

    Example:
        >>> raise DomainError("Operation failed", context={"user_id": "u-1"})
        DomainError: Operation failed (user_id=u-1)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Example:
        >>> raise NotFoundError("User", "someone@example.com")
        NotFoundError: User not found: someone@example.com
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "User").
            resource_id: Identifier used for the lookup.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input fails domain validation rules.

    Maps to HTTP 422 Unprocessable Entity.

    Example:
        >>> raise ValidationError("group_ids", "At least one group must be selected")
        ValidationError: Validation failed for 'group_ids': At least one group must be selected
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation.
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class AuthenticationError(DomainError):
    """Raised when authentication fails (missing, expired, invalid token).

    Maps to HTTP 401 Unauthorized with a ``WWW-Authenticate`` header.

    Attributes:
        error_code: Machine-readable error code (e.g., "MISSING_TOKEN").
        auth_error: RFC 6750 error code for the WWW-Authenticate header.
    """

    error_code: str = "AUTHENTICATION_ERROR"

    def __init__(
        self,
        message: str,
        auth_error: str = "invalid_token",
        error_code: str = "AUTHENTICATION_ERROR",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.auth_error = auth_error
        self.error_code = error_code
        super().__init__(message, context)


class AuthorizationError(DomainError):
    """Raised when an authenticated principal may not perform an operation.

    Maps to HTTP 403 Forbidden.
    """

    error_code: str = "AUTHORIZATION_ERROR"


class StorageError(DomainError):
    """Base class for relational store failures.

    Maps to HTTP 500. The message and context are logged but never returned
    to the client.
    """

    error_code: str = "STORAGE_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, context)


class TransactionStartFailedError(StorageError):
    """Raised when a database transaction cannot be opened."""

    error_code: str = "TRANSACTION_START_FAILED"


class QueryFailedError(StorageError):
    """Raised when a read query fails."""

    error_code: str = "QUERY_FAILED"


class UpdateFailedError(StorageError):
    """Raised when a soft-delete update fails."""

    error_code: str = "UPDATE_FAILED"


class AuditWriteFailedError(StorageError):
    """Raised when the audit entry cannot be inserted."""

    error_code: str = "AUDIT_WRITE_FAILED"


class CommitFailedError(StorageError):
    """Raised when the transaction commit fails."""

    error_code: str = "COMMIT_FAILED"
