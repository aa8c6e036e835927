"""Admin Deletion Foundation Domain -- exceptions and value objects."""

from admin_deletion.foundation.domain.exceptions import (
    AuditWriteFailedError,
    AuthenticationError,
    AuthorizationError,
    CommitFailedError,
    DomainError,
    NotFoundError,
    QueryFailedError,
    StorageError,
    TransactionStartFailedError,
    UpdateFailedError,
    ValidationError,
)
from admin_deletion.foundation.domain.principal import Principal

__all__ = [
    "AuditWriteFailedError",
    "AuthenticationError",
    "AuthorizationError",
    "CommitFailedError",
    "DomainError",
    "NotFoundError",
    "Principal",
    "QueryFailedError",
    "StorageError",
    "TransactionStartFailedError",
    "UpdateFailedError",
    "ValidationError",
]
