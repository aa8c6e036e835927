"""Admin Deletion Foundation Application -- contribution types and discovery."""

from admin_deletion.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AUDIT_TABLE,
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LIFESPAN_PRIORITY_PERSISTENCE,
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
)
from admin_deletion.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
)

__all__ = [
    "LIFESPAN_PRIORITY_AUDIT_TABLE",
    "LIFESPAN_PRIORITY_OBSERVABILITY",
    "LIFESPAN_PRIORITY_PERSISTENCE",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "discover",
]
