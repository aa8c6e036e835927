"""Accounts infrastructure -- SQL repositories for the hierarchy and audit log."""

from admin_deletion.domain.accounts.infrastructure.audit_log_repository import (
    AUDIT_TABLE,
    AuditLogRepository,
    GroupIdList,
)
from admin_deletion.domain.accounts.infrastructure.hierarchy_repository import (
    COMPANY_TABLE,
    GROUP_TABLE,
    LOCATION_TABLE,
    USER_TABLE,
    HierarchyRepository,
    live,
)

__all__ = [
    "AUDIT_TABLE",
    "COMPANY_TABLE",
    "GROUP_TABLE",
    "LOCATION_TABLE",
    "USER_TABLE",
    "AuditLogRepository",
    "GroupIdList",
    "HierarchyRepository",
    "live",
]
