"""Accounts domain -- lookup and cascade soft-deletion of user accounts.

Public API:
    HierarchyReader: Find a user by email with their groups and counts
    HierarchyCounter: Live company / location counts under a group
    CascadeDeletionService: Transactional soft-delete of user and groups
    AuditLogReader: Paged audit trail of committed deletions
"""

from admin_deletion.domain.accounts.audit import AuditLogReader, normalize_page
from admin_deletion.domain.accounts.cascade_deletion import CascadeDeletionService
from admin_deletion.domain.accounts.hierarchy import HierarchyCounter, HierarchyReader
from admin_deletion.domain.accounts.models import (
    AccountLookup,
    AuditLogEntry,
    DeleteAccountCommand,
    DeleteAccountResult,
    GroupSummary,
    HierarchyNode,
    UserProfile,
)
from admin_deletion.domain.accounts.settings import AccountSettings, get_account_settings

__all__ = [
    "AccountLookup",
    "AccountSettings",
    "AuditLogEntry",
    "AuditLogReader",
    "CascadeDeletionService",
    "DeleteAccountCommand",
    "DeleteAccountResult",
    "GroupSummary",
    "HierarchyCounter",
    "HierarchyNode",
    "HierarchyReader",
    "UserProfile",
    "get_account_settings",
    "normalize_page",
]
