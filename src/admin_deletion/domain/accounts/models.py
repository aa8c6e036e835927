"""Value objects for the account hierarchy and its deletion audit trail.

The hierarchy is a strict three-level tree owned by a user:
group -> company -> location. Rows are never physically removed; they carry
``is_deleted`` / ``deleted_by`` / ``deleted_on`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

AUDIT_ACTION_ACCOUNT_DELETION = "ACCOUNT_DELETION"
DELETION_SUCCESS_MESSAGE = "Account and selected hierarchy deleted successfully"


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Live user row matched by email."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True, slots=True)
class HierarchyNode:
    """Live group, company or location row.

    ``parent`` is the owning user id for groups, the group id for companies
    and the company id for locations.
    """

    id: str
    name: str
    parent: str = ""


@dataclass(frozen=True, slots=True)
class GroupSummary:
    """A group owned by the looked-up user, with live descendant counts."""

    id: str
    name: str
    company_count: int
    location_count: int


@dataclass(frozen=True, slots=True)
class AccountLookup:
    """Result of looking up a user by email."""

    user_id: str
    email: str
    first_name: str
    last_name: str
    groups: list[GroupSummary] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DeleteAccountCommand:
    """Request to cascade-delete a user and a selection of their groups.

    Attributes:
        email: Target user's email, recorded on the audit entry.
        user_id: Target user's id.
        group_ids: Groups to delete, processed in this order.
        deleted_by: Email of the acting administrator.
        reason: Free-text justification.
        ip_address: Client address of the administrator's request.
    """

    email: str
    user_id: str
    group_ids: tuple[str, ...]
    deleted_by: str
    reason: str = ""
    ip_address: str = ""


@dataclass(frozen=True, slots=True)
class DeleteAccountResult:
    """Counts of rows soft-deleted by one committed deletion."""

    deleted_groups: int
    deleted_companies: int
    deleted_locations: int
    deleted_at: datetime
    success: bool = True
    message: str = DELETION_SUCCESS_MESSAGE


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    """One committed account deletion, as recorded in the audit log."""

    id: int
    action: str
    deleted_by_email: str
    target_email: str
    target_user_id: str
    group_ids: list[str]
    reason: str
    deleted_groups: int
    deleted_companies: int
    deleted_locations: int
    ip_address: str
    created_at: datetime
