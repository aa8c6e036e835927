"""Admin REST API for account lookup, cascade deletion and the audit log.

Every route requires an authenticated admin (see JWTAuthMiddleware). The
actor recorded on deletions is always the authenticated principal; a
``deleted_by`` value in the request body is ignored.
"""

from __future__ import annotations

import re
from datetime import datetime  # noqa: TC003 -- pydantic needs datetime at runtime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import AfterValidator, BaseModel, Field

from admin_deletion.domain.accounts.audit import AuditLogReader, normalize_page
from admin_deletion.domain.accounts.cascade_deletion import CascadeDeletionService
from admin_deletion.domain.accounts.hierarchy import HierarchyReader
from admin_deletion.domain.accounts.models import (
    AccountLookup,
    AuditLogEntry,
    DeleteAccountCommand,
    DeleteAccountResult,
)
from admin_deletion.domain.accounts.settings import AccountSettings, get_account_settings
from admin_deletion.infra.auth.dependencies import CurrentPrincipal
from admin_deletion.infra.persistence.database import SessionFactory

router = APIRouter(prefix="/api", tags=["accounts"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

AccountConfig = Annotated[AccountSettings, Depends(get_account_settings)]


# -- Request / Response models ------------------------------------------------


def _validate_email(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise ValueError("must be a valid email address")
    return value


Email = Annotated[str, AfterValidator(_validate_email)]


class AccountLookupRequest(BaseModel):
    email: Email


class DeleteAccountRequest(BaseModel):
    email: Email
    user_id: str = Field(min_length=1)
    group_ids: list[str] = Field(min_length=1)
    reason: str = ""


class GroupInfo(BaseModel):
    id: str
    name: str
    company_count: int
    location_count: int


class AccountLookupResponse(BaseModel):
    user_id: str
    email: str
    first_name: str
    last_name: str
    groups: list[GroupInfo]


class DeleteAccountResponse(BaseModel):
    success: bool
    message: str
    deleted_groups: int
    deleted_companies: int
    deleted_locations: int
    deleted_at: datetime


class AuditLogResponse(BaseModel):
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


class AuditLogListResponse(BaseModel):
    logs: list[AuditLogResponse]
    limit: int
    offset: int


class MeResponse(BaseModel):
    email: str
    name: str


# -- Endpoints ----------------------------------------------------------------


@router.get("/auth/me")
def me(principal: CurrentPrincipal) -> MeResponse:
    """Identity of the signed-in admin."""
    return MeResponse(email=principal.email, name=principal.name)


@router.post("/account/lookup")
def lookup_account(
    body: AccountLookupRequest,
    session_factory: SessionFactory,
    principal: CurrentPrincipal,
) -> AccountLookupResponse:
    """Find a live user by email and summarize the groups they own."""
    return _lookup_response(HierarchyReader(session_factory).lookup(body.email))


@router.post("/account/delete")
def delete_account(
    body: DeleteAccountRequest,
    request: Request,
    session_factory: SessionFactory,
    principal: CurrentPrincipal,
) -> DeleteAccountResponse:
    """Soft-delete the user and the selected groups with all their descendants."""
    command = DeleteAccountCommand(
        email=body.email,
        user_id=body.user_id,
        group_ids=tuple(body.group_ids),
        deleted_by=principal.email,
        reason=body.reason,
        ip_address=request.client.host if request.client else "",
    )
    return _delete_response(CascadeDeletionService(session_factory).delete_account(command))


@router.get("/account/audit-logs")
def list_audit_logs(
    session_factory: SessionFactory,
    settings: AccountConfig,
    principal: CurrentPrincipal,
    limit: Annotated[str | None, Query()] = None,
    offset: Annotated[str | None, Query()] = None,
) -> AuditLogListResponse:
    """Page through past deletions, newest first.

    Out-of-range or non-numeric ``limit`` / ``offset`` fall back to defaults
    instead of failing the request.
    """
    page_limit, page_offset = normalize_page(
        limit,
        offset,
        default_limit=settings.audit_default_limit,
        max_limit=settings.audit_max_limit,
    )
    entries = AuditLogReader(session_factory).list_audit_logs(page_limit, page_offset)
    return AuditLogListResponse(
        logs=[_audit_response(e) for e in entries],
        limit=page_limit,
        offset=page_offset,
    )


# -- Helpers ------------------------------------------------------------------


def _lookup_response(lookup: AccountLookup) -> AccountLookupResponse:
    return AccountLookupResponse(
        user_id=lookup.user_id,
        email=lookup.email,
        first_name=lookup.first_name,
        last_name=lookup.last_name,
        groups=[
            GroupInfo(
                id=g.id,
                name=g.name,
                company_count=g.company_count,
                location_count=g.location_count,
            )
            for g in lookup.groups
        ],
    )


def _delete_response(result: DeleteAccountResult) -> DeleteAccountResponse:
    return DeleteAccountResponse(
        success=result.success,
        message=result.message,
        deleted_groups=result.deleted_groups,
        deleted_companies=result.deleted_companies,
        deleted_locations=result.deleted_locations,
        deleted_at=result.deleted_at,
    )


def _audit_response(entry: AuditLogEntry) -> AuditLogResponse:
    return AuditLogResponse(
        id=entry.id,
        action=entry.action,
        deleted_by_email=entry.deleted_by_email,
        target_email=entry.target_email,
        target_user_id=entry.target_user_id,
        group_ids=list(entry.group_ids),
        reason=entry.reason,
        deleted_groups=entry.deleted_groups,
        deleted_companies=entry.deleted_companies,
        deleted_locations=entry.deleted_locations,
        ip_address=entry.ip_address,
        created_at=entry.created_at,
    )
