"""Repository for the append-only account deletion audit log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, Text, bindparam, text
from sqlalchemy.dialects import postgresql
from sqlalchemy.types import TypeDecorator

from admin_deletion.domain.accounts.models import (
    AUDIT_ACTION_ACCOUNT_DELETION,
    AuditLogEntry,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from sqlalchemy.engine import Dialect
    from sqlalchemy.orm import Session
    from sqlalchemy.types import TypeEngine

logger = logging.getLogger(__name__)

AUDIT_TABLE = "admin_deletion_audit_log"


class GroupIdList(TypeDecorator[list[str]]):
    """List of group ids: ``TEXT[]`` on PostgreSQL, JSON text elsewhere."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.ARRAY(Text()))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Sequence[str] | None, dialect: Dialect) -> list[str]:
        return [str(v) for v in value or ()]

    def process_result_value(self, value: Any, dialect: Dialect) -> list[str]:
        return [str(v) for v in value or ()]


class AuditLogRepository:
    """Writes and pages through audit entries on a caller-owned Session.

    Args:
        session: Session whose transaction the statements run in.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert(
        self,
        *,
        deleted_by_email: str,
        target_email: str,
        target_user_id: str,
        group_ids: Sequence[str],
        reason: str,
        deleted_groups: int,
        deleted_companies: int,
        deleted_locations: int,
        ip_address: str,
        created_at: datetime,
    ) -> None:
        """Append one entry. Not committed here."""
        stmt = text(f"""
            INSERT INTO {AUDIT_TABLE}
                (action, deleted_by_email, target_email, target_user_id,
                 group_ids, reason, deleted_groups, deleted_companies,
                 deleted_locations, ip_address, created_at)
            VALUES
                (:action, :deleted_by_email, :target_email, :target_user_id,
                 :group_ids, :reason, :deleted_groups, :deleted_companies,
                 :deleted_locations, :ip_address, :created_at)
        """).bindparams(
            bindparam("group_ids", type_=GroupIdList()),
            bindparam("created_at", type_=DateTime(timezone=True)),
        )
        self._session.execute(
            stmt,
            {
                "action": AUDIT_ACTION_ACCOUNT_DELETION,
                "deleted_by_email": deleted_by_email,
                "target_email": target_email,
                "target_user_id": target_user_id,
                "group_ids": list(group_ids),
                "reason": reason,
                "deleted_groups": deleted_groups,
                "deleted_companies": deleted_companies,
                "deleted_locations": deleted_locations,
                "ip_address": ip_address,
                "created_at": created_at,
            },
        )

    def list_entries(self, limit: int, offset: int) -> list[AuditLogEntry]:
        """Entries newest first; ties on ``created_at`` broken by id."""
        stmt = text(f"""
            SELECT id, action, deleted_by_email, target_email, target_user_id,
                   group_ids, reason, deleted_groups, deleted_companies,
                   deleted_locations, ip_address, created_at
            FROM {AUDIT_TABLE}
            ORDER BY created_at DESC, id DESC
            LIMIT :limit OFFSET :offset
        """).columns(
            group_ids=GroupIdList(),
            created_at=DateTime(timezone=True),
        )
        rows = self._session.execute(stmt, {"limit": limit, "offset": offset})
        return [
            AuditLogEntry(
                id=int(r.id),
                action=r.action or AUDIT_ACTION_ACCOUNT_DELETION,
                deleted_by_email=r.deleted_by_email,
                target_email=r.target_email,
                target_user_id=r.target_user_id,
                group_ids=r.group_ids,
                reason=r.reason or "",
                deleted_groups=int(r.deleted_groups or 0),
                deleted_companies=int(r.deleted_companies or 0),
                deleted_locations=int(r.deleted_locations or 0),
                ip_address=r.ip_address or "",
                created_at=r.created_at,
            )
            for r in rows
        ]

    @classmethod
    def ensure_table_exists(cls, session_factory: Callable[[], Session]) -> None:
        """Create the audit table and its indexes if they do not exist (PostgreSQL)."""
        with session_factory() as session:
            session.execute(
                text(f"""
                CREATE TABLE IF NOT EXISTS {AUDIT_TABLE} (
                    id SERIAL PRIMARY KEY,
                    action VARCHAR(50) NOT NULL DEFAULT '{AUDIT_ACTION_ACCOUNT_DELETION}',
                    deleted_by_email VARCHAR(255) NOT NULL,
                    target_email VARCHAR(255) NOT NULL,
                    target_user_id TEXT NOT NULL,
                    group_ids TEXT[] DEFAULT '{{}}',
                    reason TEXT DEFAULT '',
                    deleted_groups INTEGER DEFAULT 0,
                    deleted_companies INTEGER DEFAULT 0,
                    deleted_locations INTEGER DEFAULT 0,
                    ip_address VARCHAR(45) DEFAULT '',
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );

                CREATE INDEX IF NOT EXISTS idx_audit_deleted_by
                    ON {AUDIT_TABLE} (deleted_by_email);

                CREATE INDEX IF NOT EXISTS idx_audit_target_email
                    ON {AUDIT_TABLE} (target_email);

                CREATE INDEX IF NOT EXISTS idx_audit_created_at
                    ON {AUDIT_TABLE} (created_at DESC);

                CREATE INDEX IF NOT EXISTS idx_audit_target_user_id
                    ON {AUDIT_TABLE} (target_user_id);
            """)
            )
            session.commit()
        logger.info("audit_table_ensured", extra={"table": AUDIT_TABLE})
