"""Repository for the user -> group -> company -> location hierarchy.

The tables belong to other services and are shared with them, so this
repository only reads live rows and flips soft-delete flags; it never
creates or physically removes anything.

The repository is bound to one Session. Callers decide the transaction
boundary: the lookup runs on a short read session, the deletion runs every
call inside a single transaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, bindparam, text

from admin_deletion.domain.accounts.models import HierarchyNode, UserProfile

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

USER_TABLE = "saastack_user_v1.user_profile"
GROUP_TABLE = "saastack_group_v1.groups"
COMPANY_TABLE = "saastack_company_v1.company"
LOCATION_TABLE = "saastack_location_v1.location"

SOFT_DELETABLE_TABLES = frozenset({USER_TABLE, GROUP_TABLE, COMPANY_TABLE, LOCATION_TABLE})


def live(alias: str | None = None) -> str:
    """SQL predicate selecting rows that are not soft-deleted.

    A NULL flag counts as live. Every read and count goes through this one
    definition so lookups and deletions agree on what exists.
    """
    column = f"{alias}.is_deleted" if alias else "is_deleted"
    return f"({column} = false OR {column} IS NULL)"


class HierarchyRepository:
    """Reads and soft-deletes hierarchy rows on a caller-owned Session.

    Args:
        session: Session whose transaction the statements run in.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # -- Reads --

    def find_user_by_email(self, email: str) -> UserProfile | None:
        """Return the live user whose email matches case-insensitively."""
        row = self._session.execute(
            text(f"""
                SELECT id, email, first_name, last_name
                FROM {USER_TABLE}
                WHERE LOWER(email) = LOWER(:email) AND {live()}
                LIMIT 1
            """),
            {"email": email},
        ).fetchone()
        if row is None:
            return None
        return UserProfile(
            id=str(row.id),
            email=str(row.email),
            first_name=row.first_name or "",
            last_name=row.last_name or "",
        )

    def list_groups_by_owner(self, user_id: str) -> list[HierarchyNode]:
        """Live groups created by the user, newest first."""
        rows = self._session.execute(
            text(f"""
                SELECT id, name, created_by
                FROM {GROUP_TABLE}
                WHERE created_by = :user_id AND {live()}
                ORDER BY created_on DESC
            """),
            {"user_id": user_id},
        )
        return [
            HierarchyNode(id=str(r.id), name=r.name or "", parent=str(r.created_by))
            for r in rows
        ]

    def list_companies(self, group_id: str) -> list[HierarchyNode]:
        """Live companies whose parent is the group."""
        return self._list_children(COMPANY_TABLE, group_id)

    def list_locations(self, company_id: str) -> list[HierarchyNode]:
        """Live locations whose parent is the company."""
        return self._list_children(LOCATION_TABLE, company_id)

    def _list_children(self, table: str, parent_id: str) -> list[HierarchyNode]:
        rows = self._session.execute(
            text(f"""
                SELECT id, name, parent
                FROM {table}
                WHERE parent = :parent AND {live()}
            """),
            {"parent": parent_id},
        )
        return [HierarchyNode(id=str(r.id), name=r.name or "", parent=str(r.parent)) for r in rows]

    def count_companies(self, group_id: str) -> int:
        """Number of live companies under the group."""
        return int(
            self._session.execute(
                text(f"""
                    SELECT COUNT(*)
                    FROM {COMPANY_TABLE}
                    WHERE parent = :group_id AND {live()}
                """),
                {"group_id": group_id},
            ).scalar_one()
        )

    def count_locations(self, group_id: str) -> int:
        """Number of live locations under live companies of the group."""
        return int(
            self._session.execute(
                text(f"""
                    SELECT COUNT(l.id)
                    FROM {LOCATION_TABLE} l
                    INNER JOIN {COMPANY_TABLE} c ON l.parent = c.id
                    WHERE c.parent = :group_id
                      AND {live("l")}
                      AND {live("c")}
                """),
                {"group_id": group_id},
            ).scalar_one()
        )

    # -- Writes --

    def soft_delete(
        self,
        table: str,
        row_id: str,
        *,
        deleted_by: str,
        deleted_on: datetime,
    ) -> None:
        """Flag one row as deleted.

        The row is updated even if it is already flagged, so a repeated
        deletion re-asserts the flag and the latest actor.

        Raises:
            ValueError: If ``table`` is not one of the hierarchy tables.
        """
        if table not in SOFT_DELETABLE_TABLES:
            raise ValueError(f"Not a soft-deletable table: {table}")
        stmt = text(f"""
            UPDATE {table}
            SET is_deleted = true, deleted_by = :deleted_by, deleted_on = :deleted_on
            WHERE id = :id
        """).bindparams(bindparam("deleted_on", type_=DateTime(timezone=True)))
        self._session.execute(
            stmt,
            {"id": row_id, "deleted_by": deleted_by, "deleted_on": deleted_on},
        )
        logger.debug("soft_deleted %s id=%s", table, row_id)
