"""Paged read access to the account deletion audit log."""

from __future__ import annotations

from typing import TYPE_CHECKING

from admin_deletion.domain.accounts._storage import storage_step
from admin_deletion.domain.accounts.infrastructure.audit_log_repository import (
    AuditLogRepository,
)
from admin_deletion.foundation.domain.exceptions import QueryFailedError
from admin_deletion.infra.observability import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from admin_deletion.domain.accounts.models import AuditLogEntry

logger = get_logger(__name__)


def normalize_page(
    limit: object,
    offset: object,
    *,
    default_limit: int,
    max_limit: int,
) -> tuple[int, int]:
    """Coerce raw paging parameters into a usable ``(limit, offset)``.

    A missing, non-integer, non-positive or too large limit becomes
    ``default_limit``. A missing, non-integer or negative offset becomes 0.

    Example:
        >>> normalize_page("500", "-1", default_limit=50, max_limit=100)
        (50, 0)
    """
    return (
        _coerce(limit, default_limit, lambda v: 0 < v <= max_limit),
        _coerce(offset, 0, lambda v: v >= 0),
    )


def _coerce(raw: object, fallback: int, accept: Callable[[int], bool]) -> int:
    if raw is None or isinstance(raw, bool):
        return fallback
    try:
        value = int(str(raw))
    except ValueError:
        return fallback
    return value if accept(value) else fallback


class AuditLogReader:
    """Lists audit entries newest first.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_audit_logs(self, limit: int, offset: int) -> list[AuditLogEntry]:
        """Return one page of entries ordered by ``created_at`` then id, descending.

        Raises:
            QueryFailedError: If the query fails.
        """
        with self._session_factory() as session:
            with storage_step(QueryFailedError, "failed to list audit logs"):
                entries = AuditLogRepository(session).list_entries(limit, offset)

        logger.info("audit_logs_listed", limit=limit, offset=offset, count=len(entries))
        return entries
