"""Cascade soft-deletion of a user account and the groups it owns.

Every flag flip and the audit entry happen in one database transaction. A
failure at any step rolls the whole transaction back, so either the user,
every selected group with its live companies and locations, and one audit
row are all written, or nothing is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from admin_deletion.domain.accounts._storage import storage_step
from admin_deletion.domain.accounts.infrastructure.audit_log_repository import (
    AuditLogRepository,
)
from admin_deletion.domain.accounts.infrastructure.hierarchy_repository import (
    COMPANY_TABLE,
    GROUP_TABLE,
    LOCATION_TABLE,
    USER_TABLE,
    HierarchyRepository,
)
from admin_deletion.domain.accounts.models import DeleteAccountCommand, DeleteAccountResult
from admin_deletion.foundation.domain.exceptions import (
    AuditWriteFailedError,
    CommitFailedError,
    QueryFailedError,
    StorageError,
    TransactionStartFailedError,
    UpdateFailedError,
    ValidationError,
)
from admin_deletion.infra.observability import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Tally:
    groups: int = 0
    companies: int = 0
    locations: int = 0


class CascadeDeletionService:
    """Soft-deletes a user, the selected groups, and everything under them.

    Order within the transaction:
    1. For each group id, in the order given: each live company's live
       locations, then the company, then the group itself
    2. The user row
    3. One audit entry carrying the three counts
    4. Commit

    Children are enumerated inside the transaction, so the counts reported
    are exactly the rows flipped by this transaction. All rows and the audit
    entry share one timestamp.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
        clock: Source of the deletion timestamp. Defaults to current UTC time.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def delete_account(self, command: DeleteAccountCommand) -> DeleteAccountResult:
        """Run the cascade and return what it deleted.

        Raises:
            ValidationError: If no group ids are given.
            StorageError: A phase-specific subclass if any step fails. Nothing
                is persisted in that case.
        """
        if not command.group_ids:
            raise ValidationError("group_ids", "At least one group must be selected")

        deleted_at = self._clock()
        logger.info(
            "account_deletion_started",
            user_id=command.user_id,
            deleted_by=command.deleted_by,
            group_count=len(command.group_ids),
        )

        try:
            tally = self._delete_in_transaction(command, deleted_at)
        except StorageError as exc:
            logger.error(
                "account_deletion_failed",
                user_id=command.user_id,
                deleted_by=command.deleted_by,
                phase=exc.error_code,
                error=str(exc),
            )
            raise

        logger.info(
            "account_deletion_completed",
            user_id=command.user_id,
            deleted_by=command.deleted_by,
            deleted_groups=tally.groups,
            deleted_companies=tally.companies,
            deleted_locations=tally.locations,
        )
        return DeleteAccountResult(
            deleted_groups=tally.groups,
            deleted_companies=tally.companies,
            deleted_locations=tally.locations,
            deleted_at=deleted_at,
        )

    def _delete_in_transaction(
        self,
        command: DeleteAccountCommand,
        deleted_at: datetime,
    ) -> _Tally:
        with self._session_factory() as session:
            with storage_step(TransactionStartFailedError, "failed to start transaction"):
                session.begin()
                session.connection()

            try:
                tally = self._cascade(HierarchyRepository(session), command, deleted_at)

                with storage_step(AuditWriteFailedError, "failed to create audit log"):
                    AuditLogRepository(session).insert(
                        deleted_by_email=command.deleted_by,
                        target_email=command.email,
                        target_user_id=command.user_id,
                        group_ids=command.group_ids,
                        reason=command.reason,
                        deleted_groups=tally.groups,
                        deleted_companies=tally.companies,
                        deleted_locations=tally.locations,
                        ip_address=command.ip_address,
                        created_at=deleted_at,
                    )

                with storage_step(CommitFailedError, "failed to commit transaction"):
                    session.commit()
            except Exception:
                session.rollback()
                raise

        return tally

    @staticmethod
    def _cascade(
        repository: HierarchyRepository,
        command: DeleteAccountCommand,
        deleted_at: datetime,
    ) -> _Tally:
        tally = _Tally()

        def soft_delete(table: str, row_id: str, kind: str) -> None:
            context = {f"{kind}_id": row_id}
            with storage_step(UpdateFailedError, f"failed to delete {kind}", **context):
                repository.soft_delete(
                    table, row_id, deleted_by=command.deleted_by, deleted_on=deleted_at
                )

        for group_id in command.group_ids:
            with storage_step(
                QueryFailedError, "failed to get companies for group", group_id=group_id
            ):
                companies = repository.list_companies(group_id)

            for company in companies:
                with storage_step(
                    QueryFailedError, "failed to get locations for company", company_id=company.id
                ):
                    locations = repository.list_locations(company.id)

                for location in locations:
                    soft_delete(LOCATION_TABLE, location.id, "location")
                    tally.locations += 1

                soft_delete(COMPANY_TABLE, company.id, "company")
                tally.companies += 1

            soft_delete(GROUP_TABLE, group_id, "group")
            tally.groups += 1

        soft_delete(USER_TABLE, command.user_id, "user")
        return tally
