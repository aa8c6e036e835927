"""Read side of the account hierarchy: lookup by email and descendant counts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from admin_deletion.domain.accounts._storage import storage_step
from admin_deletion.domain.accounts.infrastructure.hierarchy_repository import (
    HierarchyRepository,
)
from admin_deletion.domain.accounts.models import AccountLookup, GroupSummary
from admin_deletion.foundation.domain.exceptions import NotFoundError, QueryFailedError
from admin_deletion.infra.observability import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

logger = get_logger(__name__)


class HierarchyCounter:
    """Counts the live companies and locations under a group.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def counts(self, group_id: str) -> tuple[int, int]:
        """Return ``(company_count, location_count)`` for the group.

        A location is counted only when both it and its company are live.

        Raises:
            QueryFailedError: If either count query fails.
        """
        with self._session_factory() as session:
            return self.counts_with(HierarchyRepository(session), group_id)

    @staticmethod
    def counts_with(repository: HierarchyRepository, group_id: str) -> tuple[int, int]:
        """Same as :meth:`counts`, on an already open repository."""
        with storage_step(
            QueryFailedError, "failed to get hierarchy counts", group_id=group_id
        ):
            return repository.count_companies(group_id), repository.count_locations(group_id)


class HierarchyReader:
    """Finds a live user by email together with the groups they own.

    Read-only; runs on a short session without an explicit transaction.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def lookup(self, email: str) -> AccountLookup:
        """Look up an account and summarize its live groups.

        Args:
            email: Email to match, case-insensitively.

        Returns:
            The user's identity plus one summary per live group, newest first.

        Raises:
            NotFoundError: If no live user has this email.
            QueryFailedError: If any read fails.
        """
        with self._session_factory() as session:
            repository = HierarchyRepository(session)

            with storage_step(QueryFailedError, "failed to find user"):
                user = repository.find_user_by_email(email)
            if user is None:
                raise NotFoundError("User", email)

            with storage_step(QueryFailedError, "failed to find groups", user_id=user.id):
                groups = repository.list_groups_by_owner(user.id)

            summaries = []
            for group in groups:
                company_count, location_count = HierarchyCounter.counts_with(
                    repository, group.id
                )
                summaries.append(
                    GroupSummary(
                        id=group.id,
                        name=group.name,
                        company_count=company_count,
                        location_count=location_count,
                    )
                )

        logger.info(
            "account_lookup_completed",
            user_id=user.id,
            group_count=len(summaries),
        )
        return AccountLookup(
            user_id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            groups=summaries,
        )
