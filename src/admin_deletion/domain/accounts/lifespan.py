"""Startup hook that bootstraps the audit log table.

Off by default: in most deployments the table is created by a migration.
Runs after persistence (75) so the engine has already passed its health check.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from admin_deletion.domain.accounts.infrastructure.audit_log_repository import (
    AuditLogRepository,
)
from admin_deletion.domain.accounts.settings import get_account_settings
from admin_deletion.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AUDIT_TABLE,
    LifespanContribution,
)
from admin_deletion.infra.persistence.database import get_session_factory

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _audit_table_lifespan(app: Any) -> AsyncIterator[None]:
    if get_account_settings().create_audit_table:
        AuditLogRepository.ensure_table_exists(get_session_factory())
    else:
        logger.info("audit_table_lifespan: skipped (ACCOUNTS_CREATE_AUDIT_TABLE is false)")
    yield


lifespan_contribution = LifespanContribution(
    hook=_audit_table_lifespan,
    priority=LIFESPAN_PRIORITY_AUDIT_TABLE,
)
