"""Persistence lifespan hook for startup/shutdown resource management.

Handles:
- Database health check on startup (SELECT 1)
- Connection budget logging
- Engine disposal on shutdown

Priority 75 ensures persistence starts AFTER observability (50) and BEFORE
the audit table bootstrap (90).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from admin_deletion.foundation.application.contributions import (
    LIFESPAN_PRIORITY_PERSISTENCE,
    LifespanContribution,
)
from admin_deletion.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

# Leave headroom below PostgreSQL's default max_connections=100
_CONNECTION_BUDGET_WARNING = 80


@asynccontextmanager
async def _persistence_lifespan(app: Any) -> AsyncIterator[None]:
    """Verify the database on startup and release the pool on shutdown.

    Args:
        app: The application instance (unused but required by protocol).
    """
    manager = get_database_manager()

    engine = manager.get_engine()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("persistence_lifespan: database health check passed")

    settings = manager.settings
    budget = settings.pool_size + settings.max_overflow
    if budget > _CONNECTION_BUDGET_WARNING:
        logger.warning(
            "persistence_lifespan: connection budget %d exceeds %d. "
            "Consider tuning DATABASE_POOL_SIZE and DATABASE_MAX_OVERFLOW.",
            budget,
            _CONNECTION_BUDGET_WARNING,
        )
    else:
        logger.info("persistence_lifespan: connection budget %d", budget)

    try:
        yield
    finally:
        manager.dispose()
        logger.info("persistence_lifespan: engine disposed")


lifespan_contribution = LifespanContribution(
    hook=_persistence_lifespan,
    priority=LIFESPAN_PRIORITY_PERSISTENCE,
)
