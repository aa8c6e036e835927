"""Health check endpoint.

Reports database connectivity. Served without authentication.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from admin_deletion.infra.persistence.database import SessionFactory

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


def _check_database(session_factory: Any) -> dict[str, str]:
    """Check database connectivity via SELECT 1."""
    try:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("health_check: database unhealthy: %s", exc)
        return {"status": "error", "detail": type(exc).__name__}
    return {"status": "ok"}


@router.get("/health")
def health(session_factory: SessionFactory) -> Any:
    """Return 200 ``healthy`` when the database answers, 503 ``degraded`` otherwise."""
    checks = {"database": _check_database(session_factory)}
    all_ok = all(c["status"] == "ok" for c in checks.values())
    return JSONResponse(
        content={"status": "healthy" if all_ok else "degraded", "checks": checks},
        status_code=200 if all_ok else 503,
    )
