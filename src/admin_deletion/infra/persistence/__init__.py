"""Admin Deletion Infra Persistence -- engine and session factories."""

from admin_deletion.infra.persistence.database import (
    DatabaseManager,
    DatabaseSettings,
    SessionFactory,
    dispose_engine,
    get_database_manager,
    get_engine,
    get_session_factory,
)
from admin_deletion.infra.persistence.lifespan import lifespan_contribution

__all__ = [
    "DatabaseManager",
    "DatabaseSettings",
    "SessionFactory",
    "dispose_engine",
    "get_database_manager",
    "get_engine",
    "get_session_factory",
    "lifespan_contribution",
]
