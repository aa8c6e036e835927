"""Shared fixtures: an in-memory database shaped like the production schemas.

SQLite has no schemas, so each ``saastack_*_v1`` schema is an attached
in-memory database. Qualified names such as ``saastack_group_v1.groups``
then resolve exactly as they do on PostgreSQL, and the repositories run
their real SQL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import DateTime, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from admin_deletion.domain.accounts.infrastructure import (
    AUDIT_TABLE,
    COMPANY_TABLE,
    GROUP_TABLE,
    LOCATION_TABLE,
    USER_TABLE,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine

SCHEMAS = (
    "saastack_user_v1",
    "saastack_group_v1",
    "saastack_company_v1",
    "saastack_location_v1",
)

_SOFT_DELETE_COLUMNS = """
    is_deleted BOOLEAN,
    deleted_by TEXT,
    deleted_on TIMESTAMP
"""

DDL = (
    f"""
    CREATE TABLE {USER_TABLE} (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL,
        first_name TEXT,
        last_name TEXT,
        {_SOFT_DELETE_COLUMNS}
    )
    """,
    f"""
    CREATE TABLE {GROUP_TABLE} (
        id TEXT PRIMARY KEY,
        name TEXT,
        created_by TEXT,
        created_on TIMESTAMP,
        {_SOFT_DELETE_COLUMNS}
    )
    """,
    f"""
    CREATE TABLE {COMPANY_TABLE} (
        id TEXT PRIMARY KEY,
        name TEXT,
        parent TEXT,
        {_SOFT_DELETE_COLUMNS}
    )
    """,
    f"""
    CREATE TABLE {LOCATION_TABLE} (
        id TEXT PRIMARY KEY,
        name TEXT,
        parent TEXT,
        {_SOFT_DELETE_COLUMNS}
    )
    """,
    f"""
    CREATE TABLE {AUDIT_TABLE} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        action TEXT NOT NULL DEFAULT 'ACCOUNT_DELETION',
        deleted_by_email TEXT NOT NULL,
        target_email TEXT NOT NULL,
        target_user_id TEXT NOT NULL,
        group_ids TEXT DEFAULT '[]',
        reason TEXT DEFAULT '',
        deleted_groups INTEGER DEFAULT 0,
        deleted_companies INTEGER DEFAULT 0,
        deleted_locations INTEGER DEFAULT 0,
        ip_address TEXT DEFAULT '',
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    """Single-connection in-memory SQLite engine with the schemas attached."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _attach_schemas(dbapi_connection: Any, connection_record: Any) -> None:
        for schema in SCHEMAS:
            dbapi_connection.execute(f"ATTACH DATABASE ':memory:' AS {schema}")

    with engine.begin() as conn:
        for statement in DDL:
            conn.execute(text(statement))

    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory configured like DatabaseManager's."""
    return sessionmaker(engine, expire_on_commit=False, autoflush=False)


class HierarchyBuilder:
    """Seeds hierarchy rows and reads them back for assertions."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def _insert(self, table: str, values: dict[str, Any]) -> None:
        columns = ", ".join(values)
        params = ", ".join(f":{k}" for k in values)
        with self._session_factory() as session:
            session.execute(text(f"INSERT INTO {table} ({columns}) VALUES ({params})"), values)
            session.commit()

    def user(
        self,
        user_id: str,
        email: str,
        *,
        first_name: str = "",
        last_name: str = "",
        is_deleted: bool | None = False,
    ) -> None:
        self._insert(
            USER_TABLE,
            {
                "id": user_id,
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "is_deleted": is_deleted,
            },
        )

    def group(
        self,
        group_id: str,
        owner: str,
        *,
        name: str | None = None,
        created_on: str = "2024-01-01 00:00:00",
        is_deleted: bool | None = False,
    ) -> None:
        self._insert(
            GROUP_TABLE,
            {
                "id": group_id,
                "name": name or group_id,
                "created_by": owner,
                "created_on": created_on,
                "is_deleted": is_deleted,
            },
        )

    def company(self, company_id: str, group_id: str, *, is_deleted: bool | None = False) -> None:
        self._insert(
            COMPANY_TABLE,
            {"id": company_id, "name": company_id, "parent": group_id, "is_deleted": is_deleted},
        )

    def location(
        self, location_id: str, company_id: str, *, is_deleted: bool | None = False
    ) -> None:
        self._insert(
            LOCATION_TABLE,
            {
                "id": location_id,
                "name": location_id,
                "parent": company_id,
                "is_deleted": is_deleted,
            },
        )

    def row(self, table: str, row_id: str) -> dict[str, Any]:
        """Soft-delete state of one row, with ``deleted_on`` parsed."""
        stmt = text(
            f"SELECT is_deleted, deleted_by, deleted_on FROM {table} WHERE id = :id"
        ).columns(deleted_on=DateTime())
        with self._session_factory() as session:
            result = session.execute(stmt, {"id": row_id}).mappings().one()
        return {
            "is_deleted": bool(result["is_deleted"]),
            "deleted_by": result["deleted_by"],
            "deleted_on": result["deleted_on"],
        }

    def is_deleted(self, table: str, row_id: str) -> bool:
        return self.row(table, row_id)["is_deleted"]

    def deleted_ids(self) -> set[str]:
        """Ids of every soft-deleted row across the hierarchy tables."""
        ids: set[str] = set()
        with self._session_factory() as session:
            for table in (USER_TABLE, GROUP_TABLE, COMPANY_TABLE, LOCATION_TABLE):
                rows = session.execute(text(f"SELECT id FROM {table} WHERE is_deleted = true"))
                ids.update(r.id for r in rows)
        return ids

    def audit_count(self) -> int:
        with self._session_factory() as session:
            return int(session.execute(text(f"SELECT COUNT(*) FROM {AUDIT_TABLE}")).scalar_one())

    def drop(self, table: str) -> None:
        with self._session_factory() as session:
            session.execute(text(f"DROP TABLE {table}"))
            session.commit()


@pytest.fixture()
def db(session_factory: sessionmaker[Session]) -> HierarchyBuilder:
    return HierarchyBuilder(session_factory)


@pytest.fixture()
def two_group_account(db: HierarchyBuilder) -> HierarchyBuilder:
    """alice owns G1 (C1 with L1, L2) and the older, empty G2.

    G1 also holds rows that are already gone: company C-old with location
    L-old, and location L-dead under C1.
    """
    db.user("u1", "alice@example.com", first_name="Alice", last_name="Smith")
    db.group("G1", "u1", name="Main", created_on="2024-06-01 00:00:00")
    db.group("G2", "u1", name="Empty", created_on="2024-01-01 00:00:00")
    db.company("C1", "G1")
    db.location("L1", "C1")
    db.location("L2", "C1", is_deleted=None)
    db.location("L-dead", "C1", is_deleted=True)
    db.company("C-old", "G1", is_deleted=True)
    db.location("L-old", "C-old")
    return db
