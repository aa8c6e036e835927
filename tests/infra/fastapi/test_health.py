"""Tests for the /health endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from admin_deletion.infra.fastapi._health import router
from admin_deletion.infra.persistence.database import get_session_factory

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.orm import Session


def _client(factory: sessionmaker[Session]) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_session_factory] = lambda: factory
    return TestClient(app)


@pytest.mark.unit
class TestHealth:
    def test_healthy_when_database_answers(self, session_factory: sessionmaker[Session]) -> None:
        response = _client(session_factory).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "checks": {"database": {"status": "ok"}}}

    def test_degraded_when_database_unreachable(self, tmp_path: Path) -> None:
        engine = create_engine(f"sqlite:///{tmp_path}/no-such-dir/db.sqlite")

        response = _client(sessionmaker(engine)).get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["database"] == {"status": "error", "detail": "OperationalError"}
        engine.dispose()
