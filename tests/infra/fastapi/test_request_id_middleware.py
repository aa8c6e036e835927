"""Tests for RequestIdMiddleware."""

from __future__ import annotations

import uuid

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from admin_deletion.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    contribution,
    get_request_id,
)


def _client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    async def echo() -> dict[str, str]:
        bound = structlog.contextvars.get_contextvars().get("request_id", "")
        return {"request_id": get_request_id(), "bound": bound}

    return TestClient(app)


@pytest.mark.unit
class TestRequestIdMiddleware:
    def test_generates_uuid_when_absent(self) -> None:
        response = _client().get("/echo")

        request_id = response.headers["X-Request-ID"]
        assert uuid.UUID(request_id)
        assert response.json()["request_id"] == request_id

    def test_propagates_valid_incoming_id(self) -> None:
        incoming = str(uuid.uuid4())
        response = _client().get("/echo", headers={"X-Request-ID": incoming})

        assert response.headers["X-Request-ID"] == incoming
        assert response.json()["request_id"] == incoming

    def test_replaces_non_uuid_id(self) -> None:
        response = _client().get("/echo", headers={"X-Request-ID": "not-a-uuid"})
        assert response.headers["X-Request-ID"] != "not-a-uuid"

    def test_binds_id_into_structlog_context(self) -> None:
        response = _client().get("/echo")
        assert response.json()["bound"] == response.headers["X-Request-ID"]

    def test_context_cleared_after_request(self) -> None:
        _client().get("/echo")
        assert get_request_id() == ""

    def test_contribution_is_outermost(self) -> None:
        assert contribution.priority < 100
