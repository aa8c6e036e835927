"""Tests for JWTAuthMiddleware: excluded paths, error responses, valid flow."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from admin_deletion.infra.auth.middleware.jwt_auth import JWTAuthMiddleware, contribution
from admin_deletion.infra.auth.settings import AuthSettings
from admin_deletion.infra.auth.tokens import issue_session_token

if TYPE_CHECKING:
    from starlette.requests import Request

SECRET = "middleware-test-secret-0123456789abcdef"


def _make_app(settings: AuthSettings) -> Starlette:
    async def whoami(request: Request) -> Response:
        principal = request.state.principal
        return JSONResponse({"email": principal.email, "name": principal.name})

    async def health(request: Request) -> Response:
        return JSONResponse({"status": "healthy"})

    app = Starlette(routes=[Route("/whoami", whoami), Route("/health", health)])
    app.add_middleware(JWTAuthMiddleware, settings=settings)
    return app


def _client(settings: AuthSettings | None = None) -> TestClient:
    return TestClient(
        _make_app(settings or AuthSettings(jwt_secret=SECRET)),
        raise_server_exceptions=False,
    )


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.unit
class TestExcludedPaths:
    def test_health_path_skips_auth(self) -> None:
        response = _client().get("/health")
        assert response.status_code == 200


@pytest.mark.unit
class TestRejections:
    def test_missing_header(self) -> None:
        response = _client().get("/whoami")

        assert response.status_code == 401
        assert response.headers["content-type"] == "application/problem+json"
        assert response.json()["error_code"] == "MISSING_TOKEN"
        assert response.headers["WWW-Authenticate"].startswith('Bearer realm="API"')

    def test_non_bearer_scheme(self) -> None:
        response = _client().get("/whoami", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_FORMAT"

    def test_empty_bearer_token(self) -> None:
        response = _client().get("/whoami", headers={"Authorization": "Bearer "})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_FORMAT"

    def test_malformed_token(self) -> None:
        response = _client().get("/whoami", headers=_bearer("not-a-jwt"))
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    def test_expired_token(self) -> None:
        settings = AuthSettings(jwt_secret=SECRET)
        token = issue_session_token(
            settings, "admin@example.com", now=datetime.now(UTC) - timedelta(days=3)
        )

        response = _client(settings).get("/whoami", headers=_bearer(token))

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_EXPIRED"

    def test_foreign_signature(self) -> None:
        foreign = AuthSettings(jwt_secret="some-other-secret-0123456789abcdefgh")
        token = issue_session_token(foreign, "admin@example.com")

        response = _client().get("/whoami", headers=_bearer(token))

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    def test_disallowed_domain(self) -> None:
        settings = AuthSettings(jwt_secret=SECRET, allowed_email_domain="example.com")
        token = issue_session_token(settings, "someone@other.test")

        response = _client(settings).get("/whoami", headers=_bearer(token))

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_CLAIMS"

    def test_unconfigured_secret_returns_503(self) -> None:
        token = issue_session_token(AuthSettings(jwt_secret=SECRET), "admin@example.com")

        response = _client(AuthSettings(jwt_secret="")).get("/whoami", headers=_bearer(token))

        assert response.status_code == 503
        assert "WWW-Authenticate" not in response.headers


@pytest.mark.unit
class TestValidToken:
    def test_principal_stored_on_request_state(self) -> None:
        settings = AuthSettings(jwt_secret=SECRET)
        token = issue_session_token(settings, "admin@example.com", "Ada Admin")

        response = _client(settings).get("/whoami", headers=_bearer(token))

        assert response.status_code == 200
        assert response.json() == {"email": "admin@example.com", "name": "Ada Admin"}


@pytest.mark.unit
class TestDevBypass:
    def test_bypass_injects_dev_principal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")

        response = _client(AuthSettings(dev_bypass=True)).get("/whoami")

        assert response.status_code == 200
        assert response.json()["email"] == "dev-admin@localhost"

    def test_bypass_blocked_in_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")

        response = _client(AuthSettings(dev_bypass=True)).get("/whoami")

        assert response.status_code == 401

    def test_bypass_still_validates_presented_token(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        settings = AuthSettings(jwt_secret=SECRET, dev_bypass=True)

        response = _client(settings).get("/whoami", headers=_bearer("garbage"))

        assert response.status_code == 401


@pytest.mark.unit
def test_contribution_in_security_band() -> None:
    assert contribution.middleware_class is JWTAuthMiddleware
    assert 100 <= contribution.priority < 200
