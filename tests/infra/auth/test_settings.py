"""Tests for AuthSettings."""

from __future__ import annotations

import pytest

from admin_deletion.infra.auth.settings import AuthSettings, get_auth_settings


@pytest.mark.unit
class TestAuthSettings:
    def test_defaults(self) -> None:
        settings = AuthSettings()
        assert settings.issuer == "admin-deletion-dashboard"
        assert settings.token_ttl_seconds == 86400
        assert settings.allowed_email_domain == ""
        assert settings.dev_bypass is False

    def test_unconfigured_without_secret(self) -> None:
        assert AuthSettings().is_configured() is False
        assert AuthSettings(jwt_secret="s").is_configured() is True

    def test_secret_hidden_from_repr(self) -> None:
        assert "hunter2" not in repr(AuthSettings(jwt_secret="hunter2"))

    def test_domain_normalized(self) -> None:
        assert AuthSettings(allowed_email_domain=" @Corp.Example ").allowed_email_domain == (
            "corp.example"
        )

    def test_any_domain_allowed_when_unset(self) -> None:
        assert AuthSettings().is_email_allowed("x@anything.test") is True

    def test_subdomain_is_not_the_allowed_domain(self) -> None:
        settings = AuthSettings(allowed_email_domain="example.com")
        assert settings.is_email_allowed("a@example.com") is True
        assert settings.is_email_allowed("a@evil-example.com") is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTH_JWT_SECRET", "from-env")
        monkeypatch.setenv("AUTH_DEV_BYPASS", "true")
        get_auth_settings.cache_clear()
        try:
            settings = get_auth_settings()
            assert settings.jwt_secret == "from-env"
            assert settings.dev_bypass is True
        finally:
            get_auth_settings.cache_clear()
