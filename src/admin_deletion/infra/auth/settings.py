"""Authentication configuration settings.

Loaded from environment variables with AUTH_ prefix.

Environment Variables:
    AUTH_JWT_SECRET: HMAC secret used to sign and verify session tokens
    AUTH_ISSUER: Issuer claim written into and required on session tokens
    AUTH_TOKEN_TTL_SECONDS: Session token lifetime
    AUTH_ALLOWED_EMAIL_DOMAIN: Only admins from this email domain are accepted
    AUTH_DEV_BYPASS: Skip token validation in development
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Authentication configuration loaded from environment variables.

    Example:
        >>> settings = AuthSettings()
        >>> settings.issuer
        'admin-deletion-dashboard'
        >>> settings.is_configured()
        False
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="",
        repr=False,  # Security: never log the signing secret
        description="HMAC secret for HS256 session tokens",
    )
    issuer: str = Field(
        default="admin-deletion-dashboard",
        description="Issuer claim of session tokens",
    )
    token_ttl_seconds: int = Field(
        default=86400,
        ge=60,
        le=7 * 86400,
        description="Session token lifetime in seconds",
    )
    allowed_email_domain: str = Field(
        default="",
        description="Email domain admins must belong to; empty accepts any domain",
    )
    dev_bypass: bool = Field(
        default=False,
        description="Skip token validation in development",
    )

    @field_validator("allowed_email_domain", mode="before")
    @classmethod
    def _normalize_domain(cls, v: object) -> str:
        return str(v or "").strip().lower().lstrip("@")

    def is_configured(self) -> bool:
        """Check if a signing secret is present (non-throwing)."""
        return bool(self.jwt_secret)

    def is_email_allowed(self, email: str) -> bool:
        """Check an admin email against the allowed domain.

        Args:
            email: Email claim from the session token.

        Returns:
            True if no domain restriction is configured or the email
            belongs to the allowed domain.
        """
        if not self.allowed_email_domain:
            return True
        return email.lower().endswith("@" + self.allowed_email_domain)


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get singleton AuthSettings instance.

    Clear cache with ``get_auth_settings.cache_clear()`` for testing.
    """
    return AuthSettings()
