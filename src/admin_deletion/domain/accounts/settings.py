"""Account deletion configuration.

Environment Variables:
    ACCOUNTS_AUDIT_DEFAULT_LIMIT: Page size used when a request gives none or an invalid one
    ACCOUNTS_AUDIT_MAX_LIMIT: Largest page size a request may ask for
    ACCOUNTS_CREATE_AUDIT_TABLE: Create the audit log table on startup
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccountSettings(BaseSettings):
    """Account deletion settings loaded from ``ACCOUNTS_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    audit_default_limit: int = Field(default=50, ge=1, description="Default audit page size")
    audit_max_limit: int = Field(default=100, ge=1, description="Maximum audit page size")
    create_audit_table: bool = Field(
        default=False,
        description="Run CREATE TABLE IF NOT EXISTS for the audit log on startup",
    )

    @model_validator(mode="after")
    def _default_within_max(self) -> AccountSettings:
        if self.audit_default_limit > self.audit_max_limit:
            msg = (
                f"audit_default_limit ({self.audit_default_limit}) must not exceed "
                f"audit_max_limit ({self.audit_max_limit})"
            )
            raise ValueError(msg)
        return self


@lru_cache(maxsize=1)
def get_account_settings() -> AccountSettings:
    """Get singleton AccountSettings instance.

    Clear cache with ``get_account_settings.cache_clear()`` for testing.
    """
    return AccountSettings()
