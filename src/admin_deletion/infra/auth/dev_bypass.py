"""Development mode authentication bypass resolution.

When active, :class:`JWTAuthMiddleware` authenticates requests that carry no
Authorization header as :data:`DEV_BYPASS_PRINCIPAL`.

Safety rules:
1. ENVIRONMENT=production always disables the bypass
2. Only active when explicitly requested via AUTH_DEV_BYPASS=true
3. A request that does send an Authorization header is still validated
"""

from __future__ import annotations

import logging
import os

from admin_deletion.foundation.domain.principal import Principal

logger = logging.getLogger(__name__)

DEV_BYPASS_PRINCIPAL = Principal(email="dev-admin@localhost", name="Development Admin")


def resolve_dev_bypass(requested: bool) -> bool:
    """Resolve whether the development authentication bypass should be active.

    Args:
        requested: Whether bypass was requested via AUTH_DEV_BYPASS=true.

    Returns:
        True if bypass should be active, False otherwise.
    """
    if not requested:
        return False

    env = os.environ.get("ENVIRONMENT", "development")

    if env == "production":
        logger.error(
            "auth_dev_bypass_blocked",
            extra={"environment": env},
        )
        return False

    logger.warning(
        "auth_dev_bypass_active",
        extra={
            "environment": env,
            "detail": "Authentication bypass is enabled. Do not use in production.",
        },
    )
    return True
