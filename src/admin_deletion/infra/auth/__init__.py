"""Admin Deletion Infra Auth -- session token validation and principal injection."""

from admin_deletion.infra.auth.dependencies import CurrentPrincipal, get_current_principal
from admin_deletion.infra.auth.dev_bypass import DEV_BYPASS_PRINCIPAL, resolve_dev_bypass
from admin_deletion.infra.auth.middleware.jwt_auth import JWTAuthMiddleware
from admin_deletion.infra.auth.settings import AuthSettings, get_auth_settings
from admin_deletion.infra.auth.tokens import decode_session_token, issue_session_token

__all__ = [
    "DEV_BYPASS_PRINCIPAL",
    "AuthSettings",
    "CurrentPrincipal",
    "JWTAuthMiddleware",
    "decode_session_token",
    "get_auth_settings",
    "get_current_principal",
    "issue_session_token",
    "resolve_dev_bypass",
]
