"""FastAPI dependency functions for authentication.

Usage:
    from admin_deletion.infra.auth.dependencies import CurrentPrincipal

    @router.post("/api/account/delete")
    def delete_account(principal: CurrentPrincipal, ...):
        # principal.email is the acting administrator
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from admin_deletion.foundation.domain.exceptions import AuthenticationError
from admin_deletion.foundation.domain.principal import Principal


def get_current_principal(request: Request) -> Principal:
    """FastAPI dependency that returns the authenticated principal.

    Reads ``request.state.principal`` set by JWTAuthMiddleware.

    Raises:
        AuthenticationError: If the request passed through no auth middleware
            (e.g. an excluded path or a misconfigured app).
    """
    principal = getattr(request.state, "principal", None)
    if not isinstance(principal, Principal):
        raise AuthenticationError(
            "Authentication required",
            auth_error="missing_token",
            error_code="MISSING_TOKEN",
        )
    return principal


# Type alias for cleaner endpoint signatures
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
