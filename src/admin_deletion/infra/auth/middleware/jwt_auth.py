"""JWT authentication middleware for HS256 session tokens.

Validates Bearer tokens on all requests except excluded paths and stores the
authenticated :class:`Principal` in ``request.state.principal``.

Middleware position in stack (LIFO registration order):
  Request -> RequestId -> Auth -> CORS -> Route

Auth failures are returned as responses rather than raised, because
BaseHTTPMiddleware dispatch cannot propagate exceptions to the app's
exception handlers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import jwt as pyjwt
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from admin_deletion.foundation.application.contributions import MiddlewareContribution
from admin_deletion.foundation.domain.principal import Principal
from admin_deletion.infra.auth.dev_bypass import DEV_BYPASS_PRINCIPAL, resolve_dev_bypass
from admin_deletion.infra.auth.settings import AuthSettings, get_auth_settings
from admin_deletion.infra.auth.tokens import (
    EmailDomainNotAllowedError,
    decode_session_token,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

_DEFAULT_EXCLUDED_PREFIXES = (
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)

_PROBLEM_MEDIA_TYPE = "application/problem+json"

_TITLES = {
    401: "Unauthorized",
    403: "Forbidden",
    503: "Service Unavailable",
}


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Session token validation middleware.

    Request flow:
    1. Excluded path -> skip auth
    2. Dev bypass active and no Authorization header -> dev principal
    3. Extract ``Authorization: Bearer <token>``
    4. Verify signature, expiry, issuer, email claim and email domain
    5. Store the principal in ``request.state.principal``

    Error flow:
    - Missing header -> 401 (missing_token)
    - Malformed header -> 401 (invalid_format)
    - Expired token -> 401 (token_expired)
    - Wrong issuer, missing claim, disallowed domain -> 401 (invalid_claims)
    - Bad signature or malformed JWT -> 401 (invalid_token)
    - No signing secret configured -> 503 (service_unavailable)
    """

    def __init__(
        self,
        app: Any,
        settings: AuthSettings | None = None,
        excluded_prefixes: tuple[str, ...] | None = None,
    ) -> None:
        """Initialize authentication middleware.

        Args:
            app: ASGI application (passed by Starlette).
            settings: Auth settings. Loaded from the environment if None.
            excluded_prefixes: Path prefixes to skip auth on.
                Defaults to /health, /docs, /openapi.json, /redoc.
        """
        super().__init__(app)
        self._settings = settings or get_auth_settings()
        self._dev_bypass = resolve_dev_bypass(self._settings.dev_bypass)
        self._excluded_prefixes = (
            excluded_prefixes if excluded_prefixes is not None else _DEFAULT_EXCLUDED_PREFIXES
        )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if any(path.startswith(prefix) for prefix in self._excluded_prefixes):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if self._dev_bypass and not auth_header:
            request.state.principal = DEV_BYPASS_PRINCIPAL
            return await call_next(request)

        if not auth_header:
            return self._auth_error(
                request, 401, "missing_token", "Authorization header is required"
            )

        if not auth_header.startswith("Bearer "):
            return self._auth_error(
                request, 401, "invalid_format", "Authorization header must use Bearer scheme"
            )

        token = auth_header[len("Bearer ") :].strip()
        if not token:
            return self._auth_error(request, 401, "invalid_format", "Bearer token is empty")

        if not self._settings.is_configured():
            return self._auth_error(
                request, 503, "service_unavailable", "Authentication service not configured"
            )

        try:
            claims = decode_session_token(self._settings, token)
        except pyjwt.ExpiredSignatureError:
            return self._auth_error(request, 401, "token_expired", "Token has expired")
        except pyjwt.InvalidIssuerError:
            return self._auth_error(request, 401, "invalid_claims", "Invalid issuer claim")
        except pyjwt.MissingRequiredClaimError as exc:
            return self._auth_error(
                request, 401, "invalid_claims", f"Missing required claim: {exc.claim}"
            )
        except EmailDomainNotAllowedError:
            return self._auth_error(
                request, 401, "invalid_claims", "Email domain is not permitted"
            )
        except pyjwt.InvalidSignatureError:
            return self._auth_error(
                request, 401, "invalid_token", "Token signature verification failed"
            )
        except pyjwt.DecodeError:
            return self._auth_error(request, 401, "invalid_token", "Token is malformed")
        except pyjwt.InvalidTokenError:
            return self._auth_error(request, 401, "invalid_token", "Token validation failed")

        request.state.principal = _principal_from_claims(claims)
        return await call_next(request)

    def _auth_error(
        self,
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
    ) -> JSONResponse:
        """Build an RFC 7807 problem response, with RFC 6750 header on 401."""
        logger.info(
            "auth_validation_failed",
            extra={
                "error_code": error_code,
                "path": request.url.path,
                "method": request.method,
            },
        )

        headers: dict[str, str] = {}
        if status_code == 401:
            headers["WWW-Authenticate"] = (
                f'Bearer realm="API", error="{error_code}", error_description="{message}"'
            )

        return JSONResponse(
            status_code=status_code,
            content={
                "type": f"/errors/{error_code.replace('_', '-')}",
                "title": _TITLES.get(status_code, "Error"),
                "status": status_code,
                "detail": message,
                "error_code": error_code.upper(),
                "instance": str(request.url.path),
            },
            media_type=_PROBLEM_MEDIA_TYPE,
            headers=headers,
        )


def _principal_from_claims(claims: dict[str, Any]) -> Principal:
    """Map verified token claims to a Principal."""
    picture = claims.get("picture")
    return Principal(
        email=str(claims["email"]),
        name=str(claims.get("name") or ""),
        picture=str(picture) if picture else None,
    )


contribution = MiddlewareContribution(
    middleware_class=JWTAuthMiddleware,
    priority=150,  # Security band (100-199)
)
