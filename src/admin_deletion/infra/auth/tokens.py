"""HS256 session tokens for authenticated administrators.

The OAuth login flow (an external collaborator) calls
:func:`issue_session_token` once the identity provider has vouched for the
admin's email. Every API request then presents the token as a Bearer
credential and :func:`decode_session_token` turns it back into claims.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt as pyjwt

if TYPE_CHECKING:
    from admin_deletion.infra.auth.settings import AuthSettings

ALGORITHM = "HS256"


class EmailDomainNotAllowedError(pyjwt.InvalidTokenError):
    """Token is valid but its email is outside the allowed admin domain."""


def issue_session_token(
    settings: AuthSettings,
    email: str,
    name: str = "",
    picture: str | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Mint a signed session token for an admin.

    Args:
        settings: Auth settings providing secret, issuer and TTL.
        email: Verified admin email.
        name: Display name.
        picture: Avatar URL.
        now: Issue time; defaults to the current UTC time.

    Returns:
        Encoded JWT string.

    Raises:
        ValueError: If no signing secret is configured.
    """
    if not settings.is_configured():
        raise ValueError("AUTH_JWT_SECRET is required to issue session tokens")

    issued_at = now or datetime.now(UTC)
    claims: dict[str, Any] = {
        "email": email,
        "name": name,
        "iss": settings.issuer,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": issued_at + timedelta(seconds=settings.token_ttl_seconds),
    }
    if picture:
        claims["picture"] = picture
    return pyjwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_session_token(settings: AuthSettings, token: str) -> dict[str, Any]:
    """Verify a session token and return its claims.

    Checks the HS256 signature, ``exp``, ``nbf``, the issuer, the presence of
    an ``email`` claim, and the allowed admin email domain.

    Raises:
        jwt.InvalidTokenError: Or one of its subclasses when verification fails.
    """
    claims = pyjwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[ALGORITHM],
        issuer=settings.issuer,
        options={"require": ["exp", "iss", "email"]},
    )
    email = str(claims.get("email") or "")
    if not email:
        raise pyjwt.MissingRequiredClaimError("email")
    if not settings.is_email_allowed(email):
        raise EmailDomainNotAllowedError(f"Email domain not permitted: {email}")
    return claims
