"""Principal value object representing an authenticated administrator.

Pure domain object with no external dependencies. Immutable (frozen dataclass).
Extracted from validated session token claims by the auth middleware.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated administrator performing a request.

    The email is the identity recorded as ``deleted_by`` on soft-deleted rows
    and as the actor on audit entries.

    Attributes:
        email: Verified email from the token 'email' claim.
        name: Display name from the 'name' claim. Empty if absent.
        picture: Avatar URL from the 'picture' claim. None if absent.
    """

    email: str
    name: str = ""
    picture: str | None = None
