"""Authentication middleware."""

from admin_deletion.infra.auth.middleware.jwt_auth import JWTAuthMiddleware

__all__ = ["JWTAuthMiddleware"]
