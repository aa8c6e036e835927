"""Admin Deletion Infra FastAPI -- app factory, error handlers, middleware."""

from admin_deletion.infra.fastapi.app_factory import compose_lifespan, create_app
from admin_deletion.infra.fastapi.error_handlers import (
    ProblemDetail,
    register_exception_handlers,
)
from admin_deletion.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)
from admin_deletion.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "ProblemDetail",
    "RequestIdMiddleware",
    "compose_lifespan",
    "create_app",
    "get_request_id",
    "register_exception_handlers",
]
