"""RFC 7807 Problem Details exception handlers for FastAPI.

Translates domain exceptions into standardized HTTP responses with
Content-Type ``application/problem+json``.

Storage failures are deliberately opaque: the client receives a generic
message and the correlation ID, while the full error goes to the log.

Usage:
    from admin_deletion.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from admin_deletion.foundation.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from admin_deletion.infra.fastapi.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

_INTERNAL_ERROR_DETAIL = (
    "An internal error occurred. Please contact support with the correlation ID."
)


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    Extension fields:
    - error_code: Machine-readable error code for client handling
    - context: Structured debugging information
    - correlation_id: Request correlation ID (5xx errors only)
    """

    type: str = Field(
        ...,
        description="URI reference identifying problem type",
        examples=["/errors/not-found", "/errors/validation-error"],
    )
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., ge=400, le=599, description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference to specific occurrence (request path)",
    )
    error_code: str | None = Field(default=None, description="Machine-readable error code")
    context: dict[str, Any] | None = Field(
        default=None,
        description="Structured debugging information",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for support requests",
    )


# Patterns for sensitive data
_SENSITIVE_PATTERNS = [
    (
        re.compile(r"postgres(?:ql)?(?:\+\w+)?://[^@]*@[^/\s]*"),
        "postgresql://[REDACTED]@[REDACTED]",
    ),
    (
        re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "password=[REDACTED]",
    ),
    (
        re.compile(r"secret\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "secret=[REDACTED]",
    ),
    (
        re.compile(r"token\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "token=[REDACTED]",
    ),
]


def _create_problem_response(problem: ProblemDetail) -> JSONResponse:
    """Create JSONResponse with RFC 7807 content type."""
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _get_correlation_id() -> str:
    """Request ID set by RequestIdMiddleware, or "unknown" outside a request."""
    return get_request_id() or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Sanitize a context dictionary for safe inclusion in responses.

    - Converts datetimes to ISO strings
    - Drops sensitive keys and redacts sensitive substrings
    - Stringifies values that are not JSON-serializable
    """
    if context is None:
        return None

    sanitized = {
        key: _sanitize_value(value)
        for key, value in context.items()
        if not _is_sensitive_key(key)
    }
    return sanitized if sanitized else None


def _is_sensitive_key(key: str) -> bool:
    """Check if key name indicates sensitive data."""
    return key.lower() in {"password", "secret", "token", "jwt_secret", "credential"}


def _sanitize_value(value: Any) -> Any:
    """Sanitize a single value for JSON serialization."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _redact_sensitive_strings(value)
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _redact_sensitive_strings(text: str) -> str:
    """Redact sensitive patterns from string values."""
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Translate NotFoundError to 404."""
    problem = ProblemDetail(
        type="/errors/not-found",
        title="Resource Not Found",
        status=404,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def validation_error_handler(
    request: Request,
    exc: ValidationError,
) -> JSONResponse:
    """Translate ValidationError to 422 with field-level details."""
    problem = ProblemDetail(
        type="/errors/validation-error",
        title="Validation Error",
        status=422,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def authentication_error_handler(
    request: Request,
    exc: AuthenticationError,
) -> JSONResponse:
    """Translate AuthenticationError to 401 with WWW-Authenticate header (RFC 6750)."""
    problem = ProblemDetail(
        type=f"/errors/{exc.error_code.lower().replace('_', '-')}",
        title="Unauthorized",
        status=401,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
    )
    response = _create_problem_response(problem)
    response.headers["WWW-Authenticate"] = f'Bearer realm="API", error="{exc.auth_error}"'
    return response


async def authorization_error_handler(
    request: Request,
    exc: AuthorizationError,
) -> JSONResponse:
    """Translate AuthorizationError to 403 Forbidden."""
    problem = ProblemDetail(
        type="/errors/forbidden",
        title="Forbidden",
        status=403,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context) if exc.context else None,
    )
    return _create_problem_response(problem)


async def storage_error_handler(
    request: Request,
    exc: StorageError,
) -> JSONResponse:
    """Translate StorageError to an opaque 500.

    The response never includes the storage message, the failing phase, or
    any partial result. The correlation ID ties the response to the log line.
    """
    correlation_id = _get_correlation_id()
    logger.error(
        "storage_error",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "error_code": exc.error_code,
            "error": str(exc),
        },
    )
    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=_INTERNAL_ERROR_DETAIL,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


async def domain_error_handler(
    request: Request,
    exc: DomainError,
) -> JSONResponse:
    """Translate any other DomainError to 400 Bad Request."""
    problem = ProblemDetail(
        type="/errors/domain-error",
        title="Bad Request",
        status=400,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI request body / query validation failures to 422."""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Request Validation Error",
        status=422,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Logs the full exception and returns a sanitized 500.
    """
    correlation_id = _get_correlation_id()

    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=_INTERNAL_ERROR_DETAIL,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on a FastAPI application.

    Starlette resolves handlers by walking the exception's MRO, so the
    subclass handlers win over the DomainError fallback:

    1. AuthenticationError -> 401
    2. AuthorizationError -> 403
    3. NotFoundError -> 404
    4. ValidationError -> 422
    5. StorageError -> 500 (opaque)
    6. DomainError -> 400
    7. RequestValidationError -> 422
    8. Exception -> 500

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AuthorizationError, authorization_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, storage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
