"""FastAPI application factory with entry-point auto-discovery.

Provides :func:`create_app`, which wires routers, middleware, error handlers
and lifespan hooks declared under the ``admin_deletion.*`` entry point groups,
plus any contributions passed explicitly by the caller.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

from starlette.middleware.cors import CORSMiddleware

from fastapi import FastAPI
from admin_deletion.foundation.application import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    discover,
)
from admin_deletion.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from fastapi import APIRouter

logger = logging.getLogger(__name__)

# Entry point group constants
GROUP_ROUTERS = "admin_deletion.routers"
GROUP_MIDDLEWARE = "admin_deletion.middleware"
GROUP_ERROR_HANDLERS = "admin_deletion.error_handlers"
GROUP_LIFESPAN = "admin_deletion.lifespan"


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> Callable[[FastAPI], Any]:
    """Merge lifespan hooks into one FastAPI ``lifespan`` callable.

    Hooks enter in ascending priority and exit in reverse order, so
    observability is up before persistence and torn down after it.

    Args:
        hooks: Lifespan contributions in any order.

    Returns:
        Async context manager factory accepted by ``FastAPI(lifespan=...)``.
    """
    ordered = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contribution in ordered:
                logger.info(
                    "Starting lifespan hook %r (priority=%d)",
                    contribution.hook,
                    contribution.priority,
                )
                await stack.enter_async_context(contribution.hook(app))
            yield

    return lifespan


def create_app(
    settings: AppSettings | None = None,
    *,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create a FastAPI application with auto-discovered contributions.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        extra_routers: Routers to include beyond discovered ones.
        extra_middleware: Middleware beyond discovered ones.
        extra_lifespan_hooks: Lifespan hooks beyond discovered ones.
        extra_error_handlers: Error handlers beyond discovered ones.
        exclude_groups: Entry point groups to skip entirely.
        exclude_names: Specific entry point names to skip across all groups.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()
    _exclude_groups = exclude_groups if exclude_groups is not None else settings.exclude_groups
    _exclude_names = exclude_names if exclude_names is not None else settings.exclude_entry_points

    def _discovered(group: str) -> list[Any]:
        if group in _exclude_groups:
            return []
        return discover(group, exclude_names=_exclude_names)

    # --- Lifespan hooks ---
    lifespan_hooks: list[LifespanContribution] = list(extra_lifespan_hooks or [])
    for contrib in _discovered(GROUP_LIFESPAN):
        value = contrib.value
        if isinstance(value, LifespanContribution):
            lifespan_hooks.append(value)
        else:
            # Bare async context manager factory; wrap with default priority
            lifespan_hooks.append(LifespanContribution(hook=value))

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=compose_lifespan(lifespan_hooks),
    )

    # --- CORS (always added, configured via settings) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    # --- Middleware ---
    middleware_contribs: list[MiddlewareContribution] = list(extra_middleware or [])
    for contrib in _discovered(GROUP_MIDDLEWARE):
        if isinstance(contrib.value, MiddlewareContribution):
            middleware_contribs.append(contrib.value)
        else:
            logger.warning(
                "Middleware entry point %r did not return a MiddlewareContribution",
                contrib.name,
            )

    # Starlette wraps in LIFO order: add the innermost (highest priority) first
    middleware_contribs.sort(key=lambda m: m.priority)
    for mw in reversed(middleware_contribs):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.info(
            "Registered middleware %s (priority=%d)",
            mw.middleware_class.__name__,
            mw.priority,
        )

    # --- Error handlers ---
    error_handler_contribs: list[ErrorHandlerContribution] = list(extra_error_handlers or [])
    for contrib in _discovered(GROUP_ERROR_HANDLERS):
        value = contrib.value
        if isinstance(value, ErrorHandlerContribution):
            error_handler_contribs.append(value)
        elif callable(value):
            # register(app) -> None
            value(app)
        else:
            logger.warning(
                "Error handler entry point %r is not an ErrorHandlerContribution or callable",
                contrib.name,
            )

    for eh in error_handler_contribs:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info("Registered error handler for %s", eh.exception_class.__name__)

    # --- Routers ---
    routers: list[APIRouter] = list(extra_routers or [])
    routers.extend(contrib.value for contrib in _discovered(GROUP_ROUTERS))

    for router in routers:
        app.include_router(router)
        logger.info("Included router: %r", router)

    return app
