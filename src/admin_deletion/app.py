"""Deployable application factory.

Routers, middleware, error handlers and lifespan hooks are all registered
under the ``admin_deletion.*`` entry point groups of this distribution, so
the factory only supplies the settings.

Usage::

    uvicorn admin_deletion.app:create_admin_app --factory
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from admin_deletion.infra.fastapi import AppSettings, create_app

if TYPE_CHECKING:
    from fastapi import FastAPI


def create_admin_app(
    settings: AppSettings | None = None,
    *,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the admin deletion dashboard API.

    Args:
        settings: Application settings. Loaded from ``APP_*`` variables if None.
        exclude_names: Entry point names to suppress, e.g. ``{"persistence"}``
            to start without a database.
    """
    return create_app(settings=settings, exclude_names=exclude_names)
