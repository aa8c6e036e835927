"""Translation of driver failures into phase-specific storage errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from admin_deletion.foundation.domain.exceptions import StorageError


@contextmanager
def storage_step(
    error_cls: type[StorageError],
    message: str,
    **context: Any,
) -> Iterator[None]:
    """Re-raise any SQLAlchemy error inside the block as ``error_cls``.

    The original exception is chained as ``__cause__`` and its class name is
    added to the context so the log line identifies the driver failure.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise error_cls(message, cause=type(exc).__name__, **context) from exc
