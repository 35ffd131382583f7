"""Translation of driver errors into domain errors."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.domain.exceptions import CatalogError, StorageError

logger = structlog.get_logger()

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"


def _candidates(exc: SQLAlchemyError) -> list[object]:
    orig = getattr(exc, "orig", None)
    return [c for c in (orig, getattr(orig, "__cause__", None)) if c is not None]


def sqlstate(exc: SQLAlchemyError) -> str | None:
    """SQLSTATE code of the underlying driver error, if the driver exposes one."""
    for candidate in _candidates(exc):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def violates(exc: SQLAlchemyError, constraint: str) -> bool:
    """Check whether ``exc`` was raised by the named constraint."""
    for candidate in _candidates(exc):
        if getattr(candidate, "constraint_name", None) == constraint:
            return True
        diag = getattr(candidate, "diag", None)
        if diag is not None and getattr(diag, "constraint_name", None) == constraint:
            return True
    return constraint in str(getattr(exc, "orig", exc))


@contextmanager
def storage_errors(
    operation: str,
    on_integrity: Callable[[IntegrityError], CatalogError | None] | None = None,
) -> Iterator[None]:
    """Convert SQLAlchemy errors raised inside the block into domain errors.

    Args:
        operation: Name used in logs and in the resulting ``StorageError``.
        on_integrity: Maps an integrity violation to a domain error; returning
            None falls through to ``StorageError``.
    """
    try:
        yield
    except IntegrityError as e:
        mapped = on_integrity(e) if on_integrity else None
        if mapped is not None:
            raise mapped from e
        logger.error("Integrity violation", operation=operation, sqlstate=sqlstate(e))
        raise StorageError(operation, e) from e
    except SQLAlchemyError as e:
        logger.error("Storage failure", operation=operation, error=str(e))
        raise StorageError(operation, e) from e
