"""Transaction boundary and storage error translation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from supplyhub.models.request import REQUEST_HEADER_KEY_CONSTRAINT
from supplyhub.services.exceptions import ConflictError, ServiceError, StorageUnavailableError

logger = structlog.get_logger(__name__)

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})
_CONFLICT_MARKERS = ("could not serialize", "could not obtain lock", "database is locked", "deadlock")

_UNIQUE_VIOLATION_SQLSTATE = "23505"
# Unique keys two concurrent writers can race on: PostgreSQL constraint names
# and the column lists SQLite reports ("UNIQUE constraint failed: counters.name")
_RACED_CONSTRAINTS = (f'"{REQUEST_HEADER_KEY_CONSTRAINT.name}"', '"counters_pkey"')
_RACED_SQLITE_COLUMNS = (
    "request_headers.location, request_headers.warehouse_code, request_headers.request_date",
    "counters.name",
)


def _sqlstate(exc: DBAPIError) -> str | None:
    """Extract SQLSTATE from the driver error, if the driver exposes one."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _is_raced_key(exc: IntegrityError) -> bool:
    """True for a unique violation on the header key or a counter row."""
    # Driver message only; the SQL text would match column names too
    error_str = str(exc.orig).lower()
    if _sqlstate(exc) == _UNIQUE_VIOLATION_SQLSTATE:
        return any(name in error_str for name in _RACED_CONSTRAINTS)
    if "unique constraint failed" in error_str:
        return any(columns in error_str for columns in _RACED_SQLITE_COLUMNS)
    return False


def is_conflict(exc: BaseException) -> bool:
    """True if the error means a concurrent writer won and a retry may succeed."""
    if isinstance(exc, StaleDataError):
        return True
    if isinstance(exc, IntegrityError):
        return _is_raced_key(exc)
    if isinstance(exc, DBAPIError):
        if _sqlstate(exc) in _CONFLICT_SQLSTATES:
            return True
        txt = str(exc).lower()
        return any(marker in txt for marker in _CONFLICT_MARKERS)
    return False


def translate_error(
    exc: SQLAlchemyError | OSError,
    conflict_class: type[ConflictError] = ConflictError,
) -> ServiceError:
    """Map a storage-layer exception onto the service error taxonomy."""
    if is_conflict(exc):
        logger.warning("Transaction conflict", error=str(exc))
        return conflict_class(str(exc))
    logger.error("Storage failure", error=str(exc), exc_info=exc)
    return StorageUnavailableError(str(exc))


@asynccontextmanager
async def atomic(
    session: AsyncSession,
    conflict_class: type[ConflictError] = ConflictError,
) -> AsyncIterator[AsyncSession]:
    """Run a block as one all-or-nothing transaction.

    Commits on normal exit. Any exception rolls everything back;
    storage errors surface as ConflictError or StorageUnavailableError.

    Usage:
        async with atomic(session):
            session.add(record)
            await session.flush()
    """
    try:
        yield session
        await session.commit()
    except (SQLAlchemyError, OSError) as e:
        await session.rollback()
        raise translate_error(e, conflict_class) from e
    except BaseException:
        await session.rollback()
        raise


@asynccontextmanager
async def read_transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run read-only queries and end the transaction afterwards.

    The transaction is committed rather than rolled back so loaded objects
    stay usable (expire_on_commit=False). Storage errors are translated
    the same way as in atomic().
    """
    try:
        yield session
        await session.commit()
    except (SQLAlchemyError, OSError) as e:
        await session.rollback()
        raise translate_error(e) from e
    except BaseException:
        await session.rollback()
        raise
