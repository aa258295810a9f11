"""Sequential identifier allocation over the counters table."""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import select

from supplyhub.models.counter import Counter

logger = structlog.get_logger(__name__)


async def next_id(session: AsyncSession, sequence_name: str) -> int:
    """Increment the named counter and return the new value.

    Must run inside the caller's transaction: the increment is only durable
    once the entity consuming the value commits, and an abort rolls it back.
    A missing counter row counts as 0.

    The write is a compare-and-set on the value that was read, so two
    transactions can never both act on the same value:
    - PostgreSQL: the row lock queues concurrent allocators; under
      SERIALIZABLE the loser aborts with a serialization failure.
    - Any engine: if the value moved since it was read, the update matches
      no row and StaleDataError is raised.
    - Two transactions creating a missing row collide on the primary key.

    Usage:
        async with atomic(session):
            header_id = await next_id(session, "request_headers")
            session.add(RequestHeader(id=header_id, ...))
    """
    stmt = select(Counter.current_id).where(Counter.name == sequence_name).with_for_update()
    result = await session.execute(stmt)
    current = result.scalars().first()

    if current is None:
        session.add(Counter(name=sequence_name, current_id=1))
        await session.flush()
        value = 1
    else:
        value = current + 1
        update_stmt = (
            update(Counter)
            .where(Counter.name == sequence_name, Counter.current_id == current)  # type: ignore[arg-type]
            .values(current_id=value)
            .execution_options(synchronize_session=False)
        )
        update_result = await session.execute(update_stmt)
        if update_result.rowcount != 1:  # type: ignore[attr-defined]
            raise StaleDataError(f"Counter {sequence_name!r} changed concurrently (read {current})")

    logger.debug("Allocated sequence value", sequence=sequence_name, value=value)
    return value
