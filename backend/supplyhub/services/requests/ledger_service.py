"""Request ledger service.

Persists a daily supply request as one header plus its product lines.
Re-submitting for the same (location, warehouse, date) replaces the lines
of the existing header instead of creating a second one.
"""

from collections.abc import Sequence
from datetime import date

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from supplyhub.config import settings
from supplyhub.db.transaction import atomic, read_transaction
from supplyhub.models.request import RequestHeader, RequestPosition, utc_now
from supplyhub.models.utils.sequence import next_id
from supplyhub.services.exceptions import ValidationError
from supplyhub.services.requests.exceptions import RequestConflictError, RequestNotFound
from supplyhub.services.requests.types import LineItemInput, RequestLine, SubmitResult
from supplyhub.utils.request_dates import format_request_date

logger = structlog.get_logger(__name__)


class RequestLedgerService:
    """Service for request header and position persistence.

    Every mutation runs in a single transaction. A lost race surfaces as
    RequestConflictError; the caller decides whether to retry.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def submit(
        self,
        *,
        location: str,
        warehouse_code: str,
        catalog: str,
        request_date: date,
        submitted_by: str,
        lines: Sequence[LineItemInput],
        cost_center: str | None = None,
    ) -> SubmitResult:
        """Create or replace the request for (location, warehouse, date).

        Lines with a quantity of zero or less are dropped. A submission where
        every line is dropped still leaves a header with no positions.

        Raises:
            ValidationError: If location, warehouse or user is empty
            RequestConflictError: If a concurrent write on the same key or counter won
            StorageUnavailableError: If the database failed
        """
        if not location or not warehouse_code:
            raise ValidationError("Location and warehouse code are required")
        if not submitted_by:
            raise ValidationError("Submitting user is required")

        date_key = format_request_date(request_date)
        kept = [line for line in lines if line.quantity > 0]

        async with atomic(self.session, RequestConflictError):
            header = await self._find_header(location, warehouse_code, date_key)
            created = header is None

            if header is None:
                header_id = await next_id(self.session, settings.header_sequence_name)
                header = RequestHeader(
                    id=header_id,
                    location=location,
                    warehouse_code=warehouse_code,
                    request_date=date_key,
                    request_day=request_date,
                    catalog=catalog,
                    submitted_by=submitted_by,
                    cost_center=cost_center,
                )
                self.session.add(header)
                await self.session.flush()
            else:
                await self.session.execute(delete(RequestPosition).where(RequestPosition.header_id == header.id))

            header_id = header.id
            now = utc_now()
            self.session.add_all(
                RequestPosition(
                    header_id=header_id,
                    product_code=line.product_code,
                    quantity=line.quantity,
                    notes=line.notes,
                    submitted_by=submitted_by,
                    created_at=now,
                )
                for line in kept
            )
            await self.session.flush()

        logger.info(
            "Request created" if created else "Request replaced",
            header_id=header_id,
            location=location,
            warehouse_code=warehouse_code,
            request_date=date_key,
            position_count=len(kept),
            skipped=len(lines) - len(kept),
        )
        return SubmitResult(header_id=header_id, created=created, position_count=len(kept))

    async def retract(self, *, location: str, warehouse_code: str, request_date: date) -> bool:
        """Delete the request and all its lines. Returns False if there was none."""
        date_key = format_request_date(request_date)

        async with atomic(self.session, RequestConflictError):
            header = await self._find_header(location, warehouse_code, date_key)
            if header is None:
                return False
            header_id = header.id
            await self.session.execute(delete(RequestPosition).where(RequestPosition.header_id == header_id))
            await self.session.execute(delete(RequestHeader).where(RequestHeader.id == header_id))  # type: ignore[arg-type]

        logger.info("Request retracted", header_id=header_id, location=location, request_date=date_key)
        return True

    async def fetch(self, *, location: str, warehouse_code: str, request_date: date) -> list[RequestLine]:
        """Get the stored lines of a request, empty if none was submitted."""
        date_key = format_request_date(request_date)
        statement = (
            select(RequestPosition, RequestHeader.exported_downstream)
            .join(RequestHeader, RequestPosition.header_id == RequestHeader.id)  # type: ignore[arg-type]
            .where(
                RequestHeader.location == location,
                RequestHeader.warehouse_code == warehouse_code,
                RequestHeader.request_date == date_key,
            )
            .order_by(RequestPosition.id)  # type: ignore[arg-type]
        )
        async with read_transaction(self.session):
            result = await self.session.execute(statement)
            rows = result.all()

        # Attribution comes from each line, not the header
        return [
            RequestLine(
                product_code=position.product_code,
                quantity=position.quantity,
                notes=position.notes,
                submitted_by=position.submitted_by,
                created_at=position.created_at,
                exported_downstream=bool(exported),
            )
            for position, exported in rows
        ]

    async def get_header(self, *, location: str, warehouse_code: str, request_date: date) -> RequestHeader:
        """Get the request header, raising RequestNotFound if absent."""
        async with read_transaction(self.session):
            header = await self._find_header(location, warehouse_code, format_request_date(request_date))
        if header is None:
            raise RequestNotFound()
        return header

    async def _find_header(self, location: str, warehouse_code: str, date_key: str) -> RequestHeader | None:
        statement = (
            select(RequestHeader)
            .where(
                RequestHeader.location == location,
                RequestHeader.warehouse_code == warehouse_code,
                RequestHeader.request_date == date_key,
            )
            .execution_options(populate_existing=True)  # Export flag may change outside this session
        )
        result = await self.session.execute(statement)
        return result.scalars().first()
