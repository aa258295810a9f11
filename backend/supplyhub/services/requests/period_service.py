"""Period index over request headers.

Answers which days in a date range have a request for a location and
warehouse, and whether each was already exported downstream.
"""

from datetime import date, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from supplyhub.db.transaction import read_transaction
from supplyhub.models.request import RequestHeader
from supplyhub.services.requests.exceptions import InvalidRequestDate
from supplyhub.services.requests.types import ActivityRecord
from supplyhub.utils.request_dates import as_day, parse_request_date

logger = structlog.get_logger(__name__)


class PeriodIndexService:
    """Read-only service for calendar activity."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_activity(
        self,
        *,
        location: str,
        warehouse_code: str,
        start: date | datetime,
        end: date | datetime,
    ) -> list[ActivityRecord]:
        """List days within [start, end] that have a request, oldest first.

        A header counts as activity even when all of its lines were dropped.
        Days without a header are absent from the result.
        """
        start_day, end_day = as_day(start), as_day(end)
        if start_day > end_day:
            return []

        # request_day narrows the scan; request_date stays the source of truth
        statement = select(RequestHeader.request_date, RequestHeader.exported_downstream).where(
            RequestHeader.location == location,
            RequestHeader.warehouse_code == warehouse_code,
            RequestHeader.request_day >= start_day,  # type: ignore[operator]
            RequestHeader.request_day <= end_day,  # type: ignore[operator]
        )
        async with read_transaction(self.session):
            result = await self.session.execute(statement)
            rows = result.all()

        exported_by_day: dict[date, bool] = {}
        for date_key, exported in rows:
            try:
                day = parse_request_date(date_key)
            except InvalidRequestDate:
                logger.warning("Skipping header with unparseable date", request_date=date_key, location=location)
                continue
            if not start_day <= day <= end_day:
                continue
            exported_by_day[day] = exported_by_day.get(day, False) or bool(exported)

        return [
            ActivityRecord(date=day, exported_downstream=exported)
            for day, exported in sorted(exported_by_day.items())
        ]
