"""FastAPI dependencies for service injection."""

from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from supplyhub.db import get_session
from supplyhub.services.requests.exceptions import InvalidRequestDate
from supplyhub.services.requests.ledger_service import RequestLedgerService
from supplyhub.services.requests.period_service import PeriodIndexService
from supplyhub.utils.request_dates import parse_request_date


async def get_ledger_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> RequestLedgerService:
    """Get a RequestLedgerService instance with the current session."""
    return RequestLedgerService(session)


async def get_period_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PeriodIndexService:
    """Get a PeriodIndexService instance with the current session."""
    return PeriodIndexService(session)


def request_date_path(request_date: str) -> date:
    """Parse the DD-MM-YYYY request date path parameter."""
    try:
        return parse_request_date(request_date)
    except InvalidRequestDate as e:
        raise HTTPException(status_code=422, detail=str(e))


# Type aliases for cleaner endpoint signatures
LedgerServiceDep = Annotated[RequestLedgerService, Depends(get_ledger_service)]
PeriodServiceDep = Annotated[PeriodIndexService, Depends(get_period_service)]
