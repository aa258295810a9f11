"""Request ledger API endpoints."""

from datetime import date
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status

from supplyhub.api.v1.requests.dependencies import LedgerServiceDep, PeriodServiceDep, request_date_path
from supplyhub.api.v1.requests.schemas import (
    ActivityDayResponse,
    ActivityResponse,
    RequestLineResponse,
    RequestLinesResponse,
    StatusResponse,
    SubmitRequestBody,
    SubmitResponse,
)
from supplyhub.services.exceptions import ConflictError, StorageUnavailableError, ValidationError
from supplyhub.services.requests.types import SubmitResult
from supplyhub.utils.conflict_retry import get_conflict_retrying
from supplyhub.utils.request_dates import format_request_date

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["requests"])

RequestDate = Annotated[date, Depends(request_date_path)]


@router.post("/requests", response_model=SubmitResponse, operation_id="submitRequest")
async def submit_request(
    body: SubmitRequestBody,
    service: LedgerServiceDep,
    response: Response,
) -> SubmitResponse:
    """Create or replace the request for a location, warehouse and date.

    - Lines with zero or negative quantity are dropped
    - Conflicting concurrent submissions are retried before giving up with 409
    """
    lines = [line.to_input() for line in body.lines]
    result: SubmitResult | None = None
    try:
        async for attempt in get_conflict_retrying():
            with attempt:
                result = await service.submit(
                    location=body.location,
                    warehouse_code=body.warehouse_code,
                    catalog=body.catalog,
                    request_date=body.request_date,
                    submitted_by=body.submitted_by,
                    lines=lines,
                    cost_center=body.cost_center,
                )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConflictError:
        logger.warning("Request submission kept conflicting", location=body.location, request_date=body.request_date)
        raise HTTPException(status_code=409, detail="Request is being modified concurrently, try again")
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail="Storage unavailable")

    assert result is not None
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return SubmitResponse.from_result(result)


@router.get(
    "/requests/{location}/{warehouse_code}/{request_date}",
    response_model=RequestLinesResponse,
    operation_id="getRequestLines",
)
async def get_request_lines(
    location: str,
    warehouse_code: str,
    request_date: RequestDate,
    service: LedgerServiceDep,
) -> RequestLinesResponse:
    """Get the stored lines for a day (empty if nothing was requested)."""
    try:
        lines = await service.fetch(location=location, warehouse_code=warehouse_code, request_date=request_date)
    except ConflictError:
        raise HTTPException(status_code=409, detail="Request is being modified concurrently, try again")
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail="Storage unavailable")
    return RequestLinesResponse(lines=[RequestLineResponse.from_line(line) for line in lines])


@router.delete(
    "/requests/{location}/{warehouse_code}/{request_date}",
    response_model=StatusResponse,
    operation_id="retractRequest",
)
async def retract_request(
    location: str,
    warehouse_code: str,
    request_date: RequestDate,
    service: LedgerServiceDep,
) -> StatusResponse:
    """Delete the request for a day. Deleting a missing request is not an error."""
    try:
        deleted = await service.retract(location=location, warehouse_code=warehouse_code, request_date=request_date)
    except ConflictError:
        raise HTTPException(status_code=409, detail="Request is being modified concurrently, try again")
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail="Storage unavailable")

    date_key = format_request_date(request_date)
    if deleted:
        return StatusResponse(status="deleted", message=f"Request for {date_key} deleted")
    return StatusResponse(status="not_found", message=f"No request for {date_key}")


@router.get(
    "/activity/{location}/{warehouse_code}",
    response_model=ActivityResponse,
    operation_id="listActivity",
)
async def list_activity(
    location: str,
    warehouse_code: str,
    start: date,
    end: date,
    service: PeriodServiceDep,
) -> ActivityResponse:
    """List days between start and end (inclusive, ISO dates) that have a request."""
    try:
        records = await service.list_activity(location=location, warehouse_code=warehouse_code, start=start, end=end)
    except ConflictError:
        raise HTTPException(status_code=409, detail="Requests are being modified concurrently, try again")
    except StorageUnavailableError:
        raise HTTPException(status_code=503, detail="Storage unavailable")
    return ActivityResponse(days=[ActivityDayResponse.from_record(record) for record in records])
