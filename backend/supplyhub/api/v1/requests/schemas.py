"""API schemas for request ledger endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_serializer, field_validator

from supplyhub.models.request import NOTES_MAX_LENGTH
from supplyhub.services.requests.exceptions import InvalidRequestDate
from supplyhub.services.requests.types import ActivityRecord, LineItemInput, RequestLine, SubmitResult
from supplyhub.utils.datetime_utils import to_api_timezone
from supplyhub.utils.request_dates import parse_request_date

# =============================================================================
# Request Schemas
# =============================================================================


class LineItemBody(BaseModel):
    """Product line in a submission. Zero quantities are accepted and dropped."""

    product_code: str = Field(min_length=1)
    quantity: int
    notes: str = Field(default="", max_length=NOTES_MAX_LENGTH)

    def to_input(self) -> LineItemInput:
        return LineItemInput(product_code=self.product_code, quantity=self.quantity, notes=self.notes)


class SubmitRequestBody(BaseModel):
    """Daily supply request submission."""

    location: str = Field(min_length=1)
    warehouse_code: str = Field(min_length=1)
    catalog: str
    request_date: date
    submitted_by: str = Field(min_length=1)
    cost_center: str | None = None
    lines: list[LineItemBody] = []

    @field_validator("request_date", mode="before")
    @classmethod
    def parse_date(cls, v: object) -> object:
        """Accept DD-MM-YYYY, the catalog's date format."""
        if isinstance(v, str):
            try:
                return parse_request_date(v)
            except InvalidRequestDate as e:
                raise ValueError(str(e)) from e
        return v


# =============================================================================
# Response Schemas
# =============================================================================


class SubmitResponse(BaseModel):
    header_id: int
    created: bool
    position_count: int

    @classmethod
    def from_result(cls, result: SubmitResult) -> "SubmitResponse":
        return cls(header_id=result.header_id, created=result.created, position_count=result.position_count)


class RequestLineResponse(BaseModel):
    """Stored product line."""

    product_code: str
    quantity: int
    notes: str
    submitted_by: str
    created_at: datetime
    exported_downstream: bool

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_line(cls, line: RequestLine) -> "RequestLineResponse":
        return cls(
            product_code=line.product_code,
            quantity=line.quantity,
            notes=line.notes,
            submitted_by=line.submitted_by,
            created_at=line.created_at,
            exported_downstream=line.exported_downstream,
        )


class RequestLinesResponse(BaseModel):
    lines: list[RequestLineResponse]


class ActivityDayResponse(BaseModel):
    """Calendar day with a request. Date is ISO (YYYY-MM-DD) for the calendar widget."""

    date: date
    has_request: bool
    exported_downstream: bool

    @classmethod
    def from_record(cls, record: ActivityRecord) -> "ActivityDayResponse":
        return cls(date=record.date, has_request=record.has_request, exported_downstream=record.exported_downstream)


class ActivityResponse(BaseModel):
    days: list[ActivityDayResponse]


class StatusResponse(BaseModel):
    """Generic status response."""

    status: str
    message: str
