"""Value types passed in and out of the request services."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class LineItemInput:
    """One product line as submitted by the user."""

    product_code: str
    quantity: int
    notes: str = ""


@dataclass(frozen=True)
class SubmitResult:
    header_id: int
    created: bool  # False when an existing request was replaced
    position_count: int


@dataclass(frozen=True)
class RequestLine:
    """Stored product line joined with its header's export flag."""

    product_code: str
    quantity: int
    notes: str
    submitted_by: str
    created_at: datetime
    exported_downstream: bool


@dataclass(frozen=True)
class ActivityRecord:
    """A day in a period that has a request."""

    date: date
    exported_downstream: bool
    has_request: bool = True
