"""RequestHeader and RequestPosition database models."""

from datetime import UTC, date, datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


# One live header per (location, warehouse, date)
REQUEST_HEADER_KEY_CONSTRAINT = UniqueConstraint(
    "location", "warehouse_code", "request_date", name="uq_request_header_key"
)


class RequestHeader(SQLModel, table=True):
    """Daily supply request for one location and warehouse."""

    __tablename__ = "request_headers"
    __table_args__ = (
        REQUEST_HEADER_KEY_CONSTRAINT,
        Index("ix_request_headers_location_warehouse_day", "location", "warehouse_code", "request_day"),
    )

    # Minted by the counters table, never by the database
    id: int = Field(sa_column=Column(Integer, primary_key=True, autoincrement=False))

    location: str
    warehouse_code: str
    request_date: str = Field(max_length=10)  # DD-MM-YYYY, the catalog's date convention
    request_day: date = Field(sa_column=Column(Date, nullable=False))  # Sortable copy of request_date

    catalog: str
    submitted_by: str
    cost_center: str | None = None

    # Set by the downstream export job, only read here
    exported_downstream: bool = False

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))


NOTES_MAX_LENGTH = 500


class RequestPosition(SQLModel, table=True):
    """A single product line under a request header."""

    __tablename__ = "request_positions"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_request_position_quantity_positive"),)

    id: int | None = Field(default=None, primary_key=True)
    header_id: int = Field(
        sa_column=Column(Integer, ForeignKey("request_headers.id", ondelete="CASCADE"), index=True, nullable=False),
    )
    product_code: str
    quantity: int
    notes: str = Field(default="", max_length=NOTES_MAX_LENGTH)

    submitted_by: str
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
