"""Request date helpers.

Request dates are stored as DD-MM-YYYY strings to match the product
catalog's convention. These helpers convert between that format and
calendar dates.
"""

from datetime import date, datetime

from supplyhub.services.requests.exceptions import InvalidRequestDate

REQUEST_DATE_FORMAT = "%d-%m-%Y"


def format_request_date(day: date | datetime) -> str:
    """Format a date as DD-MM-YYYY."""
    return as_day(day).strftime(REQUEST_DATE_FORMAT)


def parse_request_date(value: str) -> date:
    """Parse a DD-MM-YYYY string.

    Raises:
        InvalidRequestDate: If the value is not a valid DD-MM-YYYY date
    """
    try:
        return datetime.strptime(value.strip(), REQUEST_DATE_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise InvalidRequestDate(f"Invalid request date {value!r}, expected DD-MM-YYYY") from e


def as_day(value: date | datetime) -> date:
    """Drop the time-of-day part, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value
