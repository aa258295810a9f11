"""Utility functions and helpers."""

from supplyhub.utils.datetime_utils import to_api_timezone
from supplyhub.utils.request_dates import as_day, format_request_date, parse_request_date

__all__ = [
    "to_api_timezone",
    "as_day",
    "format_request_date",
    "parse_request_date",
]
