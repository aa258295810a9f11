from datetime import date, datetime

import pytest

from supplyhub.services.requests.exceptions import InvalidRequestDate
from supplyhub.utils.request_dates import as_day, format_request_date, parse_request_date


def test_format_uses_day_month_year():
    assert format_request_date(date(2024, 6, 5)) == "05-06-2024"


def test_format_ignores_time_of_day():
    assert format_request_date(datetime(2024, 6, 5, 23, 59)) == "05-06-2024"


def test_parse_day_month_year():
    assert parse_request_date("20-06-2024") == date(2024, 6, 20)


@pytest.mark.parametrize("value", ["2024-06-20", "32-01-2024", "", "tomorrow"])
def test_parse_rejects_other_formats(value):
    with pytest.raises(InvalidRequestDate):
        parse_request_date(value)


def test_as_day_strips_time():
    assert as_day(datetime(2024, 6, 15, 18, 30)) == date(2024, 6, 15)
    assert as_day(date(2024, 6, 15)) == date(2024, 6, 15)
