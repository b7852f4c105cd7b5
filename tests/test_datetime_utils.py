from datetime import date, datetime, timedelta, timezone

import pytest

from daily_payroll.utils.datetime_utils import (
    MONTH_NAMES,
    get_month_name,
    get_month_number,
    month_date_range,
    month_name_for,
    parse_date,
    to_naive_utc,
    working_days_in_month,
)


def test_working_days_february_leap_year():
    # 2024-02-01 is a Thursday, 29 days
    assert working_days_in_month(2024, 1) == 21


def test_working_days_february_common_year():
    # 2023-02-01 is a Wednesday, 28 days
    assert working_days_in_month(2023, 1) == 20


@pytest.mark.parametrize("year,month_index,expected", [
    (2024, 0, 23),
    (2024, 8, 21),
    (2023, 11, 21),
    (2025, 5, 21),
])
def test_working_days_other_months(year, month_index, expected):
    assert working_days_in_month(year, month_index) == expected


def test_month_name_round_trip():
    for name in MONTH_NAMES:
        assert get_month_name(get_month_number(name)) == name


@pytest.mark.parametrize("name", ["january", "Janvier", "", "Smarch"])
def test_unknown_month_name_maps_to_january(name):
    assert get_month_number(name) == 0


def test_month_date_range_handles_leap_day():
    assert month_date_range(2024, 1) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_date_range(2023, 1) == (date(2023, 2, 1), date(2023, 2, 28))
    assert month_date_range(2023, 11) == (date(2023, 12, 1), date(2023, 12, 31))


def test_month_name_for_datetime_and_date():
    assert month_name_for(date(2024, 12, 31)) == ("December", 2024)
    assert month_name_for(datetime(2025, 1, 1, 0, 30)) == ("January", 2025)


def test_to_naive_utc_converts_aware_values():
    aware = datetime(2024, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=1)))
    assert to_naive_utc(aware) == datetime(2024, 3, 1, 8, 0)
    assert to_naive_utc(datetime(2024, 3, 1, 9, 0)) == datetime(2024, 3, 1, 9, 0)


def test_parse_date_rejects_malformed_input():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("2023-02-29") is None
    assert parse_date("29/02/2024") is None
