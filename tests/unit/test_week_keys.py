from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from flowboard.week_keys import (
    format_week_key,
    parse_date_value,
    parse_week_key,
    sort_week_keys,
    to_week_key,
    week_sort_key,
)


def test_iso_date_and_datetime_strings():
    assert to_week_key("2024-01-08") == "2024-W02"
    assert to_week_key("2024-01-08T10:30:00") == "2024-W02"
    assert to_week_key("2024-01-08T10:30:00Z") == "2024-W02"
    assert to_week_key(" 2024-01-01 ") == "2024-W01"


def test_iso_week_year_differs_from_calendar_year():
    # Monday 30 Dec 2024 belongs to the first ISO week of 2025
    assert to_week_key("2024-12-30") == "2025-W01"
    # Friday 1 Jan 2021 belongs to the last ISO week of 2020
    assert to_week_key("2021-01-01") == "2020-W53"


def test_native_values():
    assert to_week_key(date(2024, 1, 8)) == "2024-W02"
    assert to_week_key(datetime(2024, 1, 8, 23, 59)) == "2024-W02"
    assert to_week_key(pd.Timestamp("2024-01-08")) == "2024-W02"
    assert to_week_key(np.datetime64("2024-01-08")) == "2024-W02"


def test_ambiguous_date_uses_month_day_year_first():
    # 3 April is also valid, but month/day/year is tried first -> 4 March 2024
    assert parse_date_value("03-04-2024") == date(2024, 3, 4)
    assert to_week_key("03-04-2024") == "2024-W10"
    assert to_week_key("03/04/2024") == "2024-W10"


def test_day_month_year_when_month_day_is_invalid():
    assert parse_date_value("13/04/2024") == date(2024, 4, 13)
    assert to_week_key("13/04/2024") == "2024-W15"


def test_year_month_day_fallback():
    assert parse_date_value("2024/01/08") == date(2024, 1, 8)
    assert parse_date_value("2024-1-8") == date(2024, 1, 8)


def test_two_digit_year():
    assert parse_date_value("1/8/24") == date(2024, 1, 8)


def test_custom_trial_order():
    assert parse_date_value("03-04-2024", orders=("dmy", "mdy", "ymd")) == date(2024, 4, 3)
    assert to_week_key("03-04-2024", orders=("dmy", "mdy", "ymd")) == "2024-W14"


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "   ",
        "not a date",
        "31/02/2024",
        "1/2",
        "a/b/c",
        "99999999999999999999/1/2024",
        "1/1/99999999999999999999",
        "1" * 5000 + "/1/2024",
        np.datetime64(20000, "Y"),
        20240108,
        3.5,
        True,
        float("nan"),
        pd.NaT,
    ],
)
def test_unparseable_values_signal_failure(value):
    assert parse_date_value(value) is None
    assert to_week_key(value) is None


def test_unknown_order_raises():
    with pytest.raises(ValueError):
        parse_date_value("03-04-2024", orders=("ydm",))


def test_week_key_helpers():
    assert format_week_key(2024, 2) == "2024-W02"
    assert parse_week_key("2024-W02") == (2024, 2)
    with pytest.raises(ValueError):
        parse_week_key("2024-W2")
    with pytest.raises(ValueError):
        parse_week_key("Unknown")
    with pytest.raises(ValueError):
        parse_week_key("2024-W54")


def test_string_order_matches_numeric_order():
    values = [
        "2024-12-30", "2023-01-02", "2024-03-04", "2024-01-08", "2021-01-01",
        "2024-11-11", "2023-12-31", "2024-02-29", "2025-06-15", "2024-09-30",
    ]
    keys = [to_week_key(v) for v in values]
    assert sorted(keys) == sorted(keys, key=week_sort_key)


def test_sort_week_keys_dedupes_and_orders():
    keys = ["2025-W01", "2024-W52", "2024-W03", "2024-W52"]
    assert sort_week_keys(keys) == ["2024-W03", "2024-W52", "2025-W01"]
