#!/usr/bin/env python3
"""
Тесты системы часовых поясов и календарного дня
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.utils.timezone_utils import (
    day_key,
    get_user_local_time,
    local_today,
    parse_utc_offset,
    to_day,
    today_source,
    validate_timezone,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("UTC+3", timedelta(hours=3)),
        ("UTC-5", timedelta(hours=-5)),
        ("UTC+0", timedelta(0)),
        ("UTC+5:30", timedelta(hours=5, minutes=30)),
        ("UTC-3:30", -timedelta(hours=3, minutes=30)),
        ("invalid", None),
        ("UTC++3", None),
        ("UTC-", None),
        ("UTC+20", None),
    ],
)
def test_timezone_parsing(value, expected):
    assert parse_utc_offset(value) == expected


def test_timezone_validation():
    assert validate_timezone("Europe/Moscow")
    assert validate_timezone("UTC")
    assert validate_timezone("UTC+3")
    assert not validate_timezone("invalid_timezone")


def test_local_time_crosses_midnight():
    late_utc = datetime(2024, 1, 3, 22, 30, tzinfo=timezone.utc)
    assert get_user_local_time("UTC+3", late_utc).date() == date(2024, 1, 4)
    assert get_user_local_time("America/New_York", late_utc).date() == date(2024, 1, 3)
    assert get_user_local_time("Not/AZone", late_utc) == late_utc
    assert get_user_local_time(None, late_utc) == late_utc


def test_day_normalization():
    assert day_key(date(2024, 1, 5)) == "2024-01-05"
    assert day_key(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"
    assert day_key("2024-1-5") == "2024-01-05"
    assert to_day("2024-02-29") == date(2024, 2, 29)
    with pytest.raises(ValueError):
        to_day("2024-02-30")


def test_today_source_returns_day_string():
    today = today_source("UTC")()
    assert today == local_today("UTC")
    assert len(today) == 10
    datetime.strptime(today, "%Y-%m-%d")
