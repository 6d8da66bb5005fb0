"""Tests for the date classifier and speech formatting helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from weather_bridge import date_util
from weather_bridge.schemas import DataGranularity, DateDescriptor, DateRangeError

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)


def test_current_is_always_current_conditions() -> None:
    result = date_util.classify_date("current")

    assert isinstance(result, DateDescriptor)
    assert result.is_today is True
    assert result.data_granularity == DataGranularity.CURRENT_CONDITIONS
    assert result.display_phrase == " is currently "
    assert result.lead_in == " is currently "


@pytest.mark.parametrize(
    ("token", "granularity"),
    [
        ("2024-06-10", DataGranularity.SHORT_FORECAST),
        ("2024-06-13", DataGranularity.SHORT_FORECAST),
        ("2024-06-14", DataGranularity.EXTENDED_FORECAST),
        ("2024-06-19", DataGranularity.EXTENDED_FORECAST),
    ],
)
def test_forecast_window_follows_day_offset(token: str, granularity: DataGranularity) -> None:
    result = date_util.classify_date(token, now=NOW)

    assert isinstance(result, DateDescriptor)
    assert result.data_granularity == granularity


def test_more_than_nine_days_ahead_is_rejected() -> None:
    result = date_util.classify_date("2024-06-20", now=NOW)

    assert result == DateRangeError(error=date_util.FUTURE_LIMIT_MESSAGE)


def test_past_days_are_rejected() -> None:
    result = date_util.classify_date("2024-06-09", now=NOW)

    assert result == DateRangeError(error=date_util.HISTORICAL_MESSAGE)


def test_today_descriptor() -> None:
    result = date_util.classify_date("2024-06-10", now=NOW)

    assert isinstance(result, DateDescriptor)
    assert result.is_today is True
    assert result.display_phrase == " today"
    assert result.lead_in == " today is forecast to be "
    assert (result.day, result.month, result.year) == (10, 6, 2024)
    assert result.weekday == "Monday"
    assert result.period == 0


def test_future_date_in_current_year_is_spelled_out() -> None:
    result = date_util.classify_date("2024-06-13", now=NOW)

    assert isinstance(result, DateDescriptor)
    assert result.is_today is False
    assert result.display_phrase == " on Thursday June 13th"
    assert result.period == 6


def test_future_date_in_other_year_uses_numeric_form() -> None:
    now = datetime(2024, 12, 1, 9, 0, tzinfo=timezone.utc)

    result = date_util.classify_date("2025-01-02", now=now)

    assert isinstance(result, DateDescriptor)
    assert result.display_phrase == " on Thursday 1/2/2025"


@pytest.mark.parametrize("token", ["tomorrow", "Tomorrow", "TOMORROW"])
def test_tomorrow_is_one_day_ahead(token: str) -> None:
    result = date_util.classify_date(token, now=NOW)

    assert isinstance(result, DateDescriptor)
    assert result.day == 11
    assert result.display_phrase == " on Tuesday June 11th"
    assert result.data_granularity == DataGranularity.SHORT_FORECAST


def test_unknown_token_falls_back_to_today() -> None:
    result = date_util.classify_date("someday", now=NOW)

    assert isinstance(result, DateDescriptor)
    assert result.is_today is True


def test_offset_mixes_utc_target_with_local_today() -> None:
    # 22:00 at UTC-5 is already the next day in UTC.
    local_now = datetime(2024, 6, 10, 22, 0, tzinfo=timezone(timedelta(hours=-5)))

    result = date_util.classify_date("tomorrow", now=local_now)

    assert isinstance(result, DateDescriptor)
    assert result.day == 12
    assert result.period == 4


def test_offset_ignores_month_rollover() -> None:
    now = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)

    result = date_util.classify_date("2024-07-01", now=now)

    assert result == DateRangeError(error=date_util.HISTORICAL_MESSAGE)


@pytest.mark.parametrize(
    ("day", "expected"),
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st")],
)
def test_ordinal(day: int, expected: str) -> None:
    assert date_util.ordinal(day) == expected


@pytest.mark.parametrize(
    ("hour", "minute", "expected"),
    [
        (0, 5, "12:05 in the morning"),
        (9, 30, "9:30 in the morning"),
        (12, 35, "12:35 in the afternoon"),
        (17, 0, "5:00 in the evening"),
        (20, 15, "8:15 at night"),
    ],
)
def test_format_time(hour: int, minute: int, expected: str) -> None:
    assert date_util.format_time(datetime(2024, 6, 10, hour, minute)) == expected


@pytest.mark.parametrize(
    ("hour", "minute", "expected"),
    [(0, 5, "12:05 am"), (11, 59, "11:59 am"), (12, 35, "12:35 pm"), (23, 0, "11:00 pm")],
)
def test_format_time_am_pm(hour: int, minute: int, expected: str) -> None:
    assert date_util.format_time_am_pm(datetime(2024, 6, 10, hour, minute)) == expected
