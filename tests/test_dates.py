from datetime import date

import pytest

from stockexpiry import ExpiryStatus, classify, days_left, parse_expiry


@pytest.mark.parametrize(
    "text, expected",
    [
        ("15/06/2024", date(2024, 6, 15)),
        ("15.06.2024", date(2024, 6, 15)),
        ("5/6/24", date(2024, 6, 5)),
        ("2024-06-30", date(2024, 6, 30)),
        ("2024-06-30T10:15:00", date(2024, 6, 30)),
        ("2024-06", date(2024, 6, 1)),
        ("2024-6-5", date(2024, 6, 5)),
        ("2024-06-5", date(2024, 6, 5)),
        ("2024-6-30T08:00", date(2024, 6, 30)),
        ("06/2024", date(2024, 6, 30)),
        ("12/2024", date(2024, 12, 31)),
        ("6/25", date(2025, 6, 30)),
        ("  01/2024 ", date(2024, 1, 31)),
    ],
)
def test_parse_accepted_formats(text, expected):
    assert parse_expiry(text) == expected


def test_month_year_resolves_to_last_day_including_leap_february():
    assert parse_expiry("02/2024") == date(2024, 2, 29)
    assert parse_expiry("02/2023") == date(2023, 2, 28)


def test_day_overflow_rolls_into_next_month():
    assert parse_expiry("31/04/2024") == date(2024, 5, 1)


@pytest.mark.parametrize(
    "text",
    [None, "", "   ", "soon", "2024-13-45", "2024-2-30", "not-a-date", "1/2/3/4", "2024", "ab/cd"],
)
def test_parse_failures_return_none(text):
    assert parse_expiry(text) is None


def test_days_left_sign_convention():
    today = date(2024, 3, 10)
    assert days_left(date(2024, 3, 10), today) == 0
    assert days_left(date(2024, 3, 9), today) == -1
    assert days_left(date(2024, 3, 11), today) == 1
    assert days_left(None, today) is None


def test_classify_against_threshold():
    assert classify(45, 90) is ExpiryStatus.NEAR
    assert classify(45, 30) is ExpiryStatus.SAFE
    assert classify(0, 90) is ExpiryStatus.NEAR
    assert classify(90, 90) is ExpiryStatus.NEAR
    assert classify(91, 90) is ExpiryStatus.SAFE
    assert classify(-1, 90) is ExpiryStatus.EXPIRED
    assert classify(None, 90) is ExpiryStatus.UNKNOWN
