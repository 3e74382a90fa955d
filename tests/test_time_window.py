"""Tests for wall-clock time helpers."""
from datetime import date, datetime

import pytest

from salon.shared.time_window import (
    add_minutes,
    compute_end_time,
    day_of_week,
    format_minutes,
    normalize_time,
    overlaps,
    parse_time,
)


def test_parse_time_accepts_hh_mm_and_seconds():
    assert parse_time("00:00") == 0
    assert parse_time("09:30") == 570
    assert parse_time("23:59") == 1439
    assert parse_time("17:45:00") == 1065


@pytest.mark.parametrize("value", ["", "9:00", "24:00", "12:60", "ab:cd", "12-30", "12:30:99", None])
def test_parse_time_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        parse_time(value)


def test_format_minutes_pads_and_bounds():
    assert format_minutes(0) == "00:00"
    assert format_minutes(545) == "09:05"
    with pytest.raises(ValueError):
        format_minutes(1440)
    with pytest.raises(ValueError):
        format_minutes(-1)


def test_normalize_time_drops_seconds():
    assert normalize_time("08:15:00") == "08:15"


def test_end_time_same_day():
    """17:45 plus 30 minutes ends at 18:15."""
    assert compute_end_time(date(2025, 6, 2), "17:45", 30) == ("18:15", False)


def test_end_time_rolls_past_midnight():
    """23:50 plus 30 minutes lands on the next day instead of wrapping silently."""
    end_time, crosses = compute_end_time(date(2025, 6, 2), "23:50", 30)
    assert end_time == "00:20"
    assert crosses is True

    assert add_minutes(date(2025, 6, 2), "23:50", 30) == datetime(2025, 6, 3, 0, 20)


def test_end_time_exactly_midnight_counts_as_next_day():
    assert compute_end_time(date(2025, 6, 2), "23:30", 30) == ("00:00", True)


def test_overlaps_is_half_open():
    assert overlaps(600, 660, 630, 690)
    assert overlaps(600, 660, 600, 630)
    assert not overlaps(600, 660, 660, 720)
    assert not overlaps(660, 720, 600, 660)


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2025, 6, 1)) == 0  # Sunday
    assert day_of_week(date(2025, 6, 2)) == 1  # Monday
    assert day_of_week(date(2025, 6, 7)) == 6  # Saturday
