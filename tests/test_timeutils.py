"""
Tests de aritmética de horas "HH:mm".
"""

from datetime import date, datetime, time

import pytest

from agenda.scheduling.errors import MalformedTimeError
from agenda.scheduling.timeutils import (
    add_minutes,
    calendar_day,
    duration_minutes,
    format_time,
    minutes_to_time,
    normalize_time,
    parse_time,
    time_to_minutes,
)

HALF_HOURS = [f"{h:02d}:{m:02d}" for h in range(24) for m in (0, 30)]


class TestTimeToMinutes:
    def test_parses_hours_and_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_accepts_single_digit_hour(self):
        assert time_to_minutes("7:05") == 425

    def test_normalize_pads_the_hour(self):
        assert normalize_time("7:05") == "07:05"
        assert normalize_time(" 09:30 ") == "09:30"
        with pytest.raises(MalformedTimeError):
            normalize_time("7:5")

    @pytest.mark.parametrize("value", ["", "9", "09-30", "24:00", "10:60", "ab:cd", "10:5"])
    def test_malformed_input_fails_loudly(self, value):
        with pytest.raises(MalformedTimeError) as exc_info:
            time_to_minutes(value)
        assert exc_info.value.value == value
        assert exc_info.value.code == "MalformedTime"

    def test_malformed_time_is_a_value_error(self):
        with pytest.raises(ValueError):
            time_to_minutes(None)


class TestMinutesToTime:
    def test_zero_padded(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(65) == "01:05"

    def test_wraps_modulo_one_day(self):
        assert minutes_to_time(1440) == "00:00"
        assert minutes_to_time(1500) == "01:00"


@pytest.mark.parametrize("label", HALF_HOURS)
def test_round_trip_over_half_hour_grid(label):
    assert minutes_to_time(time_to_minutes(label)) == label


@pytest.mark.parametrize("start", HALF_HOURS[::3])
@pytest.mark.parametrize("end", HALF_HOURS[::5])
def test_add_minutes_of_duration_returns_end(start, end):
    assert add_minutes(start, duration_minutes(start, end)) == end


def test_duration_is_signed():
    assert duration_minutes("09:00", "10:30") == 90
    assert duration_minutes("10:00", "10:00") == 0
    assert duration_minutes("11:00", "10:00") == -60


def test_tolerates_arbitrary_minutes():
    assert duration_minutes("09:07", "09:52") == 45
    assert add_minutes("09:07", 45) == "09:52"


def test_format_and_parse_time():
    assert format_time(time(9, 5, 42)) == "09:05"
    assert parse_time("14:30") == time(14, 30)
    with pytest.raises(MalformedTimeError):
        parse_time("14h30")


def test_calendar_day_discards_time_component():
    assert calendar_day(datetime(2026, 3, 10, 23, 59)) == date(2026, 3, 10)
    assert calendar_day(date(2026, 3, 10)) == date(2026, 3, 10)
