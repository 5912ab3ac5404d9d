from __future__ import annotations

from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from praytimes import Rounding, TimeFormat, format_time, parse_time

ELEVEN_59_30 = 11.0 + 59.5 / 60.0


def test_rounding_happens_before_conversion():
    assert format_time(ELEVEN_59_30, "24h", "nearest-minute") == "12:00"
    assert format_time(ELEVEN_59_30, "24h", "none") == "11:59"
    assert format_time(11.0 + 59.1 / 60.0, "24h", "round-up") == "12:00"


def test_twelve_hour_formats():
    assert format_time(0.5, "12h") == "12:30 am"
    assert format_time(12.0, "12h") == "12:00 pm"
    assert format_time(13.25, "12h") == "01:15 pm"
    assert format_time(13.25, TimeFormat.H12_NO_SUFFIX) == "01:15"
    assert format_time(23.9999, "12h") == "12:00 am"


def test_values_are_normalized():
    assert format_time(-1.5) == "22:30"
    assert format_time(25.25) == "01:15"
    assert format_time(-1.5, "float") == pytest.approx(22.5)
    assert format_time(24.0, "float") == 0.0


def test_float_is_unrounded():
    assert format_time(ELEVEN_59_30, "float") == pytest.approx(ELEVEN_59_30)


def test_missing_values():
    assert format_time(None) == "-----"
    assert format_time(float("inf")) == "-----"
    assert format_time(float("-inf"), "12h") == "-----"
    assert format_time(float("inf"), "float") is None
    assert format_time(float("nan"), "12h") == "-----"
    assert format_time(None, "float") is None


def test_format_aliases():
    assert TimeFormat("12hNS") is TimeFormat.H12_NO_SUFFIX
    assert TimeFormat("Float") is TimeFormat.FLOAT
    assert Rounding("nearest") is Rounding.NEAREST_MINUTE
    with pytest.raises(ValueError):
        TimeFormat("iso")


@pytest.mark.parametrize("option", ["24h", "12h"])
@pytest.mark.parametrize("rounding", list(Rounding))
def test_second_pass_is_idempotent(option, rounding):
    for step in range(0, 1753):
        hours = step * 0.0137
        first = format_time(hours, option, rounding)
        assert format_time(parse_time(first), option, rounding) == first


def test_parse_time():
    assert parse_time("05:07") == pytest.approx(5.0 + 7.0 / 60.0)
    assert parse_time("12:15 am") == pytest.approx(0.25)
    assert parse_time("01:00 PM") == pytest.approx(13.0)
    for text in ("24:00", "7", "13:00 pm", "10:75"):
        with pytest.raises(ValueError):
            parse_time(text)
