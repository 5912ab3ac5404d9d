"""Rendering of decimal-hour event times."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Union

from .records import Available

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .records import PrayerTimes

__all__ = [
    "INVALID_TIME",
    "Rounding",
    "TimeFormat",
    "format_time",
    "format_times",
    "normalize_hours",
    "parse_time",
]

INVALID_TIME = "-----"
TIME_SUFFIXES = (" am", " pm")
MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(am|pm)?\s*$", re.IGNORECASE)


class TimeFormat(str, Enum):
    """Output representations supported by :func:`format_time`."""

    H24 = "24h"
    H12 = "12h"
    H12_NO_SUFFIX = "12hNoSuffix"
    FLOAT = "float"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TimeFormat"]:
        if isinstance(value, str):
            lowered = value.lower()
            if lowered == "12hns":
                return cls.H12_NO_SUFFIX
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class Rounding(str, Enum):
    """Minute rounding applied before a time is rendered as text."""

    NONE = "none"
    NEAREST_MINUTE = "nearest-minute"
    ROUND_UP = "round-up"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Rounding"]:
        if isinstance(value, str):
            lowered = value.lower().replace("_", "-")
            aliases = {"nearest": cls.NEAREST_MINUTE, "up": cls.ROUND_UP}
            if lowered in aliases:
                return aliases[lowered]
            for member in cls:
                if member.value == lowered:
                    return member
        return None


def normalize_hours(hours: float) -> float:
    """Wrap ``hours`` into ``[0, 24)``."""

    wrapped = hours % 24.0
    # Tiny negatives wrap to exactly 24.0 in floating point.
    return 0.0 if wrapped >= 24.0 else wrapped


def _round_minutes(minutes: float, rounding: Rounding) -> int:
    # Snap float noise so that an already-whole minute stays put.
    minutes = round(minutes, 6)
    if rounding is Rounding.NEAREST_MINUTE:
        return int(math.floor(minutes + 0.5))
    if rounding is Rounding.ROUND_UP:
        return int(math.ceil(minutes))
    return int(math.floor(minutes))


def format_time(
    hours: Optional[float],
    option: Union[TimeFormat, str] = TimeFormat.H24,
    rounding: Union[Rounding, str] = Rounding.NEAREST_MINUTE,
    suffixes: Sequence[str] = TIME_SUFFIXES,
) -> Union[str, float, None]:
    """Format decimal ``hours`` according to ``option``.

    Values outside ``[0, 24)`` are normalized first. Rounding is applied to
    whole minutes before conversion, so ``11.9917`` renders as ``12:00`` under
    ``nearest-minute``. ``float`` returns the normalized, unrounded hours. A
    missing or non-finite value renders as :data:`INVALID_TIME` (``None`` for
    ``float``).
    """

    option = TimeFormat(option)
    rounding = Rounding(rounding)
    if hours is None or not math.isfinite(hours):
        return None if option is TimeFormat.FLOAT else INVALID_TIME

    hours = normalize_hours(hours)
    if option is TimeFormat.FLOAT:
        return hours

    total = _round_minutes(hours * 60.0, rounding) % MINUTES_PER_DAY
    hour, minute = divmod(total, 60)
    if option is TimeFormat.H24:
        return f"{hour:02d}:{minute:02d}"

    text = f"{(hour + 11) % 12 + 1:02d}:{minute:02d}"
    if option is TimeFormat.H12:
        text += suffixes[0 if hour < 12 else 1]
    return text


def parse_time(text: str) -> float:
    """Parse ``HH:MM`` or ``HH:MM am|pm`` back into decimal hours.

    Text without a suffix is read as a 24-hour clock.
    """

    match = _TIME_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Unrecognised time: {text!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    suffix = match.group(3)
    if minute >= 60:
        raise ValueError(f"Unrecognised time: {text!r}")
    if suffix is not None:
        if not 1 <= hour <= 12:
            raise ValueError(f"Unrecognised time: {text!r}")
        hour = hour % 12 + (12 if suffix.lower() == "pm" else 0)
    elif hour >= 24:
        raise ValueError(f"Unrecognised time: {text!r}")
    return hour + minute / 60.0


def format_times(
    times: "PrayerTimes",
    option: Union[TimeFormat, str, None] = None,
    rounding: Union[Rounding, str, None] = None,
    extended: bool = False,
) -> Dict[str, Union[str, float, None]]:
    """Format every event of ``times``; options default to its settings."""

    option = times.settings.time_format if option is None else option
    rounding = times.settings.rounding if rounding is None else rounding
    formatted: Dict[str, Union[str, float, None]] = {}
    for name, result in times.as_dict(extended=extended).items():
        value = result.value if isinstance(result, Available) else None
        formatted[name] = format_time(value, option, rounding)
    return formatted
