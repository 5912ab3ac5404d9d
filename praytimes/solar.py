"""Low-precision solar ephemeris (USNO approximate formulas).

Accuracy is at the ~0.01 degree / ~0.1 minute level over several centuries
around J2000, which is sufficient for civil prayer times.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Tuple

import erfa

__all__ = ["J2000", "SolarFrame", "julian_date", "solar_frame", "sun_position"]

J2000 = 2451545.0


@dataclass(frozen=True)
class SolarFrame:
    """Sun geometry for one instant.

    ``julian_date`` is in days (UT), ``declination`` in degrees and
    ``equation_of_time`` in hours (apparent minus mean solar time).
    """

    julian_date: float
    declination: float
    equation_of_time: float


def _fix(value: float, mode: float) -> float:
    value = value % mode
    return 0.0 if value >= mode else value


def julian_date(day: date, hour_utc: float = 12.0) -> float:
    """Julian date of ``hour_utc`` on the proleptic Gregorian date ``day``."""

    djm0, djm = erfa.cal2jd(day.year, day.month, day.day)
    return float(djm0) + float(djm) + hour_utc / 24.0


def sun_position(jd: float) -> Tuple[float, float]:
    """Return ``(declination_deg, equation_of_time_hours)`` at ``jd``."""

    d = jd - J2000
    g = math.radians(_fix(357.529 + 0.98560028 * d, 360.0))
    q = _fix(280.459 + 0.98564736 * d, 360.0)
    ecliptic_longitude = math.radians(
        _fix(q + 1.915 * math.sin(g) + 0.020 * math.sin(2.0 * g), 360.0)
    )
    obliquity = math.radians(23.439 - 0.00000036 * d)

    right_ascension = math.degrees(
        math.atan2(
            math.cos(obliquity) * math.sin(ecliptic_longitude),
            math.cos(ecliptic_longitude),
        )
    ) / 15.0
    equation_of_time = q / 15.0 - _fix(right_ascension, 24.0)
    # q and RA wrap independently near the vernal equinox.
    if equation_of_time > 12.0:
        equation_of_time -= 24.0
    elif equation_of_time < -12.0:
        equation_of_time += 24.0

    declination = math.degrees(
        math.asin(math.sin(obliquity) * math.sin(ecliptic_longitude))
    )
    return declination, equation_of_time


def solar_frame(day: date) -> SolarFrame:
    """Solar geometry for 12:00 UTC on ``day``."""

    jd = julian_date(day)
    declination, equation_of_time = sun_position(jd)
    return SolarFrame(julian_date=jd, declination=declination, equation_of_time=equation_of_time)
