"""Hour-angle inversion of sun altitudes into local solar times."""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Tuple

from .records import GeoTime
from .settings import Settings
from .solar import julian_date, solar_frame, sun_position

__all__ = [
    "DEFAULT_HOURS",
    "RISE_SET_ANGLE",
    "asr_altitude",
    "hour_angle",
    "solve_day",
]

# Apparent radius plus standard refraction at the horizon.
RISE_SET_ANGLE = 0.833

# Seeds for the refinement pass when the first estimate is unreachable.
DEFAULT_HOURS: Dict[str, float] = {
    "fajr": 5.0,
    "sunrise": 6.0,
    "dhuhr": 12.0,
    "asr": 13.0,
    "sunset": 18.0,
    "maghrib": 18.0,
    "isha": 18.0,
}

SunLookup = Callable[[str], Tuple[float, float]]


def hour_angle(angle: float, latitude: float, declination: float) -> Optional[float]:
    """Hour angle in degrees at which the sun is ``angle`` degrees below the horizon.

    Returns ``None`` when the sun never reaches that altitude on this day.
    """

    lat = math.radians(latitude)
    decl = math.radians(declination)
    cos_h = (-math.sin(math.radians(angle)) - math.sin(lat) * math.sin(decl)) / (
        math.cos(lat) * math.cos(decl)
    )
    if cos_h < -1.0 or cos_h > 1.0:
        return None
    return math.degrees(math.acos(cos_h))


def asr_altitude(factor: float, latitude: float, declination: float) -> Optional[float]:
    """Sun altitude in degrees at which a shadow is ``factor`` heights past its noon length."""

    zenith = abs(latitude - declination)
    if zenith >= 90.0:
        return None
    return math.degrees(math.atan(1.0 / (factor + math.tan(math.radians(zenith)))))


def _angle_time(
    angle: float, latitude: float, sun: Tuple[float, float], before_noon: bool
) -> Optional[float]:
    declination, equation_of_time = sun
    h = hour_angle(angle, latitude, declination)
    if h is None:
        return None
    noon = 12.0 - equation_of_time
    return noon - h / 15.0 if before_noon else noon + h / 15.0


def _asr_time(factor: float, latitude: float, sun: Tuple[float, float]) -> Optional[float]:
    altitude = asr_altitude(factor, latitude, sun[0])
    if altitude is None:
        return None
    return _angle_time(-altitude, latitude, sun, before_noon=False)


def _solve_pass(settings: Settings, latitude: float, sun: SunLookup) -> Dict[str, Optional[float]]:
    times: Dict[str, Optional[float]] = {
        "fajr": _angle_time(settings.fajr_angle, latitude, sun("fajr"), before_noon=True),
        "sunrise": _angle_time(RISE_SET_ANGLE, latitude, sun("sunrise"), before_noon=True),
        "dhuhr": 12.0 - sun("dhuhr")[1],
        "asr": _asr_time(settings.asr_factor, latitude, sun("asr")),
        "sunset": _angle_time(RISE_SET_ANGLE, latitude, sun("sunset"), before_noon=False),
    }
    if settings.maghrib_angle is not None:
        times["maghrib"] = _angle_time(
            settings.maghrib_angle, latitude, sun("maghrib"), before_noon=False
        )
    if settings.isha_angle is not None:
        times["isha"] = _angle_time(settings.isha_angle, latitude, sun("isha"), before_noon=False)
    return times


def solve_day(settings: Settings, geotime: GeoTime) -> Dict[str, Optional[float]]:
    """Solve every angle-defined event in local mean solar hours.

    The first pass uses the sun at 12:00 UTC for all events. The second pass
    re-evaluates the sun at each event's own first-pass estimate, which
    removes most of the drift in declination and equation of time across the
    day. Exactly one correction is applied. ``None`` marks an event whose
    altitude is never reached; Dhuhr is always defined. Events defined by
    minutes are not part of the result.
    """

    frame = solar_frame(geotime.date)
    noon_sun = (frame.declination, frame.equation_of_time)
    estimate = _solve_pass(settings, geotime.latitude, lambda event: noon_sun)

    # Julian date of local mean midnight.
    jd_midnight = julian_date(geotime.date, 0.0) - geotime.longitude / 360.0

    def refined_sun(event: str) -> Tuple[float, float]:
        hours = estimate.get(event)
        if hours is None:
            hours = DEFAULT_HOURS[event]
        return sun_position(jd_midnight + hours / 24.0)

    return _solve_pass(settings, geotime.latitude, refined_sun)
