"""Two-stage pipeline: resolved settings plus a query in, prayer times out."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .formatting import TimeFormat, format_times
from .highlat import adjust_high_latitudes, time_diff
from .records import Available, EventResult, GeoTime, PrayerTimes, Unavailable
from .settings import Settings, resolve
from .solver import solve_day

__all__ = ["compute", "get_times"]

LOGGER = logging.getLogger(__name__)


def _offset(result: EventResult, hours: float) -> EventResult:
    if isinstance(result, Available):
        return Available(result.value + hours)
    return result


def _after(base: EventResult, minutes: float, reason: str) -> EventResult:
    if isinstance(base, Available):
        return Available(base.value + minutes / 60.0)
    return Unavailable(reason)


def _midnight(times: Dict[str, EventResult], mode: str) -> EventResult:
    start = times["sunset"]
    end = times["fajr"] if mode == "Jafari" else times["sunrise"]
    if isinstance(start, Available) and isinstance(end, Available):
        return Available(start.value + time_diff(start.value, end.value) / 2.0)
    return Unavailable("night bounds unavailable")


def compute(settings: Settings, geotime: GeoTime) -> PrayerTimes:
    """Compute all events for one date and location.

    Unreachable events come back as :class:`~praytimes.records.Unavailable`
    unless the settings name a high-latitude rule; other events of the same
    day are still returned.
    """

    solved = solve_day(settings, geotime)
    shift = geotime.utc_offset - geotime.longitude / 15.0

    times: Dict[str, EventResult] = {
        name: Available(value + shift) if value is not None else Unavailable()
        for name, value in solved.items()
    }
    times = adjust_high_latitudes(
        times,
        settings.high_latitude_rule,
        settings.fajr_angle,
        settings.isha_angle,
        settings.maghrib_angle,
    )

    if settings.maghrib_minutes is not None:
        times["maghrib"] = _after(times["sunset"], settings.maghrib_minutes, "sunset unavailable")
    if settings.isha_minutes is not None:
        times["isha"] = _after(times["sunset"], settings.isha_minutes, "sunset unavailable")
    times["imsak"] = _after(times["fajr"], -settings.imsak_minutes, "fajr unavailable")
    times["dhuhr"] = _offset(times["dhuhr"], settings.dhuhr_minutes / 60.0)
    times["midnight"] = _midnight(times, settings.midnight_mode)

    for event, minutes in settings.tune:
        times[event] = _offset(times[event], minutes / 60.0)

    result = PrayerTimes(settings=settings, geotime=geotime, **times)
    unavailable = result.unavailable_events(extended=True)
    if unavailable:
        LOGGER.debug(
            json.dumps(
                {
                    "event": "events_unavailable",
                    "date": geotime.date.isoformat(),
                    "lat": geotime.latitude,
                    "method": settings.method_id,
                    "events": unavailable,
                }
            )
        )
    return result


def get_times(
    method_id: str,
    day: date,
    coordinates: Sequence[float],
    utc_offset: float,
    time_format: Union[TimeFormat, str, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    extended: bool = False,
) -> Dict[str, Union[str, float, None]]:
    """Resolve, compute and format in one call.

    ``coordinates`` is ``(latitude, longitude)``. ``utc_offset`` must already
    be numeric; resolving ``"auto"`` is the caller's job.
    """

    settings = resolve(method_id, overrides)
    latitude, longitude = coordinates[0], coordinates[1]
    times = compute(settings, GeoTime(latitude, longitude, utc_offset, day))
    return format_times(times, option=time_format, extended=extended)
