"""Input and output records shared by the engine stages."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, ClassVar, Dict, List, Optional, Tuple, Union

from .errors import EventUnavailable, InvalidCoordinates, InvalidLatitude

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .settings import Settings

__all__ = [
    "CANONICAL_EVENTS",
    "EXTENDED_EVENTS",
    "Available",
    "Unavailable",
    "EventResult",
    "GeoTime",
    "PrayerTimes",
]

CANONICAL_EVENTS: Tuple[str, ...] = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")
EXTENDED_EVENTS: Tuple[str, ...] = (
    "imsak",
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "sunset",
    "maghrib",
    "isha",
    "midnight",
)


@dataclass(frozen=True)
class Available:
    """An event time in local decimal hours."""

    value: float
    available: ClassVar[bool] = True

    def unwrap(self, event: str = "event") -> float:
        return self.value


@dataclass(frozen=True)
class Unavailable:
    """Marker for an event the sun never reaches on this date and latitude."""

    reason: str = "unreachable"
    available: ClassVar[bool] = False

    def unwrap(self, event: str = "event") -> float:
        raise EventUnavailable(event, self.reason)


EventResult = Union[Available, Unavailable]


def _as_number(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidCoordinates(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidCoordinates(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class GeoTime:
    """Observer location, civil date and fixed UTC offset for one query.

    ``latitude`` is in degrees north and must satisfy ``|latitude| < 90``.
    ``longitude`` is in degrees east within ``[-180, 180]``. ``utc_offset`` is
    the local clock offset in hours and may be fractional. Elevation is not
    modelled.
    """

    latitude: float
    longitude: float
    utc_offset: float
    date: date

    def __post_init__(self) -> None:
        latitude = _as_number("latitude", self.latitude)
        longitude = _as_number("longitude", self.longitude)
        utc_offset = _as_number("utc_offset", self.utc_offset)
        if abs(latitude) >= 90.0:
            raise InvalidLatitude(f"latitude must be strictly between -90 and 90, got {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidCoordinates(f"longitude must be within [-180, 180], got {longitude}")
        if not -24.0 <= utc_offset <= 24.0:
            raise InvalidCoordinates(f"utc_offset must be within ±24 hours, got {utc_offset}")
        if not isinstance(self.date, date):
            raise InvalidCoordinates(f"date must be a datetime.date, got {self.date!r}")
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)
        object.__setattr__(self, "utc_offset", utc_offset)


@dataclass(frozen=True)
class PrayerTimes:
    """Per-event results for one date and location.

    Values are unnormalized local decimal hours: an event that falls after
    local midnight may exceed 24, and one before the previous midnight may be
    negative. This keeps ordering comparisons meaningful; the formatter
    normalizes into ``[0, 24)``.
    """

    imsak: EventResult
    fajr: EventResult
    sunrise: EventResult
    dhuhr: EventResult
    asr: EventResult
    sunset: EventResult
    maghrib: EventResult
    isha: EventResult
    midnight: EventResult
    settings: "Settings"
    geotime: GeoTime

    def __getitem__(self, event: str) -> EventResult:
        if event not in EXTENDED_EVENTS:
            raise KeyError(event)
        return getattr(self, event)

    def value(self, event: str) -> Optional[float]:
        result = self[event]
        return result.value if isinstance(result, Available) else None

    def unavailable_events(self, extended: bool = False) -> List[str]:
        names = EXTENDED_EVENTS if extended else CANONICAL_EVENTS
        return [name for name in names if not self[name].available]

    def as_dict(self, extended: bool = False) -> Dict[str, EventResult]:
        names = EXTENDED_EVENTS if extended else CANONICAL_EVENTS
        return {name: self[name] for name in names}

