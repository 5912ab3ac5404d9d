"""Exception taxonomy for the prayer-time engine."""

from __future__ import annotations

__all__ = [
    "PrayerTimesError",
    "UnknownMethod",
    "InvalidJuristicMethod",
    "InvalidLatitude",
    "InvalidCoordinates",
    "ConfigurationConflict",
    "InvalidSetting",
    "EventUnavailable",
]


class PrayerTimesError(ValueError):
    """Base class for configuration and input errors."""

    code = "prayer_times_error"


class UnknownMethod(PrayerTimesError):
    """Raised when a calculation method identifier is not registered."""

    code = "unknown_method"


class InvalidJuristicMethod(PrayerTimesError):
    """Raised for an unrecognised Asr convention or a non-positive factor."""

    code = "invalid_juristic_method"


class InvalidLatitude(PrayerTimesError):
    """Raised when ``|latitude| >= 90`` (solar geometry is undefined there)."""

    code = "invalid_latitude"


class InvalidCoordinates(PrayerTimesError):
    code = "invalid_coordinates"


class ConfigurationConflict(PrayerTimesError):
    """Raised when both an angle and a minute count define the same event."""

    code = "configuration_conflict"


class InvalidSetting(PrayerTimesError):
    code = "invalid_setting"


class EventUnavailable(LookupError):
    """Raised when the value of an unreachable event is requested."""

    def __init__(self, event: str, reason: str = "unreachable") -> None:
        super().__init__(f"{event} is unavailable: {reason}")
        self.event = event
        self.reason = reason
