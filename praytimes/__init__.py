"""Prayer-time calculation engine."""

from .engine import compute, get_times
from .errors import (
    ConfigurationConflict,
    EventUnavailable,
    InvalidCoordinates,
    InvalidJuristicMethod,
    InvalidLatitude,
    InvalidSetting,
    PrayerTimesError,
    UnknownMethod,
)
from .formatting import Rounding, TimeFormat, format_time, format_times, parse_time
from .highlat import HighLatitudeRule
from .methods import METHODS, CalculationMethod, available_methods, lookup
from .records import Available, GeoTime, PrayerTimes, Unavailable
from .settings import Settings, adjust, adjust_asr, asr_factor, resolve
from .solar import SolarFrame, solar_frame

__all__ = [
    "Available",
    "CalculationMethod",
    "ConfigurationConflict",
    "EventUnavailable",
    "GeoTime",
    "HighLatitudeRule",
    "InvalidCoordinates",
    "InvalidJuristicMethod",
    "InvalidLatitude",
    "InvalidSetting",
    "METHODS",
    "PrayerTimes",
    "PrayerTimesError",
    "Rounding",
    "Settings",
    "SolarFrame",
    "TimeFormat",
    "Unavailable",
    "UnknownMethod",
    "adjust",
    "adjust_asr",
    "asr_factor",
    "available_methods",
    "compute",
    "format_time",
    "format_times",
    "get_times",
    "lookup",
    "parse_time",
    "resolve",
    "solar_frame",
]
