"""Resolution of a base method plus caller overrides into ``Settings``."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from .errors import ConfigurationConflict, InvalidJuristicMethod, InvalidSetting
from .formatting import Rounding, TimeFormat
from .highlat import HighLatitudeRule
from .methods import MIDNIGHT_MODES, CalculationMethod, lookup
from .records import EXTENDED_EVENTS

__all__ = [
    "JURISTIC_FACTORS",
    "Settings",
    "adjust",
    "adjust_asr",
    "asr_factor",
    "resolve",
]

LOGGER = logging.getLogger(__name__)

JURISTIC_FACTORS: Dict[str, float] = {"Standard": 1.0, "Hanafi": 2.0}

DEFAULT_IMSAK_MINUTES = 10.0

# camelCase spellings accepted from the external input record.
_KEY_ALIASES: Dict[str, str] = {
    "asr": "asr_juristic",
    "asrJuristic": "asr_juristic",
    "fajrAngle": "fajr_angle",
    "ishaAngle": "isha_angle",
    "ishaMinutes": "isha_minutes",
    "maghribAngle": "maghrib_angle",
    "maghribMinutes": "maghrib_minutes",
    "highLatitudeRule": "high_latitude_rule",
    "highLats": "high_latitude_rule",
    "timeFormat": "time_format",
    "imsakMinutes": "imsak_minutes",
    "dhuhrMinutes": "dhuhr_minutes",
    "midnightMode": "midnight_mode",
}

_OVERRIDE_KEYS = frozenset(
    {
        "asr_juristic",
        "fajr_angle",
        "isha_angle",
        "isha_minutes",
        "maghrib_angle",
        "maghrib_minutes",
        "high_latitude_rule",
        "time_format",
        "rounding",
        "imsak_minutes",
        "dhuhr_minutes",
        "midnight_mode",
        "tune",
    }
)

_E = TypeVar("_E", bound=Enum)


@dataclass(frozen=True)
class Settings:
    """Fully resolved configuration for :func:`praytimes.engine.compute`.

    Exactly one of ``isha_angle``/``isha_minutes`` and one of
    ``maghrib_angle``/``maghrib_minutes`` is set. ``tune`` holds per-event
    minute offsets as sorted ``(event, minutes)`` pairs.
    """

    method: CalculationMethod
    fajr_angle: float
    isha_angle: Optional[float]
    isha_minutes: Optional[float]
    maghrib_angle: Optional[float]
    maghrib_minutes: Optional[float]
    midnight_mode: str = "Standard"
    asr_factor: float = 1.0
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.NONE
    time_format: TimeFormat = TimeFormat.H24
    rounding: Rounding = Rounding.NEAREST_MINUTE
    imsak_minutes: float = DEFAULT_IMSAK_MINUTES
    dhuhr_minutes: float = 0.0
    tune: Tuple[Tuple[str, float], ...] = ()

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_minutes is None):
            raise ConfigurationConflict("isha needs exactly one of an angle or minutes")
        if (self.maghrib_angle is None) == (self.maghrib_minutes is None):
            raise ConfigurationConflict("maghrib needs exactly one of an angle or minutes")
        if not self.asr_factor > 0:
            raise InvalidJuristicMethod(f"Asr factor must be positive, got {self.asr_factor}")
        if (
            self.maghrib_minutes is not None
            and self.isha_minutes is not None
            and self.maghrib_minutes > self.isha_minutes
        ):
            raise ConfigurationConflict(
                f"maghrib ({self.maghrib_minutes} min) cannot follow isha ({self.isha_minutes} min)"
            )

    @property
    def method_id(self) -> str:
        return self.method.id


def asr_factor(juristic: Union[str, float, int]) -> float:
    """Return the shadow-length factor for a juristic convention.

    ``Standard`` is 1 (shadow equals object height beyond the noon shadow),
    ``Hanafi`` is 2. Any positive number is accepted as a custom factor.
    """

    if isinstance(juristic, str):
        try:
            return JURISTIC_FACTORS[juristic]
        except KeyError as exc:
            raise InvalidJuristicMethod(f"Unknown juristic method: {juristic!r}") from exc
    if isinstance(juristic, bool) or not isinstance(juristic, (int, float)):
        raise InvalidJuristicMethod(f"Unknown juristic method: {juristic!r}")
    factor = float(juristic)
    if not (math.isfinite(factor) and factor > 0):
        raise InvalidJuristicMethod(f"Asr factor must be a positive number, got {juristic!r}")
    return factor


def _number(key: str, value: Any, minimum: Optional[float] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSetting(f"{key} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidSetting(f"{key} must be finite, got {value!r}")
    if minimum is not None and number < minimum:
        raise InvalidSetting(f"{key} must be >= {minimum}, got {value!r}")
    return number


def _enum(enum_cls: Type[_E], key: str, value: Any) -> _E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidSetting(f"{key} must be one of: {choices}; got {value!r}") from exc


def _tune(value: Any) -> Tuple[Tuple[str, float], ...]:
    if not isinstance(value, Mapping):
        raise InvalidSetting(f"tune must be a mapping of event to minutes, got {value!r}")
    pairs = []
    for event, minutes in value.items():
        if event not in EXTENDED_EVENTS:
            raise InvalidSetting(f"Cannot tune unknown event: {event!r}")
        pairs.append((event, _number(f"tune[{event}]", minutes)))
    return tuple(sorted(pairs))


def _normalize_overrides(overrides: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in (overrides or {}).items():
        name = _KEY_ALIASES.get(key, key)
        if name not in _OVERRIDE_KEYS:
            raise InvalidSetting(f"Unknown override: {key!r}")
        if value is not None:
            normalized[name] = value
    for event in ("isha", "maghrib"):
        if f"{event}_angle" in normalized and f"{event}_minutes" in normalized:
            raise ConfigurationConflict(
                f"{event} cannot be given both an angle and minutes"
            )
    return normalized


def _merge(values: Dict[str, Any], overrides: Optional[Mapping[str, Any]]) -> Settings:
    updates = _normalize_overrides(overrides)

    if "fajr_angle" in updates:
        values["fajr_angle"] = _number("fajr_angle", updates["fajr_angle"], minimum=0.0)
    for event in ("isha", "maghrib"):
        angle_key, minutes_key = f"{event}_angle", f"{event}_minutes"
        if angle_key in updates:
            values[angle_key] = _number(angle_key, updates[angle_key], minimum=0.0)
            values[minutes_key] = None
        elif minutes_key in updates:
            values[minutes_key] = _number(minutes_key, updates[minutes_key], minimum=0.0)
            values[angle_key] = None

    if "asr_juristic" in updates:
        values["asr_factor"] = asr_factor(updates["asr_juristic"])
    if "high_latitude_rule" in updates:
        values["high_latitude_rule"] = _enum(
            HighLatitudeRule, "high_latitude_rule", updates["high_latitude_rule"]
        )
    if "time_format" in updates:
        values["time_format"] = _enum(TimeFormat, "time_format", updates["time_format"])
    if "rounding" in updates:
        values["rounding"] = _enum(Rounding, "rounding", updates["rounding"])
    if "imsak_minutes" in updates:
        values["imsak_minutes"] = _number("imsak_minutes", updates["imsak_minutes"], minimum=0.0)
    if "dhuhr_minutes" in updates:
        values["dhuhr_minutes"] = _number("dhuhr_minutes", updates["dhuhr_minutes"])
    if "midnight_mode" in updates:
        if updates["midnight_mode"] not in MIDNIGHT_MODES:
            raise InvalidSetting(f"Unsupported midnight mode: {updates['midnight_mode']!r}")
        values["midnight_mode"] = updates["midnight_mode"]
    if "tune" in updates:
        values["tune"] = _tune(updates["tune"])

    settings = Settings(**values)
    LOGGER.debug(
        json.dumps(
            {
                "event": "settings_resolved",
                "method": settings.method_id,
                "overrides": sorted(updates),
                "asr_factor": settings.asr_factor,
                "high_latitude_rule": settings.high_latitude_rule.value,
            }
        )
    )
    return settings


def resolve(base_method_id: str, overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    """Merge ``overrides`` over the defaults of a registered method.

    All configuration errors are raised here, before any date-specific
    computation, so a resolved ``Settings`` can be reused for any number of
    queries.
    """

    method = lookup(base_method_id)
    values: Dict[str, Any] = {
        "method": method,
        "fajr_angle": method.fajr_angle,
        "isha_angle": method.isha_angle,
        "isha_minutes": method.isha_minutes,
        "maghrib_angle": method.maghrib_angle,
        "maghrib_minutes": method.maghrib_minutes,
        "midnight_mode": method.midnight_mode,
    }
    return _merge(values, overrides)


def adjust(settings: Settings, **overrides: Any) -> Settings:
    """Return a copy of ``settings`` with further overrides applied."""

    values = {field.name: getattr(settings, field.name) for field in fields(settings)}
    return _merge(values, overrides)


def adjust_asr(settings: Settings, juristic: Union[str, float, int]) -> Settings:
    return replace(settings, asr_factor=asr_factor(juristic))
