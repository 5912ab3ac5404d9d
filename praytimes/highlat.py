"""Fallback times for twilight events at high latitudes."""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Dict, Optional

from .records import Available, EventResult

__all__ = ["HighLatitudeRule", "adjust_high_latitudes", "night_portion", "time_diff"]

LOGGER = logging.getLogger(__name__)


class HighLatitudeRule(str, Enum):
    """Caller-selected substitution rule for unreachable twilight angles."""

    NONE = "None"
    NIGHT_MIDDLE = "NightMiddle"
    ONE_SEVENTH = "OneSeventh"
    ANGLE_BASED = "AngleBased"

    @classmethod
    def _missing_(cls, value: object) -> Optional["HighLatitudeRule"]:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


def time_diff(start: float, end: float) -> float:
    """Forward distance in hours from ``start`` to ``end`` on a 24h clock."""

    return (end - start) % 24.0


def night_portion(rule: HighLatitudeRule, angle: float, night: float) -> float:
    """Length of the slice of ``night`` allotted to a twilight event."""

    if rule is HighLatitudeRule.ANGLE_BASED:
        return angle / 60.0 * night
    if rule is HighLatitudeRule.ONE_SEVENTH:
        return night / 7.0
    return night / 2.0


def _adjust_event(
    name: str,
    result: EventResult,
    base: float,
    angle: float,
    night: float,
    rule: HighLatitudeRule,
    before_base: bool,
) -> EventResult:
    portion = night_portion(rule, angle, night)
    if isinstance(result, Available):
        gap = time_diff(result.value, base) if before_base else time_diff(base, result.value)
        if gap <= portion:
            return result
    substitute = base - portion if before_base else base + portion
    LOGGER.debug(
        json.dumps(
            {
                "event": "high_latitude_substitution",
                "prayer": name,
                "rule": rule.value,
                "original": result.value if isinstance(result, Available) else None,
                "substitute": substitute,
            }
        )
    )
    return Available(substitute)


def adjust_high_latitudes(
    times: Dict[str, EventResult],
    rule: HighLatitudeRule,
    fajr_angle: float,
    isha_angle: Optional[float],
    maghrib_angle: Optional[float],
) -> Dict[str, EventResult]:
    """Return ``times`` with angle-defined twilight events bounded by ``rule``.

    Fajr is kept within ``portion`` before sunrise; Isha and Maghrib within
    ``portion`` after sunset. An event is substituted when it is unreachable
    or when it falls further from its base than the portion allows. Events
    defined by minutes are left alone. Nothing is substituted under
    ``HighLatitudeRule.NONE`` or when sunrise or sunset is itself unreachable.
    """

    sunrise, sunset = times["sunrise"], times["sunset"]
    if rule is HighLatitudeRule.NONE:
        return times
    if not (isinstance(sunrise, Available) and isinstance(sunset, Available)):
        return times

    night = time_diff(sunset.value, sunrise.value)
    adjusted = dict(times)
    adjusted["fajr"] = _adjust_event(
        "fajr", times["fajr"], sunrise.value, fajr_angle, night, rule, before_base=True
    )
    if isha_angle is not None:
        adjusted["isha"] = _adjust_event(
            "isha", times["isha"], sunset.value, isha_angle, night, rule, before_base=False
        )
    if maghrib_angle is not None:
        adjusted["maghrib"] = _adjust_event(
            "maghrib", times["maghrib"], sunset.value, maghrib_angle, night, rule, before_base=False
        )
    return adjusted
