from __future__ import annotations

from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from praytimes import (
    METHODS,
    CalculationMethod,
    ConfigurationConflict,
    HighLatitudeRule,
    InvalidJuristicMethod,
    InvalidSetting,
    Rounding,
    TimeFormat,
    UnknownMethod,
    adjust,
    adjust_asr,
    asr_factor,
    available_methods,
    lookup,
    resolve,
)
from praytimes.config import ServiceDefaults, load_defaults


def test_builtin_registry():
    assert available_methods() == [
        "MWL",
        "ISNA",
        "Egypt",
        "Makkah",
        "Karachi",
        "Tehran",
        "Jafari",
        "Custom",
    ]
    isna = lookup("ISNA")
    assert (isna.fajr_angle, isna.isha_angle, isna.isha_minutes) == (15.0, 15.0, None)
    assert lookup("Makkah").isha_minutes == 90.0
    assert lookup("Tehran").maghrib_angle == 4.5
    assert lookup("Tehran").midnight_mode == "Jafari"


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        METHODS["Mine"] = lookup("MWL")  # type: ignore[index]


def test_unknown_method():
    with pytest.raises(UnknownMethod):
        lookup("Moonsighting")
    with pytest.raises(UnknownMethod):
        resolve("isna")


def test_method_requires_exactly_one_definition():
    with pytest.raises(ConfigurationConflict):
        CalculationMethod("X", "X", 18.0, isha_angle=17.0, isha_minutes=90.0)
    with pytest.raises(ConfigurationConflict):
        CalculationMethod("X", "X", 18.0)


def test_resolve_inherits_base_method():
    settings = resolve("Egypt")
    assert settings.method_id == "Egypt"
    assert settings.fajr_angle == 19.5
    assert settings.isha_angle == 17.5
    assert settings.maghrib_minutes == 0.0
    assert settings.asr_factor == 1.0
    assert settings.high_latitude_rule is HighLatitudeRule.NONE
    assert settings.time_format is TimeFormat.H24
    assert settings.rounding is Rounding.NEAREST_MINUTE


def test_minutes_override_replaces_angle():
    settings = resolve("MWL", {"isha_minutes": 75})
    assert settings.isha_angle is None
    assert settings.isha_minutes == 75.0
    settings = resolve("Makkah", {"ishaAngle": 18})
    assert settings.isha_angle == 18.0
    assert settings.isha_minutes is None


def test_conflicting_overrides():
    with pytest.raises(ConfigurationConflict):
        resolve("ISNA", {"isha_angle": 17, "isha_minutes": 90})
    with pytest.raises(ConfigurationConflict):
        resolve("ISNA", {"maghribAngle": 4, "maghribMinutes": 3})


def test_maghrib_minutes_cannot_follow_isha():
    with pytest.raises(ConfigurationConflict):
        resolve("Custom", {"maghrib_minutes": 60, "isha_minutes": 20})
    with pytest.raises(ConfigurationConflict):
        resolve("Makkah", {"maghribMinutes": 95})
    settings = resolve("Makkah", {"maghribMinutes": 90})
    assert settings.maghrib_minutes == settings.isha_minutes == 90.0


def test_custom_method_overrides():
    settings = resolve(
        "Custom",
        {
            "fajrAngle": 12,
            "ishaMinutes": 80,
            "asrJuristic": 1.5,
            "highLatitudeRule": "OneSeventh",
            "timeFormat": "12hNS",
            "rounding": "round-up",
        },
    )
    assert settings.fajr_angle == 12.0
    assert settings.isha_minutes == 80.0
    assert settings.asr_factor == 1.5
    assert settings.high_latitude_rule is HighLatitudeRule.ONE_SEVENTH
    assert settings.time_format is TimeFormat.H12_NO_SUFFIX
    assert settings.rounding is Rounding.ROUND_UP


@pytest.mark.parametrize(
    "juristic, factor", [("Standard", 1.0), ("Hanafi", 2.0), (2, 2.0), (0.75, 0.75)]
)
def test_asr_factor(juristic, factor):
    assert asr_factor(juristic) == factor


@pytest.mark.parametrize("juristic", ["Shafii", "hanafi", 0, -1.0, True, float("nan"), None])
def test_invalid_juristic_method(juristic):
    with pytest.raises(InvalidJuristicMethod):
        asr_factor(juristic)


def test_adjust_asr_returns_new_settings():
    standard = resolve("ISNA")
    hanafi = adjust_asr(standard, "Hanafi")
    assert hanafi.asr_factor == 2.0
    assert standard.asr_factor == 1.0
    with pytest.raises(InvalidJuristicMethod):
        adjust_asr(standard, "Jafari")


def test_adjust_layers_over_existing_settings():
    base = resolve("MWL", {"asr_juristic": "Hanafi"})
    layered = adjust(base, high_latitude_rule="AngleBased", isha_minutes=90)
    assert layered.asr_factor == 2.0
    assert layered.high_latitude_rule is HighLatitudeRule.ANGLE_BASED
    assert layered.isha_angle is None
    assert base.isha_angle == 17.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"highLatitudeRule": "Polar"},
        {"time_format": "iso"},
        {"rounding": "banker"},
        {"fajr_angle": -3},
        {"fajr_angle": "18"},
        {"midnight_mode": "Late"},
        {"tune": {"tahajjud": 2}},
        {"elevation": 100},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(InvalidSetting):
        resolve("MWL", overrides)


def test_settings_are_frozen():
    settings = resolve("MWL")
    with pytest.raises(AttributeError):
        settings.fajr_angle = 10.0  # type: ignore[misc]


def test_load_defaults_from_environment():
    assert load_defaults({}) == ServiceDefaults()
    defaults = load_defaults(
        {
            "PRAYTIMES_METHOD": "Karachi",
            "PRAYTIMES_ASR": "Hanafi",
            "PRAYTIMES_HIGH_LATS": "nightmiddle",
            "PRAYTIMES_TIME_FORMAT": "12h",
        }
    )
    assert defaults.method == "Karachi"
    assert defaults.asr == "Hanafi"
    assert defaults.high_latitude_rule is HighLatitudeRule.NIGHT_MIDDLE
    assert defaults.time_format is TimeFormat.H12


def test_load_defaults_rejects_bad_values():
    with pytest.raises(UnknownMethod):
        load_defaults({"PRAYTIMES_METHOD": "Nowhere"})
    with pytest.raises(InvalidSetting):
        load_defaults({"PRAYTIMES_ROUNDING": "sometimes"})
