"""Environment-driven defaults for services built on the engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidSetting
from .formatting import Rounding, TimeFormat
from .highlat import HighLatitudeRule
from .methods import lookup
from .settings import asr_factor

__all__ = ["ServiceDefaults", "load_defaults"]


@dataclass(frozen=True)
class ServiceDefaults:
    method: str = "ISNA"
    asr: str = "Standard"
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.NONE
    time_format: TimeFormat = TimeFormat.H24
    rounding: Rounding = Rounding.NEAREST_MINUTE


def load_defaults(environ: Optional[Mapping[str, str]] = None) -> ServiceDefaults:
    """Read ``PRAYTIMES_*`` variables, validating them eagerly."""

    env = os.environ if environ is None else environ
    method = env.get("PRAYTIMES_METHOD", ServiceDefaults.method)
    asr = env.get("PRAYTIMES_ASR", ServiceDefaults.asr)
    lookup(method)
    asr_factor(asr)
    try:
        high_latitude_rule = HighLatitudeRule(
            env.get("PRAYTIMES_HIGH_LATS", ServiceDefaults.high_latitude_rule.value)
        )
        time_format = TimeFormat(env.get("PRAYTIMES_TIME_FORMAT", ServiceDefaults.time_format.value))
        rounding = Rounding(env.get("PRAYTIMES_ROUNDING", ServiceDefaults.rounding.value))
    except ValueError as exc:
        raise InvalidSetting(f"Invalid PRAYTIMES_* environment setting: {exc}") from exc
    return ServiceDefaults(
        method=method,
        asr=asr,
        high_latitude_rule=high_latitude_rule,
        time_format=time_format,
        rounding=rounding,
    )
