"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from praytimes import HighLatitudeRule, Rounding, TimeFormat


class TimesQueryParams(BaseModel):
    """Validated query parameters for the ``/times`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., gt=-90.0, lt=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    day: date = Field(..., alias="date", description="Civil calendar date (YYYY-MM-DD)")
    method: Optional[str] = Field(None, description="Calculation method identifier")
    asr: Optional[str] = Field(
        None, description="Asr convention: Standard, Hanafi or a positive factor"
    )
    high_lats: Optional[HighLatitudeRule] = Field(None, description="High-latitude rule")
    utc_offset: Union[float, str] = Field(
        "auto", description="UTC offset in hours, or 'auto' for the server's local zone"
    )
    time_format: Optional[TimeFormat] = Field(None, description="Output time format")
    rounding: Optional[Rounding] = Field(None, description="Minute rounding policy")
    fajr_angle: Optional[float] = Field(None, ge=0.0, le=30.0)
    isha_angle: Optional[float] = Field(None, ge=0.0, le=30.0)
    isha_minutes: Optional[float] = Field(None, ge=0.0, le=300.0)
    maghrib_angle: Optional[float] = Field(None, ge=0.0, le=30.0)
    maghrib_minutes: Optional[float] = Field(None, ge=0.0, le=300.0)

    @field_validator("utc_offset")
    def validate_utc_offset(cls, value: Union[float, str]) -> Union[float, str]:
        if isinstance(value, str):
            if value == "auto":
                return value
            try:
                value = float(value)
            except ValueError:
                raise ValueError("utc_offset must be a number of hours or 'auto'")
        if not -24.0 <= value <= 24.0:
            raise ValueError("utc_offset must be within ±24 hours")
        return value


class TimesResponse(BaseModel):
    """Formatted prayer times for one date and location."""

    ok: bool = True
    day: date = Field(..., description="Civil calendar date")
    latitude: float
    longitude: float
    method: str
    asr_factor: float
    high_latitude_rule: HighLatitudeRule
    utc_offset: float
    time_format: TimeFormat
    times: Dict[str, Union[str, float, None]] = Field(
        ..., description="Event name to formatted time"
    )
    unavailable: List[str] = Field(
        default_factory=list, description="Events the sun never reaches on this date"
    )


class MethodInfo(BaseModel):
    id: str
    name: str
    fajr_angle: float
    isha_angle: Optional[float] = None
    isha_minutes: Optional[float] = None
    maghrib_angle: Optional[float] = None
    maghrib_minutes: Optional[float] = None
    midnight_mode: str


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    methods: List[str]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
