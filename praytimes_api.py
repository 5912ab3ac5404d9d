"""FastAPI application exposing prayer-time computations."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import date, datetime
from datetime import time as clock_time
from functools import lru_cache
from typing import Any, Dict, List, Tuple, Union

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models import ErrorResponse, HealthResponse, MethodInfo, TimesQueryParams, TimesResponse
from praytimes import (
    METHODS,
    GeoTime,
    PrayerTimesError,
    Settings,
    available_methods,
    compute,
    format_times,
    resolve,
)
from praytimes.config import ServiceDefaults, load_defaults
from praytimes.settings import JURISTIC_FACTORS

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("praytimes-api")

APP_DESCRIPTION = "Daily prayer times from solar-position astronomy"

DEFAULTS = ServiceDefaults()


@asynccontextmanager
async def lifespan(app: FastAPI):
    global DEFAULTS
    try:
        DEFAULTS = load_defaults()
    except PrayerTimesError as exc:
        LOGGER.error(json.dumps({"event": "config_invalid", "error": str(exc)}))
        raise
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "method": DEFAULTS.method,
                "asr": DEFAULTS.asr,
                "high_latitude_rule": DEFAULTS.high_latitude_rule.value,
                "time_format": DEFAULTS.time_format.value,
            }
        )
    )
    yield


app = FastAPI(
    title="Prayer Times API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def resolve_utc_offset(utc_offset: Union[float, str], day: date) -> float:
    """Return a numeric offset, taking ``"auto"`` from this process's local zone."""

    if utc_offset != "auto":
        return float(utc_offset)
    local_noon = datetime.combine(day, clock_time(12)).astimezone()
    return local_noon.utcoffset().total_seconds() / 3600.0


def _juristic(value: str) -> Union[str, float]:
    if value in JURISTIC_FACTORS:
        return value
    try:
        return float(value)
    except ValueError:
        return value


@lru_cache(maxsize=256)
def _cached_settings(method: str, overrides: Tuple[Tuple[str, Any], ...]) -> Settings:
    return resolve(method, dict(overrides))


def _settings_for(params: TimesQueryParams) -> Settings:
    overrides: Dict[str, Any] = {
        "asr_juristic": _juristic(params.asr or DEFAULTS.asr),
        "high_latitude_rule": (params.high_lats or DEFAULTS.high_latitude_rule).value,
        "time_format": (params.time_format or DEFAULTS.time_format).value,
        "rounding": (params.rounding or DEFAULTS.rounding).value,
        "fajr_angle": params.fajr_angle,
        "isha_angle": params.isha_angle,
        "isha_minutes": params.isha_minutes,
        "maghrib_angle": params.maghrib_angle,
        "maghrib_minutes": params.maghrib_minutes,
    }
    items = tuple(sorted((key, value) for key, value in overrides.items() if value is not None))
    return _cached_settings(params.method or DEFAULTS.method, items)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(ValidationError)
async def model_validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(PrayerTimesError)
async def engine_exception_handler(request: Request, exc: PrayerTimesError) -> JSONResponse:
    return _error_response(400, exc.code, str(exc))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, methods=available_methods())


@app.get("/methods", response_model=List[MethodInfo])
def methods() -> List[MethodInfo]:
    return [
        MethodInfo(
            id=method.id,
            name=method.name,
            fajr_angle=method.fajr_angle,
            isha_angle=method.isha_angle,
            isha_minutes=method.isha_minutes,
            maghrib_angle=method.maghrib_angle,
            maghrib_minutes=method.maghrib_minutes,
            midnight_mode=method.midnight_mode,
        )
        for method in METHODS.values()
    ]


@app.get(
    "/times",
    response_model=TimesResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def times_endpoint(params: TimesQueryParams = Depends()) -> TimesResponse:
    start_time = time.perf_counter()
    settings = _settings_for(params)
    utc_offset = resolve_utc_offset(params.utc_offset, params.day)
    result = compute(settings, GeoTime(params.lat, params.lon, utc_offset, params.day))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = TimesResponse(
        day=params.day,
        latitude=params.lat,
        longitude=params.lon,
        method=settings.method_id,
        asr_factor=settings.asr_factor,
        high_latitude_rule=settings.high_latitude_rule,
        utc_offset=utc_offset,
        time_format=settings.time_format,
        times=format_times(result),
        unavailable=result.unavailable_events(),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "times",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.day.isoformat(),
                "method": settings.method_id,
                "unavailable": response.unavailable,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response
