"""FastAPI application exposing sunrise, sunset and twilight computations."""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (
    Calculator,
    ErrorResponse,
    HealthResponse,
    LocationQueryParams,
    SolarDipQueryParams,
    SolarDipResponse,
    SolarEvent,
    ZmanimQueryParams,
    ZmanimResponse,
)
from zmanim.calculators import get_calculator
from zmanim.calendar import AstronomicalCalendar
from zmanim.config import ConfigurationError, resolve_calculator_key, resolve_max_solar_dip
from zmanim.ephemeris import ErfaCalculator
from zmanim.formatter import calendar_to_dict
from zmanim.geolocation import GeoLocation

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("zmanim-api")

APP_DESCRIPTION = "Sunrise, sunset, twilight and solar transit for any date and location"


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        calculator = get_calculator(resolve_calculator_key())
        max_solar_dip = resolve_max_solar_dip()
    except (ConfigurationError, ValueError) as exc:
        LOGGER.error(json.dumps({"event": "configuration_failed", "error": str(exc)}))
        raise
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "calculator": calculator.name,
                "max_solar_dip": max_solar_dip,
            }
        )
    )
    yield


app = FastAPI(
    title="Zmanim API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)


def _cors_origins() -> List[str]:
    raw = os.environ.get("ZMANIM_CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


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


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


def _build_calendar(
    params: LocationQueryParams, elevation: float, calculator: Optional[Calculator]
) -> AstronomicalCalendar:
    try:
        location = GeoLocation(
            latitude=params.lat,
            longitude=params.lon,
            elevation=elevation,
            timezone=params.tz,
            name=params.name,
        )
        key = calculator.value if calculator is not None else resolve_calculator_key()
        return AstronomicalCalendar(location, params.date, get_calculator(key))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True)


@app.get(
    "/zmanim",
    response_model=ZmanimResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def zmanim_endpoint(params: ZmanimQueryParams = Depends()) -> ZmanimResponse:
    start_time = time.perf_counter()
    calendar = _build_calendar(params, params.elevation, params.calculator)
    response = ZmanimResponse(ok=True, **calendar_to_dict(calendar))
    duration_ms = (time.perf_counter() - start_time) * 1000.0

    LOGGER.info(
        json.dumps(
            {
                "event": "zmanim",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date.isoformat(),
                "tz": params.tz,
                "algorithm": calendar.calculator.name,
                "sunrise": response.times.get("sunrise"),
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/solar-dip",
    response_model=SolarDipResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def solar_dip_endpoint(params: SolarDipQueryParams = Depends()) -> SolarDipResponse:
    start_time = time.perf_counter()
    calendar = _build_calendar(params, 0.0, params.calculator)
    if isinstance(calendar.calculator, ErfaCalculator):
        # Each step of the search is a full numerical root find.
        raise HTTPException(
            status_code=400,
            detail="The solar dip search supports only the noaa and suntimes calculators",
        )
    try:
        if params.event is SolarEvent.sunrise:
            degrees = calendar.sunrise_solar_dip_from_offset(params.minutes)
        else:
            degrees = calendar.sunset_solar_dip_from_offset(params.minutes)
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    duration_ms = (time.perf_counter() - start_time) * 1000.0

    LOGGER.info(
        json.dumps(
            {
                "event": "solar_dip",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date.isoformat(),
                "solar_event": params.event.value,
                "minutes": params.minutes,
                "degrees": degrees,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return SolarDipResponse(
        date=params.date,
        event=params.event,
        minutes=params.minutes,
        degrees=degrees,
    )
