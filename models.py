"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date as Date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from zmanim.calculators import CALCULATORS


class Calculator(str, Enum):
    """Enumeration of the selectable solar-position algorithms."""

    noaa = "noaa"
    suntimes = "suntimes"
    erfa = "erfa"


class SolarEvent(str, Enum):
    sunrise = "sunrise"
    sunset = "sunset"


class LocationQueryParams(BaseModel):
    """Location and date shared by every endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(
        ..., ge=-180.0, le=180.0, description="Longitude in degrees, west negative"
    )
    date: Date = Field(..., description="Local calendar date (YYYY-MM-DD)")
    tz: str = Field("UTC", description="IANA timezone identifier, e.g. America/Denver")
    name: Optional[str] = Field(None, description="Optional location name")


class ZmanimQueryParams(LocationQueryParams):
    """Validated query parameters for the ``/zmanim`` endpoint."""

    elevation: float = Field(0.0, ge=0.0, description="Observer elevation in meters")
    calculator: Optional[Calculator] = Field(
        None, description="Solar-position algorithm; defaults to ZMANIM_CALCULATOR"
    )


class SolarDipQueryParams(LocationQueryParams):
    """Validated query parameters for the ``/solar-dip`` endpoint."""

    minutes: float = Field(
        ...,
        ge=-720.0,
        le=720.0,
        description="Minutes before sea-level sunrise or after sea-level sunset",
    )
    event: SolarEvent = Field(SolarEvent.sunrise, description="Event the offset refers to")
    calculator: Optional[Calculator] = Field(
        None, description="Solar-position algorithm; the dip search rejects erfa"
    )


class ZmanimMetadata(BaseModel):
    algorithm: str
    date: str
    location: Optional[str] = None
    latitude: float
    longitude: float
    elevation: float
    timezone: str
    timezone_offset: float
    type: str


class ZmanimResponse(BaseModel):
    """Successful calendar payload."""

    ok: bool = True
    metadata: ZmanimMetadata
    times: Dict[str, Optional[str]] = Field(
        ..., description="ISO-8601 local times; null where the event does not occur"
    )
    durations: Dict[str, Optional[int]] = Field(
        ..., description="Durations in milliseconds; null where undefined"
    )


class SolarDipResponse(BaseModel):
    ok: bool = True
    date: Date
    event: SolarEvent
    minutes: float
    degrees: Optional[float] = Field(
        None, description="Degrees below the geometric horizon; null when unreachable"
    )


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    calculators: List[str] = Field(default_factory=lambda: sorted(CALCULATORS))


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
