"""Sunrise, sunset, twilight and transit calculations for any date and place."""

from .calculators import (
    CALCULATORS,
    AstronomicalCalculator,
    NOAACalculator,
    SunTimesCalculator,
    get_calculator,
)
from .calendar import AstronomicalCalendar
from .config import ConfigurationError
from .ephemeris import ErfaCalculator
from .geolocation import GeoLocation
from .zman import DATE_ORDER, DURATION_ORDER, NAME_ORDER, Zman

__all__ = [
    "AstronomicalCalendar",
    "AstronomicalCalculator",
    "CALCULATORS",
    "ConfigurationError",
    "DATE_ORDER",
    "DURATION_ORDER",
    "ErfaCalculator",
    "GeoLocation",
    "NAME_ORDER",
    "NOAACalculator",
    "SunTimesCalculator",
    "Zman",
    "get_calculator",
]
