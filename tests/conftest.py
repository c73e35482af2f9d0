from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from zmanim.calculators import NOAACalculator
from zmanim.calendar import AstronomicalCalendar
from zmanim.geolocation import GeoLocation


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ZMANIM_CALCULATOR", raising=False)
    monkeypatch.delenv("ZMANIM_MAX_SOLAR_DIP", raising=False)


@pytest.fixture
def denver() -> GeoLocation:
    return GeoLocation(
        latitude=39.73915,
        longitude=-104.9847,
        elevation=1636,
        timezone="America/Denver",
        name="Denver",
    )


@pytest.fixture
def denver_calendar(denver: GeoLocation) -> AstronomicalCalendar:
    return AstronomicalCalendar(denver, date(2020, 6, 5), NOAACalculator())


@pytest.fixture
def svalbard() -> GeoLocation:
    return GeoLocation(
        latitude=78.2232,
        longitude=15.6469,
        elevation=0.0,
        timezone="Arctic/Longyearbyen",
        name="Longyearbyen",
    )


@pytest.fixture
def polar_day_calendar(svalbard: GeoLocation) -> AstronomicalCalendar:
    return AstronomicalCalendar(svalbard, date(2020, 6, 21), NOAACalculator())
