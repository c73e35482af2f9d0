from __future__ import annotations

import dataclasses

import pytest

from zmanim.geolocation import HOUR_MILLIS, GeoLocation


@pytest.mark.parametrize(
    "kwargs",
    [
        {"latitude": 91.0, "longitude": 0.0},
        {"latitude": -90.5, "longitude": 0.0},
        {"latitude": 0.0, "longitude": 180.1},
        {"latitude": 0.0, "longitude": 0.0, "elevation": -1.0},
        {"latitude": 0.0, "longitude": 0.0, "timezone": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_locations_raise(kwargs) -> None:
    with pytest.raises(ValueError):
        GeoLocation(**kwargs)


def test_raw_offset_ignores_daylight_saving(denver: GeoLocation) -> None:
    assert denver.raw_offset() == -7 * HOUR_MILLIS
    sydney = GeoLocation(-33.8688, 151.2093, 0.0, "Australia/Sydney")
    assert sydney.raw_offset() == 10 * HOUR_MILLIS


def test_raw_offset_takes_lesser_of_winter_and_summer() -> None:
    # tzdata models Irish time with a negative winter DST.
    dublin = GeoLocation(53.3498, -6.2603, 0.0, "Europe/Dublin")
    assert dublin.raw_offset() == 0
    assert GeoLocation(0.0, 0.0).raw_offset() == 0


def test_local_mean_time_offset(denver: GeoLocation) -> None:
    expected = int(-104.9847 * 4 * 60_000 - (-7 * HOUR_MILLIS))
    assert denver.local_mean_time_offset() == expected


@pytest.mark.parametrize(
    ("latitude", "longitude", "timezone", "adjustment"),
    [
        (39.73915, -104.9847, "America/Denver", 0),
        (-13.8333, -171.7667, "Pacific/Apia", -1),
        (1.8721, -157.4278, "Pacific/Kiritimati", -1),
        (0.0, 170.0, "Etc/GMT+12", 1),
    ],
)
def test_antimeridian_adjustment(latitude, longitude, timezone, adjustment) -> None:
    location = GeoLocation(latitude, longitude, 0.0, timezone)
    assert location.antimeridian_adjustment() == adjustment


def test_value_semantics(denver: GeoLocation) -> None:
    moved = dataclasses.replace(denver, elevation=0.0)
    assert moved != denver
    assert moved.zone is denver.zone
    assert dataclasses.replace(moved, elevation=1636) == denver
    with pytest.raises(dataclasses.FrozenInstanceError):
        denver.latitude = 0.0  # type: ignore[misc]
