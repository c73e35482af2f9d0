"""Environment-driven settings for the zmanim engine."""

from __future__ import annotations

import os

__all__ = [
    "ConfigurationError",
    "DEFAULT_CALCULATOR",
    "DEFAULT_MAX_SOLAR_DIP",
    "resolve_calculator_key",
    "resolve_max_solar_dip",
]

DEFAULT_CALCULATOR = "noaa"
DEFAULT_MAX_SOLAR_DIP = 90.0


class ConfigurationError(RuntimeError):
    """Raised when an environment override cannot be used."""


def resolve_calculator_key() -> str:
    """Return the calculator key selected by ``ZMANIM_CALCULATOR``."""

    return os.environ.get("ZMANIM_CALCULATOR", DEFAULT_CALCULATOR).strip().lower()


def resolve_max_solar_dip() -> float:
    """Return the dip-search bound in degrees from ``ZMANIM_MAX_SOLAR_DIP``."""

    override = os.environ.get("ZMANIM_MAX_SOLAR_DIP")
    if not override:
        return DEFAULT_MAX_SOLAR_DIP
    try:
        value = float(override)
    except ValueError as exc:
        raise ConfigurationError(
            f"ZMANIM_MAX_SOLAR_DIP must be a number of degrees: {override!r}"
        ) from exc
    if not 0.0 < value <= 180.0:
        raise ConfigurationError(f"ZMANIM_MAX_SOLAR_DIP must be in (0, 180]: {value}")
    return value
