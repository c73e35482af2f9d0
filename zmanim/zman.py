"""Labeled instants and durations, mainly for sorting collections of zmanim."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Optional

from .calendar import epoch_millis
from .geolocation import GeoLocation

__all__ = [
    "Zman",
    "compare_date_order",
    "compare_name_order",
    "compare_duration_order",
    "DATE_ORDER",
    "NAME_ORDER",
    "DURATION_ORDER",
]


@dataclass
class Zman:
    """A labeled instant (``zman``) or duration in milliseconds, never both.

    Build instances with :meth:`from_instant` or :meth:`from_duration`.
    """

    label: Optional[str]
    zman: Optional[datetime] = None
    duration: Optional[int] = None
    geo_location: Optional[GeoLocation] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.zman is not None and self.duration is not None:
            raise ValueError("A Zman holds either an instant or a duration, not both")

    @classmethod
    def from_instant(
        cls,
        instant: Optional[datetime],
        label: Optional[str],
        geo_location: Optional[GeoLocation] = None,
        description: Optional[str] = None,
    ) -> "Zman":
        return cls(label=label, zman=instant, geo_location=geo_location, description=description)

    @classmethod
    def from_duration(
        cls, duration: Optional[int], label: Optional[str], description: Optional[str] = None
    ) -> "Zman":
        """A duration-based zman such as a temporal hour, in milliseconds."""

        return cls(label=label, duration=duration, description=description)

    @property
    def is_duration(self) -> bool:
        return self.zman is None and self.duration is not None


def _compare(first, second) -> int:
    if first == second:
        return 0
    return 1 if first > second else -1


def compare_date_order(first: Optional[Zman], second: Optional[Zman]) -> int:
    """Compare by instant; a missing zman or instant sorts as the epoch."""

    first_millis = epoch_millis(first.zman) if first is not None and first.zman is not None else 0
    second_millis = (
        epoch_millis(second.zman) if second is not None and second.zman is not None else 0
    )
    return _compare(first_millis, second_millis)


def compare_name_order(first: Optional[Zman], second: Optional[Zman]) -> int:
    """Compare by label; a missing zman or label sorts as the empty string."""

    first_label = (first.label if first is not None else None) or ""
    second_label = (second.label if second is not None else None) or ""
    return _compare(first_label, second_label)


def compare_duration_order(first: Optional[Zman], second: Optional[Zman]) -> int:
    """Compare by duration; a missing zman or duration sorts as zero."""

    first_duration = (first.duration if first is not None else None) or 0
    second_duration = (second.duration if second is not None else None) or 0
    return _compare(first_duration, second_duration)


# Key objects for sorted(..., key=...).
DATE_ORDER = cmp_to_key(compare_date_order)
NAME_ORDER = cmp_to_key(compare_name_order)
DURATION_ORDER = cmp_to_key(compare_duration_order)
