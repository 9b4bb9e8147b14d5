# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Field markers: the declarative tags attached to record fields.

Markers are plain frozen dataclasses. Attach them with ``typing.Annotated``::

    @dataclass
    class Booking:
        check_in: Annotated[datetime, StartDate(1)]
        check_out: Annotated[datetime, EndDate(1, minimum_days=1)]
        status: Annotated[Optional[str], AllowedStrings(["open", "closed"])]

or list them in an explicit mapping passed to ``register_record``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

from .exceptions import ConfigurationError

DEFAULT_DATE_RANGE_MESSAGE = "Invalid date range"
DEFAULT_ALLOWED_MESSAGE = "Invalid value"


def _check_interval_id(marker: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{marker} id must be an integer, got {value!r}")


@dataclass(frozen=True)
class StartDate:
    """Declares a field as the lower bound of interval ``id``."""

    id: int
    message: Optional[str] = None

    def __post_init__(self):
        _check_interval_id("StartDate", self.id)


@dataclass(frozen=True)
class EndDate:
    """Declares a field as the upper bound of interval ``id``.

    ``allowed_day_ranges`` takes precedence: when it is non-empty the elapsed
    day count must match one of its members exactly and ``minimum_days`` is
    ignored. Otherwise the elapsed day count must be at least ``minimum_days``.
    """

    id: int
    minimum_days: int = 0
    allowed_day_ranges: Tuple[int, ...] = field(default=())
    message: Optional[str] = None

    def __post_init__(self):
        _check_interval_id("EndDate", self.id)
        if isinstance(self.minimum_days, bool) or not isinstance(self.minimum_days, int):
            raise ConfigurationError(
                f"EndDate minimum_days must be an integer, got {self.minimum_days!r}"
            )
        if self.minimum_days < 0:
            raise ConfigurationError(
                f"EndDate minimum_days must not be negative, got {self.minimum_days}"
            )

        ranges = tuple(self.allowed_day_ranges)
        for days in ranges:
            if isinstance(days, bool) or not isinstance(days, int) or days < 0:
                raise ConfigurationError(
                    f"EndDate allowed_day_ranges must hold non-negative integers, got {days!r}"
                )
        # Frozen dataclass: normalise lists to tuples so markers stay hashable.
        object.__setattr__(self, "allowed_day_ranges", ranges)


@dataclass(frozen=True)
class AllowedStrings:
    """Restricts a text field to an exact set of permitted strings."""

    values: Tuple[str, ...]
    null_allowed: bool = True
    message: str = DEFAULT_ALLOWED_MESSAGE

    def __post_init__(self):
        if isinstance(self.values, str):
            raise ConfigurationError(
                "AllowedStrings values must be a sequence of strings, not a single string"
            )
        values = tuple(self.values)
        for value in values:
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"AllowedStrings values must be strings, got {value!r}"
                )
        object.__setattr__(self, "values", values)


FieldMarker = Union[StartDate, EndDate, AllowedStrings]

MARKER_TYPES = (StartDate, EndDate, AllowedStrings)


def is_marker(value) -> bool:
    return isinstance(value, MARKER_TYPES)


def split_markers(
    markers: Iterable[Tuple[str, FieldMarker]],
) -> Tuple[list[Tuple[str, StartDate]], list[Tuple[str, EndDate]]]:
    """Partition ``(field, marker)`` pairs into start and end date pairs."""

    starts: list[Tuple[str, StartDate]] = []
    ends: list[Tuple[str, EndDate]] = []
    for field_name, marker in markers:
        if isinstance(marker, StartDate):
            starts.append((field_name, marker))
        elif isinstance(marker, EndDate):
            ends.append((field_name, marker))
    return starts, ends


__all__ = [
    "StartDate",
    "EndDate",
    "AllowedStrings",
    "FieldMarker",
    "MARKER_TYPES",
    "DEFAULT_DATE_RANGE_MESSAGE",
    "DEFAULT_ALLOWED_MESSAGE",
    "is_marker",
    "split_markers",
]
