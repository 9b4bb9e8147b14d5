# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Paired date range validation.

Start and end date fields are declared separately and correlated by a shared
integer id. Each correlated pair forms an :class:`Interval` whose elapsed day
count is checked against the end marker's duration policy:

* ``allowed_day_ranges`` non-empty: the day count must be one of them exactly
* otherwise: the day count must be at least ``minimum_days``

Intervals are built in two phases on every call. Phase one creates one
interval per start marker; phase two folds the end markers into them. The
intervals are frozen dataclasses and none of them outlives the call.

Policy for incomplete or ambiguous declarations:

* no start markers or no end markers at all: nothing to check, valid
* a boundary value of ``None``: not yet checkable, valid
* a second end marker once the interval holds an end value: ambiguous, the
  interval is skipped (an end field holding ``None`` leaves the slot open)
* an end marker whose id has no start marker: ``UnmatchedEndMarkerError``
* end before start: invalid whatever the policy says
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..exceptions import (
    DuplicateStartMarkerError,
    FieldAccessError,
    UnmatchedEndMarkerError,
)
from ..markers import DEFAULT_DATE_RANGE_MESSAGE, EndDate, FieldMarker, split_markers
from ..telemetry.metrics import interval_violation_total
from ..timestamps import elapsed_millis, round_days, to_timestamp
from .base import ValidationResult, ValidationViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """One start/end pair and the policy used to judge it."""

    interval_id: int
    start_field: str
    start_date: Optional[datetime] = None
    end_field: Optional[str] = None
    end_date: Optional[datetime] = None
    minimum_days: int = 0
    allowed_day_ranges: Tuple[int, ...] = ()
    duplicate_end_seen: bool = False
    message: Optional[str] = None

    def with_end(self, field_name: str, end_date: Optional[datetime], marker: EndDate) -> "Interval":
        """Return a copy carrying the end boundary and its duration policy.

        An end boundary arriving after one that held a value only flags the
        interval as ambiguous. After a ``None`` end the later marker fills in
        the date and its policy, layered over what the earlier one set.
        """
        if self.end_date is not None:
            return replace(self, duplicate_end_seen=True)

        message = marker.message or self.message
        if marker.allowed_day_ranges:
            return replace(
                self,
                end_field=field_name,
                end_date=end_date,
                allowed_day_ranges=marker.allowed_day_ranges,
                message=message,
            )
        return replace(
            self,
            end_field=field_name,
            end_date=end_date,
            minimum_days=marker.minimum_days,
            message=message,
        )

    @property
    def checkable(self) -> bool:
        return (
            not self.duplicate_end_seen
            and self.start_date is not None
            and self.end_date is not None
        )

    def elapsed_millis(self) -> Optional[int]:
        if self.start_date is None or self.end_date is None:
            return None
        return elapsed_millis(self.start_date, self.end_date)

    def elapsed_days(self) -> Optional[int]:
        """Rounded day count, or None when unset or when end precedes start."""

        millis = self.elapsed_millis()
        if millis is None or millis < 0:
            return None
        return round_days(millis)

    def check(self) -> Optional[ValidationViolation]:
        """Judge the interval, returning the violation if it fails."""

        if not self.checkable:
            return None

        millis = self.elapsed_millis()
        if millis < 0:
            return self._violation(
                "chronology",
                expected=self.start_date,
                actual=self.end_date,
                detail=f"'{self.end_field}' ({self.end_date.isoformat()}) is before "
                f"'{self.start_field}' ({self.start_date.isoformat()})",
            )

        days = round_days(millis)
        if self.allowed_day_ranges:
            if days in self.allowed_day_ranges:
                return None
            allowed = ", ".join(str(d) for d in self.allowed_day_ranges)
            return self._violation(
                "allowed_day_ranges",
                expected=list(self.allowed_day_ranges),
                actual=days,
                detail=f"spans {days} day(s), must be one of [{allowed}]",
            )

        if days >= self.minimum_days:
            return None
        return self._violation(
            "minimum_days",
            expected=self.minimum_days,
            actual=days,
            detail=f"spans {days} day(s), must be at least {self.minimum_days}",
        )

    @property
    def is_valid(self) -> bool:
        return self.check() is None

    def _violation(self, rule: str, *, expected: Any, actual: Any, detail: str) -> ValidationViolation:
        base = self.message or DEFAULT_DATE_RANGE_MESSAGE
        return ValidationViolation(
            field=self.end_field or self.start_field,
            rule=rule,
            expected=expected,
            actual=actual,
            message=f"{base}: interval {self.interval_id} "
            f"('{self.start_field}' -> '{self.end_field}') {detail}",
            interval_id=self.interval_id,
        )


def _read(values: Mapping[str, Any], field_name: str, record: Optional[str]) -> Any:
    try:
        return values[field_name]
    except KeyError:
        raise FieldAccessError(field_name, record, "no value supplied") from None


class DateRangeValidator:
    """Correlate start/end date markers and check each interval.

    Example:
        ```python
        validator = DateRangeValidator()
        result = validator.validate(
            [("start", StartDate(1)), ("end", EndDate(1, minimum_days=14))],
            {"start": "2024-01-01T00:00Z", "end": "2024-01-15T00:00Z"},
        )
        assert result.valid
        ```

    The validator holds no state between calls and may be shared.
    """

    def build_intervals(
        self,
        markers: Iterable[Tuple[str, FieldMarker]],
        values: Mapping[str, Any],
        *,
        record: Optional[str] = None,
    ) -> Dict[int, Interval]:
        """Correlate *markers* into intervals keyed by id.

        Returns an empty mapping when the record declares no start markers or
        no end markers.

        Raises:
            DuplicateStartMarkerError: two start markers share an id.
            UnmatchedEndMarkerError: an end marker id has no start marker.
            FieldAccessError: *values* lacks a declared field.
            TimestampError: a field value is not a timestamp.
        """
        starts, ends = split_markers(markers)
        if not starts or not ends:
            logger.debug(
                "Record %s declares %d start and %d end markers; nothing to correlate",
                record or "<anonymous>",
                len(starts),
                len(ends),
            )
            return {}

        intervals: Dict[int, Interval] = {}
        for field_name, marker in starts:
            existing = intervals.get(marker.id)
            if existing is not None:
                logger.error(
                    "Interval %d declared by two start fields: %s, %s",
                    marker.id,
                    existing.start_field,
                    field_name,
                )
                raise DuplicateStartMarkerError(marker.id, (existing.start_field, field_name), record)
            intervals[marker.id] = Interval(
                interval_id=marker.id,
                start_field=field_name,
                start_date=to_timestamp(_read(values, field_name, record)),
                message=marker.message,
            )

        for field_name, marker in ends:
            interval = intervals.get(marker.id)
            if interval is None:
                logger.error(
                    "End field '%s' references interval %d with no start field",
                    field_name,
                    marker.id,
                )
                raise UnmatchedEndMarkerError(marker.id, field_name, record)
            if interval.end_date is not None:
                logger.debug(
                    "Interval %d has a second end field '%s'; skipping it as ambiguous",
                    marker.id,
                    field_name,
                )
                intervals[marker.id] = interval.with_end(field_name, None, marker)
                continue
            intervals[marker.id] = interval.with_end(
                field_name, to_timestamp(_read(values, field_name, record)), marker
            )

        return intervals

    def validate(
        self,
        markers: Iterable[Tuple[str, FieldMarker]],
        values: Mapping[str, Any],
        *,
        record: Optional[str] = None,
    ) -> ValidationResult:
        """Validate every interval, reporting each failing one."""

        result = ValidationResult()
        for interval in self.build_intervals(markers, values, record=record).values():
            violation = interval.check()
            if violation is None:
                continue
            logger.debug("Interval %d failed: %s", interval.interval_id, violation.message)
            interval_violation_total.add(1, {"rule": violation.rule})
            result.add(violation)
        return result

    def is_valid(
        self,
        markers: Iterable[Tuple[str, FieldMarker]],
        values: Mapping[str, Any],
        *,
        record: Optional[str] = None,
    ) -> bool:
        return self.validate(markers, values, record=record).valid


__all__ = ["DateRangeValidator", "Interval"]
