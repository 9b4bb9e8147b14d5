# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Unit tests for paired date range validation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fieldrules.exceptions import (
    ConfigurationError,
    DuplicateStartMarkerError,
    FieldAccessError,
    TimestampError,
    UnmatchedEndMarkerError,
)
from fieldrules.markers import AllowedStrings, EndDate, StartDate
from fieldrules.validation import DateRangeValidator, Interval, ValidationResult


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _validate(end_marker, start, end):
    markers = [("start", StartDate(end_marker.id)), ("end", end_marker)]
    return DateRangeValidator().validate(markers, {"start": start, "end": end})


# ------------------------------------------------------------------
# Minimum duration policy
# ------------------------------------------------------------------


def test_fourteen_days_meets_minimum_of_fourteen():
    result = _validate(EndDate(1, minimum_days=14), utc(2024, 1, 1), utc(2024, 1, 15))

    assert isinstance(result, ValidationResult)
    assert result.valid is True
    assert result.violations == []
    assert result.failed_interval_ids == frozenset()


def test_fourteen_days_fails_minimum_of_fifteen():
    result = _validate(EndDate(1, minimum_days=15), utc(2024, 1, 1), utc(2024, 1, 15))

    assert result.valid is False
    [violation] = result.violations
    assert violation.rule == "minimum_days"
    assert violation.field == "end"
    assert violation.expected == 15
    assert violation.actual == 14
    assert violation.interval_id == 1
    assert "at least 15" in violation.message
    assert result.failed_interval_ids == frozenset({1})


@pytest.mark.parametrize(
    "days,minimum,expected",
    [
        (0, 0, True),
        (1, 0, True),
        (9, 10, False),
        (10, 10, True),
        (400, 365, True),
    ],
)
def test_minimum_days_threshold(days, minimum, expected):
    start = utc(2024, 3, 1)
    result = _validate(EndDate(1, minimum_days=minimum), start, start + timedelta(days=days))
    assert result.valid is expected


def test_end_before_start_is_invalid_even_with_zero_minimum():
    result = _validate(EndDate(1), utc(2024, 1, 1), utc(2023, 12, 31))

    assert result.valid is False
    [violation] = result.violations
    assert violation.rule == "chronology"
    assert "before" in violation.message


def test_end_one_millisecond_before_start_is_invalid():
    start = utc(2024, 1, 1)
    result = _validate(EndDate(1), start, start - timedelta(milliseconds=1))
    assert result.valid is False


def test_end_before_start_is_invalid_with_allowed_ranges():
    result = _validate(EndDate(1, allowed_day_ranges=(0, 1)), utc(2024, 1, 2), utc(2024, 1, 1))
    assert result.valid is False
    assert result.violations[0].rule == "chronology"


# ------------------------------------------------------------------
# Allowed day ranges
# ------------------------------------------------------------------


@pytest.mark.parametrize("days", [7, 14, 30])
def test_exact_allowed_range_is_valid(days):
    start = utc(2024, 5, 1)
    result = _validate(EndDate(1, allowed_day_ranges=(7, 14, 30)), start, start + timedelta(days=days))
    assert result.valid is True


def test_day_count_outside_allowed_ranges_is_invalid():
    start = utc(2024, 5, 1)
    result = _validate(EndDate(1, allowed_day_ranges=(7, 14, 30)), start, start + timedelta(days=8))

    assert result.valid is False
    [violation] = result.violations
    assert violation.rule == "allowed_day_ranges"
    assert violation.expected == [7, 14, 30]
    assert violation.actual == 8


def test_allowed_ranges_override_minimum_days():
    start = utc(2024, 5, 1)
    marker = EndDate(1, minimum_days=100, allowed_day_ranges=(7,))

    assert _validate(marker, start, start + timedelta(days=7)).valid is True
    assert _validate(marker, start, start + timedelta(days=150)).valid is False


def test_thirty_day_allow_list_across_month_boundary():
    marker = EndDate(1, allowed_day_ranges=[30])

    assert _validate(marker, utc(2024, 1, 1), utc(2024, 1, 31)).valid is True
    assert _validate(marker, utc(2024, 1, 1), utc(2024, 2, 1)).valid is False


# ------------------------------------------------------------------
# Rounding of partial days
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "span,expected_days",
    [
        (timedelta(hours=12), 1),
        (timedelta(hours=11, minutes=59, seconds=59, milliseconds=999), 0),
        (timedelta(days=364, hours=12), 365),
        (timedelta(days=364, hours=11), 364),
        (timedelta(days=2, hours=13), 3),
    ],
)
def test_partial_days_round_half_up(span, expected_days):
    start = utc(2023, 1, 1)
    interval = Interval(
        interval_id=1,
        start_field="start",
        start_date=start,
        end_field="end",
        end_date=start + span,
    )
    assert interval.elapsed_days() == expected_days


def test_half_day_boundary_decides_minimum():
    start = utc(2023, 1, 1)
    marker = EndDate(1, minimum_days=365)

    assert _validate(marker, start, start + timedelta(days=364, hours=12)).valid is True
    assert _validate(marker, start, start + timedelta(days=364, hours=11)).valid is False


# ------------------------------------------------------------------
# Missing boundaries and ambiguous declarations
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "start,end",
    [
        (utc(2024, 1, 10), None),
        (None, utc(2024, 1, 1)),
        (None, None),
    ],
)
@pytest.mark.parametrize(
    "marker",
    [EndDate(1, minimum_days=1000), EndDate(1, allowed_day_ranges=(3,))],
)
def test_missing_boundary_is_valid_for_any_policy(start, end, marker):
    assert _validate(marker, start, end).valid is True


def test_duplicate_end_marker_skips_the_interval():
    markers = [
        ("start", StartDate(1)),
        ("end", EndDate(1, minimum_days=100)),
        ("other_end", EndDate(1, minimum_days=100)),
    ]
    values = {"start": utc(2024, 1, 10), "end": utc(2024, 1, 1), "other_end": utc(2023, 1, 1)}

    validator = DateRangeValidator()
    intervals = validator.build_intervals(markers, values)

    assert intervals[1].duplicate_end_seen is True
    assert validator.is_valid(markers, values) is True


def test_null_first_end_is_replaced_by_later_end_marker():
    markers = [
        ("start", StartDate(1)),
        ("end", EndDate(1)),
        ("other_end", EndDate(1, minimum_days=30)),
    ]
    values = {"start": utc(2024, 1, 10), "end": None, "other_end": utc(2024, 1, 9)}

    validator = DateRangeValidator()
    interval = validator.build_intervals(markers, values)[1]
    result = validator.validate(markers, values)

    assert interval.duplicate_end_seen is False
    assert interval.end_field == "other_end"
    assert result.valid is False
    assert [v.rule for v in result.violations] == ["chronology"]


def test_later_end_marker_brings_its_policy_after_null_first_end():
    markers = [
        ("start", StartDate(1)),
        ("end", EndDate(1)),
        ("other_end", EndDate(1, minimum_days=30)),
    ]
    values = {"start": utc(2024, 1, 10), "end": None, "other_end": utc(2024, 1, 20)}

    result = DateRangeValidator().validate(markers, values)

    assert result.valid is False
    assert result.violations[0].rule == "minimum_days"
    assert result.violations[0].expected == 30


def test_duplicate_end_keeps_first_policy():
    markers = [
        ("start", StartDate(1)),
        ("end", EndDate(1, minimum_days=5)),
        ("other_end", EndDate(1, allowed_day_ranges=(2,))),
    ]
    values = {"start": None, "end": utc(2024, 1, 1), "other_end": None}

    interval = DateRangeValidator().build_intervals(markers, values)[1]
    assert interval.duplicate_end_seen is True
    assert interval.end_field == "end"
    assert interval.minimum_days == 5
    assert interval.allowed_day_ranges == ()


@pytest.mark.parametrize(
    "markers",
    [
        [],
        [("start", StartDate(1))],
        [("end", EndDate(1, minimum_days=10))],
        [("status", AllowedStrings(("a",)))],
    ],
)
def test_records_without_both_marker_kinds_are_trivially_valid(markers):
    values = {"start": utc(2024, 1, 1), "end": utc(2023, 1, 1), "status": "zzz"}
    validator = DateRangeValidator()

    assert validator.build_intervals(markers, values) == {}
    assert validator.is_valid(markers, values) is True


def test_start_without_end_is_valid_when_other_intervals_exist():
    markers = [
        ("a_start", StartDate(1)),
        ("a_end", EndDate(1, minimum_days=1)),
        ("b_start", StartDate(2)),
    ]
    values = {"a_start": utc(2024, 1, 1), "a_end": utc(2024, 1, 3), "b_start": utc(2024, 1, 1)}

    assert DateRangeValidator().is_valid(markers, values) is True


# ------------------------------------------------------------------
# Several intervals on one record
# ------------------------------------------------------------------


def test_every_failing_interval_is_reported():
    markers = [
        ("booked", StartDate(1)),
        ("arrival", EndDate(1, minimum_days=7)),
        ("arrival_start", StartDate(2)),
        ("departure", EndDate(2, allowed_day_ranges=(1, 2, 3))),
        ("paid", StartDate(3)),
        ("refunded", EndDate(3)),
    ]
    values = {
        "booked": utc(2024, 6, 1),
        "arrival": utc(2024, 6, 3),
        "arrival_start": utc(2024, 6, 3),
        "departure": utc(2024, 6, 10),
        "paid": utc(2024, 6, 1),
        "refunded": utc(2024, 6, 2),
    }

    result = DateRangeValidator().validate(markers, values)

    assert result.valid is False
    assert result.failed_interval_ids == frozenset({1, 2})
    assert {v.rule for v in result.violations} == {"minimum_days", "allowed_day_ranges"}


def test_one_field_can_end_one_interval_and_start_another():
    markers = [
        ("a", StartDate(1)),
        ("b", EndDate(1, minimum_days=1)),
        ("b", StartDate(2)),
        ("c", EndDate(2, minimum_days=1)),
    ]
    values = {"a": utc(2024, 1, 1), "b": utc(2024, 1, 2), "c": utc(2024, 1, 2)}

    result = DateRangeValidator().validate(markers, values)
    assert result.failed_interval_ids == frozenset({2})


def test_validation_is_idempotent_and_does_not_touch_values():
    markers = [("start", StartDate(1)), ("end", EndDate(1, minimum_days=3))]
    values = {"start": "2024-01-01T00:00:00Z", "end": "2024-01-02T00:00:00Z"}
    snapshot = dict(values)
    validator = DateRangeValidator()

    first = validator.validate(markers, values)
    second = validator.validate(markers, values)

    assert first == second
    assert first.valid is False
    assert values == snapshot


def test_custom_message_is_used_in_violation():
    result = _validate(
        EndDate(1, minimum_days=2, message="Stay too short"), utc(2024, 1, 1), utc(2024, 1, 2)
    )
    assert result.violations[0].message.startswith("Stay too short:")


def test_mixed_value_types_are_compared_as_utc_instants():
    markers = [("start", StartDate(1)), ("end", EndDate(1, minimum_days=1))]
    values = {
        "start": "2024-01-01T23:00:00-01:00",  # 2024-01-02T00:00Z
        "end": datetime(2024, 1, 3),  # naive, taken as UTC
    }
    assert DateRangeValidator().is_valid(markers, values) is True


# ------------------------------------------------------------------
# Configuration errors
# ------------------------------------------------------------------


def test_end_without_matching_start_is_a_configuration_error():
    markers = [("start", StartDate(1)), ("end", EndDate(2))]

    with pytest.raises(UnmatchedEndMarkerError) as excinfo:
        DateRangeValidator().validate(markers, {"start": None, "end": None}, record="Trip")

    assert isinstance(excinfo.value, ConfigurationError)
    assert excinfo.value.interval_id == 2
    assert excinfo.value.field_name == "end"
    assert "Trip" in str(excinfo.value)


def test_duplicate_start_is_a_configuration_error():
    markers = [("a", StartDate(1)), ("b", StartDate(1)), ("c", EndDate(1))]

    with pytest.raises(DuplicateStartMarkerError, match="more than one start"):
        DateRangeValidator().validate(markers, {"a": None, "b": None, "c": None})


def test_missing_field_value_is_a_field_access_error():
    markers = [("start", StartDate(1)), ("end", EndDate(1))]

    with pytest.raises(FieldAccessError, match="'end'"):
        DateRangeValidator().validate(markers, {"start": utc(2024, 1, 1)})


def test_unparseable_value_is_a_timestamp_error():
    markers = [("start", StartDate(1)), ("end", EndDate(1))]

    with pytest.raises(TimestampError):
        DateRangeValidator().validate(markers, {"start": "next tuesday", "end": None})
