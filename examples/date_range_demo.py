# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Date Range Demo: paired start/end fields checked by a shared id.

This demo declares a hotel stay with two intervals:

1. booking -> arrival must leave at least 2 days' notice
2. arrival -> departure must be exactly 1, 7 or 14 nights

Run with:
    python examples/date_range_demo.py
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Optional

from fieldrules import (
    AllowedStrings,
    ConfigurationError,
    EndDate,
    InvalidRecordError,
    RecordSchema,
    StartDate,
    constrained,
    ensure_valid,
    get_record_validator,
)


@constrained
@dataclass
class Stay:
    booked_at: Annotated[datetime, StartDate(1)]
    arrival: Annotated[datetime, EndDate(1, minimum_days=2, message="Not enough notice"), StartDate(2)]
    departure: Annotated[Optional[datetime], EndDate(2, allowed_day_ranges=(1, 7, 14))]
    room: Annotated[Optional[str], AllowedStrings(("single", "double", "suite"))] = None


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def demo_valid_and_invalid_stays():
    print("\n" + "=" * 70)
    print("DEMO 1: Validating stays")
    print("=" * 70)

    stays = {
        "week-long stay": Stay(utc(2024, 6, 1), utc(2024, 6, 10), utc(2024, 6, 17), "double"),
        "last-minute booking": Stay(utc(2024, 6, 9), utc(2024, 6, 10), utc(2024, 6, 11)),
        "three nights": Stay(utc(2024, 6, 1), utc(2024, 6, 10), utc(2024, 6, 13), "suite"),
        "departure not known yet": Stay(utc(2024, 6, 1), utc(2024, 6, 10), None),
    }

    validator = get_record_validator()
    for label, stay in stays.items():
        result = validator.validate(stay)
        status = "valid" if result.valid else f"INVALID intervals {sorted(result.failed_interval_ids)}"
        print(f"\n  {label}: {status}")
        for violation in result.violations:
            print(f"    - {violation.message}")


def demo_ensure_valid():
    print("\n" + "=" * 70)
    print("DEMO 2: ensure_valid raises for invalid records")
    print("=" * 70)
    try:
        ensure_valid(Stay(utc(2024, 6, 10), utc(2024, 6, 9), utc(2024, 6, 10), "penthouse"))
    except InvalidRecordError as e:
        print(f"\n  {e}")


def demo_configuration_error():
    print("\n" + "=" * 70)
    print("DEMO 3: Broken declarations fail fast")
    print("=" * 70)
    try:
        RecordSchema.from_mapping("Broken", {"opens": StartDate(1), "closes": EndDate(2)})
    except ConfigurationError as e:
        print(f"\n  ConfigurationError: {e}")


if __name__ == "__main__":
    demo_valid_and_invalid_stays()
    demo_ensure_valid()
    demo_configuration_error()
