# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""fieldrules - declarative field constraints for data records.

Declare rules on record fields and check instances against them::

    from dataclasses import dataclass
    from datetime import datetime
    from typing import Annotated

    from fieldrules import EndDate, StartDate, constrained, is_valid

    @constrained
    @dataclass
    class Lease:
        start: Annotated[datetime, StartDate(1)]
        end: Annotated[datetime, EndDate(1, allowed_day_ranges=(30, 90, 365))]

    is_valid(Lease(datetime(2024, 1, 1), datetime(2024, 1, 31)))  # True
"""

from .exceptions import (
    ConfigurationError,
    DuplicateStartMarkerError,
    FieldAccessError,
    FieldRulesError,
    InvalidRecordError,
    TimestampError,
    UnmatchedEndMarkerError,
)
from .markers import AllowedStrings, EndDate, StartDate
from .runtime import ensure_valid, format_validation_reason, get_record_validator, is_valid
from .schema import (
    RecordSchema,
    SchemaBundle,
    clear_registry,
    constrained,
    get_schema,
    load_schema_file,
    locate_schema_file,
    register_record,
)
from .validation import (
    AllowedStringsValidator,
    DateRangeValidator,
    Interval,
    RecordValidator,
    ValidationResult,
    ValidationViolation,
)

__version__ = "1.0.0"

__all__ = [
    "AllowedStrings",
    "AllowedStringsValidator",
    "ConfigurationError",
    "DateRangeValidator",
    "DuplicateStartMarkerError",
    "EndDate",
    "FieldAccessError",
    "FieldRulesError",
    "Interval",
    "InvalidRecordError",
    "RecordSchema",
    "RecordValidator",
    "SchemaBundle",
    "StartDate",
    "TimestampError",
    "UnmatchedEndMarkerError",
    "ValidationResult",
    "ValidationViolation",
    "clear_registry",
    "constrained",
    "ensure_valid",
    "format_validation_reason",
    "get_record_validator",
    "get_schema",
    "is_valid",
    "load_schema_file",
    "locate_schema_file",
    "register_record",
]
