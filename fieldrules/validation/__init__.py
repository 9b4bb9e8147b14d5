# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation package - date range and allowed value checks.

Validators only inspect values; records are never modified. Violations are
returned in a ``ValidationResult`` while schema mistakes raise
``ConfigurationError``.
"""

from .allowed_values import AllowedStringsValidator
from .base import ValidationResult, ValidationViolation
from .date_range import DateRangeValidator, Interval
from .record import RecordValidator

__all__ = [
    "AllowedStringsValidator",
    "DateRangeValidator",
    "Interval",
    "RecordValidator",
    "ValidationResult",
    "ValidationViolation",
]
