# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for fieldrules.

Two disjoint families live here:

* ``ConfigurationError`` and its subclasses signal a broken schema or a
  programming mistake (unmatched markers, unreadable fields, values that are
  not timestamps). They are fatal and never mean "the record is invalid".
* ``InvalidRecordError`` is only raised by :func:`fieldrules.ensure_valid` for
  callers that prefer exceptions over inspecting a ``ValidationResult``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .validation.base import ValidationResult


class FieldRulesError(Exception):
    """Base class for every error raised by fieldrules."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(FieldRulesError):
    """Raised when markers, schemas or schema files are malformed."""


class UnmatchedEndMarkerError(ConfigurationError):
    """An end-date marker references an interval id with no start-date marker."""

    def __init__(self, interval_id: int, field_name: str, record: Optional[str] = None):
        self.interval_id = interval_id
        self.field_name = field_name
        self.record = record
        where = f" on record '{record}'" if record else ""
        super().__init__(
            f"End date field '{field_name}'{where} references interval id {interval_id} "
            "but no start date field declares that id"
        )


class DuplicateStartMarkerError(ConfigurationError):
    """Two start-date markers declare the same interval id."""

    def __init__(self, interval_id: int, fields: tuple[str, ...], record: Optional[str] = None):
        self.interval_id = interval_id
        self.fields = fields
        self.record = record
        where = f" on record '{record}'" if record else ""
        super().__init__(
            f"Interval id {interval_id}{where} has more than one start date field: "
            f"{', '.join(fields)}"
        )


class FieldAccessError(ConfigurationError):
    """A declared field could not be read from the record instance."""

    def __init__(self, field_name: str, record: Optional[str] = None, reason: str = "field not found"):
        self.field_name = field_name
        self.record = record
        where = f" on record '{record}'" if record else ""
        super().__init__(f"Cannot read field '{field_name}'{where}: {reason}")


class TimestampError(ConfigurationError):
    """A date field holds a value that cannot be interpreted as a timestamp."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        super().__init__(f"Cannot interpret {value!r} as a timestamp: {reason}")


class InvalidRecordError(FieldRulesError):
    """Raised by ``ensure_valid`` when a record fails validation."""

    def __init__(self, record: str, result: "ValidationResult", message: Optional[str] = None):
        self.record = record
        self.result = result
        super().__init__(message or f"Record '{record}' failed validation")

    @property
    def violations(self):
        return self.result.violations


__all__ = [
    "FieldRulesError",
    "ConfigurationError",
    "UnmatchedEndMarkerError",
    "DuplicateStartMarkerError",
    "FieldAccessError",
    "TimestampError",
    "InvalidRecordError",
]
