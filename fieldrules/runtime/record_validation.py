# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Runtime helpers for validating records with the shared validator."""

from __future__ import annotations

from typing import Any, Final, Optional

from ..exceptions import InvalidRecordError
from ..schema.record import RecordSchema, get_schema
from ..validation import RecordValidator, ValidationResult


_VALIDATOR: Final[RecordValidator] = RecordValidator()


def get_record_validator() -> RecordValidator:
    """Return the process-wide record validator instance."""

    return _VALIDATOR


def format_validation_reason(record_name: str, validation: ValidationResult) -> str:
    """Produce a human-readable reason for validation failures."""

    lines = [f"Validation failed for record '{record_name}':"]
    for violation in validation.violations:
        lines.append(f" - {violation.message}")
    return "\n".join(lines)


def is_valid(record: Any, schema: Optional[RecordSchema] = None) -> bool:
    """Return whether *record* satisfies every rule declared on its fields."""

    return _VALIDATOR.validate(record, schema).valid


def ensure_valid(record: Any, schema: Optional[RecordSchema] = None) -> Any:
    """Validate *record* and return it unchanged, raising if it is invalid.

    Raises:
        InvalidRecordError: the record violates at least one rule.
        ConfigurationError: the record type's declarations are broken.
    """
    if schema is None:
        schema = get_schema(record)
    validation = _VALIDATOR.validate(record, schema)
    if not validation.valid:
        raise InvalidRecordError(
            schema.name,
            validation,
            format_validation_reason(schema.name, validation),
        )
    return record


__all__ = [
    "ensure_valid",
    "format_validation_reason",
    "get_record_validator",
    "is_valid",
]
