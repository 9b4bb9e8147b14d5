# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Allowed string set checks."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Tuple

from ..exceptions import FieldAccessError
from ..markers import AllowedStrings, FieldMarker
from .base import ValidationResult, ValidationViolation


class AllowedStringsValidator:
    """Check text fields against their permitted strings (exact match only)."""

    def check(self, field_name: str, marker: AllowedStrings, value: Any) -> Optional[ValidationViolation]:
        if value is None:
            if marker.null_allowed:
                return None
            return ValidationViolation(
                field=field_name,
                rule="allowed_strings",
                expected=list(marker.values),
                actual=None,
                message=f"{marker.message}: '{field_name}' is missing and null is not allowed",
            )

        if isinstance(value, str) and value in marker.values:
            return None

        return ValidationViolation(
            field=field_name,
            rule="allowed_strings",
            expected=list(marker.values),
            actual=value,
            message=f"{marker.message}: '{field_name}' must be one of {list(marker.values)}, "
            f"got {value!r}",
        )

    def validate(
        self,
        markers: Iterable[Tuple[str, FieldMarker]],
        values: Mapping[str, Any],
        *,
        record: Optional[str] = None,
    ) -> ValidationResult:
        result = ValidationResult()
        for field_name, marker in markers:
            if not isinstance(marker, AllowedStrings):
                continue
            try:
                value = values[field_name]
            except KeyError:
                raise FieldAccessError(field_name, record, "no value supplied") from None
            violation = self.check(field_name, marker, value)
            if violation is not None:
                result.add(violation)
        return result


__all__ = ["AllowedStringsValidator"]
