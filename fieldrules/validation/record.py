# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Whole-record validation: schema lookup, field reads and every check."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from ..exceptions import ConfigurationError
from ..schema.record import RecordSchema, get_schema
from ..telemetry.metrics import record_validation_metrics
from ..telemetry.runtime import get_tracer
from .allowed_values import AllowedStringsValidator
from .base import ValidationResult
from .date_range import DateRangeValidator

logger = logging.getLogger(__name__)


class RecordValidator:
    """Validate a record instance against its schema.

    The schema is taken from the registry (``@constrained`` or ``Annotated``
    hints) unless one is passed explicitly, which mapping records require.
    The record is only read, never modified, and a configuration error is
    raised rather than reported as a violation.

    Example:
        ```python
        @constrained
        @dataclass
        class Stay:
            arrival: Annotated[datetime, StartDate(1)]
            departure: Annotated[datetime, EndDate(1, minimum_days=1)]

        result = RecordValidator().validate(Stay(arrival=..., departure=...))
        if not result.valid:
            print(result.failed_interval_ids)
        ```
    """

    def __init__(self):
        self._date_ranges = DateRangeValidator()
        self._allowed_strings = AllowedStringsValidator()

    def validate(self, record: Any, schema: Optional[RecordSchema] = None) -> ValidationResult:
        started_at = time.perf_counter()
        if schema is None:
            try:
                schema = get_schema(record)
            except ConfigurationError as exc:
                record_name = type(record).__name__
                logger.error("Validation of %s aborted: %s", record_name, exc)
                record_validation_metrics(record_name, "error", started_at)
                raise

        with get_tracer().start_as_current_span(
            f"fieldrules.validate:{schema.name}",
            attributes={"fieldrules.record": schema.name},
        ) as span:
            try:
                values = schema.read_values(record)
                result = ValidationResult()
                result.merge(
                    self._allowed_strings.validate(
                        schema.allowed_string_markers(), values, record=schema.name
                    )
                )
                result.merge(
                    self._date_ranges.validate(schema.date_markers(), values, record=schema.name)
                )
            except ConfigurationError as exc:
                logger.error("Validation of %s aborted: %s", schema.name, exc)
                record_validation_metrics(schema.name, "error", started_at)
                raise

            span.set_attribute("fieldrules.valid", result.valid)

        record_validation_metrics(schema.name, "valid" if result.valid else "invalid", started_at)
        logger.debug(
            "Validated %s: %s (%d violation(s))",
            schema.name,
            "valid" if result.valid else "invalid",
            len(result.violations),
        )
        return result

    def is_valid(self, record: Any, schema: Optional[RecordSchema] = None) -> bool:
        return self.validate(record, schema).valid


__all__ = ["RecordValidator"]
