# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for fieldrules."""

from __future__ import annotations

import time

from .runtime import meter

validation_total = meter.create_counter(
    name="fieldrules.validation.total",
    description="Counts record validations, partitioned by record type and outcome.",
    unit="1",
)

interval_violation_total = meter.create_counter(
    name="fieldrules.interval.violation.total",
    description="Counts date intervals that failed their duration policy, by failed rule.",
    unit="1",
)

config_error_total = meter.create_counter(
    name="fieldrules.config_error.total",
    description="Counts validations aborted by a configuration error.",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="fieldrules.validation.latency.ms",
    description="Time taken to validate a single record.",
    unit="ms",
)


def record_validation_metrics(record: str, outcome: str, started_at: float) -> None:
    """Record latency and outcome of one record validation.

    Args:
        record: Record type name.
        outcome: ``"valid"``, ``"invalid"`` or ``"error"``.
        started_at: Timestamp from ``time.perf_counter()`` when validation started.
    """
    duration_ms = (time.perf_counter() - started_at) * 1000.0
    attributes = {"record": record, "outcome": outcome}
    validation_latency_ms.record(duration_ms, attributes)
    validation_total.add(1, attributes)
    if outcome == "error":
        config_error_total.add(1, {"record": record})


__all__ = [
    "validation_total",
    "interval_violation_total",
    "config_error_total",
    "validation_latency_ms",
    "record_validation_metrics",
]
