# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Telemetry instruments (OpenTelemetry metrics and tracing)."""

from .metrics import (
    config_error_total,
    interval_violation_total,
    record_validation_metrics,
    validation_latency_ms,
    validation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "config_error_total",
    "get_tracer",
    "interval_violation_total",
    "meter",
    "record_validation_metrics",
    "validation_latency_ms",
    "validation_total",
]
