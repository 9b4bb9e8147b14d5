# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Shared pytest fixtures for the fieldrules test-suite."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

import pytest

from fieldrules.schema import clear_registry


BOOKING_SCHEMA = """
metadata:
  name: bookings
records:
  Booking:
    description: Hotel booking
    fields:
      check_in:
        start_date: {id: 1}
      check_out:
        end_date: {id: 1, minimum_days: 1}
      status:
        allowed_strings: {values: [open, confirmed, cancelled], null_allowed: false}
  Subscription:
    fields:
      starts_on:
        start_date: {id: 7}
      renews_on:
        end_date: {id: 7, allowed_day_ranges: [30, 365]}
"""


class RecordingInstrument:  # pylint: disable=too-few-public-methods
    """Stand-in for an OpenTelemetry counter/histogram that keeps every call."""

    def __init__(self):
        self.calls: List[Tuple[Any, dict]] = []

    def add(self, amount, attributes=None):
        self.calls.append((amount, dict(attributes or {})))

    def record(self, amount, attributes=None):
        self.calls.append((amount, dict(attributes or {})))


@pytest.fixture(autouse=True)
def _reset_registry():
    """Every test starts with an empty schema registry."""
    clear_registry()
    yield
    clear_registry()


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise; most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture()
def schema_file(tmp_path: Path) -> Path:
    """Write the booking schema to a temporary YAML file."""
    path = tmp_path / "schema.yaml"
    path.write_text(BOOKING_SCHEMA, encoding="utf-8")
    return path


@pytest.fixture()
def recording_instrument():
    return RecordingInstrument
