# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Timestamp coercion and elapsed-day arithmetic."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from .exceptions import TimestampError

MILLIS_PER_DAY = 86_400_000
_ONE_MILLISECOND = timedelta(milliseconds=1)


def to_timestamp(value: Any) -> Optional[datetime]:
    """Convert a raw field value to an aware UTC ``datetime``.

    ``None`` stays ``None`` (an unset boundary). Accepted inputs:

    - ``datetime``: naive values are taken to be UTC
    - ``date``: midnight UTC of that day
    - ``int`` / ``float``: milliseconds since the Unix epoch
    - ``str``: ISO 8601, a trailing ``Z`` is accepted

    Raises:
        TimestampError: if the value has any other type or does not parse.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, bool):
        raise TimestampError(value, "booleans are not timestamps")
    elif isinstance(value, (int, float)):
        try:
            return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=value)
        except (OverflowError, ValueError) as exc:
            raise TimestampError(value, str(exc)) from exc
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise TimestampError(value, f"invalid ISO 8601 datetime ({exc})") from exc
    else:
        raise TimestampError(value, f"unsupported type {type(value).__name__}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def elapsed_millis(start: datetime, end: datetime) -> int:
    """Whole milliseconds from *start* to *end*; negative when end precedes start."""

    return (end - start) // _ONE_MILLISECOND


def round_days(millis: int) -> int:
    """Round a non-negative millisecond span to days, ties rounding up.

    Exact integer arithmetic, so 364.5 days is always 365.
    """
    if millis < 0:
        raise ValueError("round_days expects a non-negative span")
    return (millis + MILLIS_PER_DAY // 2) // MILLIS_PER_DAY


__all__ = [
    "MILLIS_PER_DAY",
    "to_timestamp",
    "elapsed_millis",
    "round_days",
]
