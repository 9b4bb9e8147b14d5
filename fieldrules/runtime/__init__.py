# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Runtime helpers around the process-wide record validator."""

from .record_validation import (
    ensure_valid,
    format_validation_reason,
    get_record_validator,
    is_valid,
)

__all__ = [
    "ensure_valid",
    "format_validation_reason",
    "get_record_validator",
    "is_valid",
]
