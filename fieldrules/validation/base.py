# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Result types shared by every validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional


@dataclass(frozen=True)
class ValidationViolation:
    """A single failed rule.

    ``rule`` names the check that failed (``"minimum_days"``,
    ``"allowed_day_ranges"``, ``"chronology"``, ``"allowed_strings"``).
    Date range violations also carry the ``interval_id`` they belong to.
    """

    field: str
    rule: str
    expected: Any
    actual: Any
    message: str
    interval_id: Optional[int] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Outcome of validating one record: a verdict plus its violations."""

    valid: bool = True
    violations: List[ValidationViolation] = field(default_factory=list)

    def add(self, violation: ValidationViolation) -> None:
        self.valid = False
        self.violations.append(violation)

    def merge(self, other: "ValidationResult") -> None:
        if not other.valid:
            self.valid = False
        self.violations.extend(other.violations)

    @property
    def failed_interval_ids(self) -> FrozenSet[int]:
        """Ids of every date interval that failed its duration policy."""

        return frozenset(
            v.interval_id for v in self.violations if v.interval_id is not None
        )

    @property
    def failed_fields(self) -> FrozenSet[str]:
        return frozenset(v.field for v in self.violations)

    def __bool__(self) -> bool:
        return self.valid


__all__ = ["ValidationResult", "ValidationViolation"]
