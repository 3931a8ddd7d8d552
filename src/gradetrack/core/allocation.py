from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from gradetrack.core.grades import CourseTotals

ALLOCATION_CAP = 100.0


class RejectReason(str, Enum):
    ALLOCATION_EXCEEDED = "allocation_exceeded"
    INVALID_MAX_GRADE = "invalid_max_grade"
    NEGATIVE_GRADE = "negative_grade"
    EXCEEDS_MAX_GRADE = "exceeds_max_grade"
    NOT_A_NUMBER = "not_a_number"


@dataclass(frozen=True)
class Accept:
    value: Optional[float] = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Reject:
    reason: RejectReason
    message: str
    remaining_headroom: Optional[float] = None
    bound: Optional[float] = None

    @property
    def accepted(self) -> bool:
        return False


Verdict = Union[Accept, Reject]


def remaining_allocation(totals: CourseTotals) -> float:
    return max(0.0, ALLOCATION_CAP - totals.allocated_points)


def is_fully_allocated(totals: CourseTotals) -> bool:
    return totals.allocated_points >= ALLOCATION_CAP


def check_allocation(totals: CourseTotals, max_grade: float) -> Verdict:
    """Accept a new assignment only if the course stays within the point cap."""
    remaining = remaining_allocation(totals)
    if max_grade is None or math.isnan(max_grade) or max_grade <= 0:
        return Reject(
            RejectReason.INVALID_MAX_GRADE,
            "Max score must be greater than 0",
            remaining_headroom=remaining,
        )
    if totals.allocated_points + max_grade > ALLOCATION_CAP:
        return Reject(
            RejectReason.ALLOCATION_EXCEEDED,
            f"Only {remaining:g} of {ALLOCATION_CAP:g} points remain unallocated",
            remaining_headroom=remaining,
        )
    return Accept(max_grade)


def _parse_grade(raw_value: Union[str, float, int, None]) -> Optional[float]:
    if isinstance(raw_value, str):
        raw_value = raw_value.strip()
        if not raw_value:
            return None
    return float(raw_value)


def check_grade_entry(max_grade: float, raw_value: Union[str, float, int, None]) -> Verdict:
    """Validate a grade typed in by the user.

    An empty value clears the grade and is always accepted.
    """
    if raw_value is None:
        return Accept(None)
    if isinstance(raw_value, bool):
        return Reject(RejectReason.NOT_A_NUMBER, f"Score must be a number, got {raw_value!r}")
    try:
        grade = _parse_grade(raw_value)
    except (TypeError, ValueError):
        return Reject(RejectReason.NOT_A_NUMBER, f"Score must be a number, got {raw_value!r}")
    if grade is None:
        return Accept(None)
    if math.isnan(grade):
        return Reject(RejectReason.NOT_A_NUMBER, f"Score must be a number, got {raw_value!r}")
    if grade < 0:
        return Reject(RejectReason.NEGATIVE_GRADE, "Score cannot be negative", bound=0.0)
    if grade > max_grade:
        return Reject(
            RejectReason.EXCEEDS_MAX_GRADE,
            f"Score cannot exceed {max_grade:g} points",
            bound=max_grade,
        )
    return Accept(grade)
