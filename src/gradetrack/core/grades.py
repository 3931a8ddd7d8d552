from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from gradetrack.core.models import Assignment


@dataclass(frozen=True)
class CourseTotals:
    earned_points: float = 0.0
    allocated_points: float = 0.0
    percentage: float = 0.0
    assignment_count: int = 0


def calc_course_totals(assignments: Iterable[Assignment]) -> CourseTotals:
    """
    allocated = Σ max_grade over every assignment, graded or not
    earned = Σ grade, ungraded counted as 0
    """
    earned = 0.0
    allocated = 0.0
    count = 0
    for a in assignments:
        count += 1
        allocated += a.max_grade or 0.0
        earned += a.grade or 0.0
    if allocated <= 0:
        return CourseTotals(earned, allocated, 0.0, count)
    return CourseTotals(earned, allocated, (earned / allocated) * 100, count)


def assignment_percentage(assignment: Assignment) -> float | None:
    if assignment.grade is None or not assignment.max_grade or assignment.max_grade <= 0:
        return None
    return (assignment.grade / assignment.max_grade) * 100


def count_completed(assignments: Iterable[Assignment]) -> int:
    return sum(1 for a in assignments if a.completed)
