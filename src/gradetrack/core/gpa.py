from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from gradetrack.core.scale import DEFAULT_SCALE, GradeScale, grade_from_percentage


@dataclass(frozen=True)
class CourseResult:
    course_id: str
    percentage: float
    credits: float
    earned_points: float = 0.0
    allocated_points: float = 0.0
    label: str = ""
    assignment_count: int = 0


@dataclass(frozen=True)
class CourseStat:
    course_id: str
    label: str
    percentage: float
    letter_grade: str
    grade_point: float
    earned_points: float
    allocated_points: float
    credits: float
    counted: bool
    assignment_count: int = 0


@dataclass(frozen=True)
class GPASummary:
    overall_gpa: float = 0.0
    total_credits_counted: float = 0.0
    course_stats: List[CourseStat] = field(default_factory=list)


def counts_toward_gpa(result: CourseResult) -> bool:
    # Courses with nothing earned yet are left out rather than scored as 0.0.
    return result.credits > 0 and result.percentage > 0


def calc_weighted_gpa(results: Iterable[CourseResult], scale: GradeScale = DEFAULT_SCALE) -> GPASummary:
    """
    GPA = Σ(credits * grade_point) / Σ(credits) over counted courses only
    """
    weighted = 0.0
    total_credits = 0.0
    stats: List[CourseStat] = []
    for r in results:
        letter, point = grade_from_percentage(r.percentage, scale)
        counted = counts_toward_gpa(r)
        if counted:
            weighted += point * r.credits
            total_credits += r.credits
        stats.append(
            CourseStat(
                course_id=r.course_id,
                label=r.label,
                percentage=r.percentage,
                letter_grade=letter,
                grade_point=point,
                earned_points=r.earned_points,
                allocated_points=r.allocated_points,
                credits=r.credits,
                counted=counted,
                assignment_count=r.assignment_count,
            )
        )
    if total_credits <= 0:
        return GPASummary(0.0, 0.0, stats)
    return GPASummary(weighted / total_credits, total_credits, stats)
