from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Union

from pydantic import ValidationError

from gradetrack.config.logging_utils import create_logger
from gradetrack.config.settings import settings
from gradetrack.core.allocation import (
    Verdict,
    check_allocation,
    check_grade_entry,
    is_fully_allocated,
    remaining_allocation,
)
from gradetrack.core.charts import (
    DEFAULT_CENTER,
    DEFAULT_RADIUS,
    BarEntry,
    PieSegment,
    build_bar_series,
    build_pie_segments,
)
from gradetrack.core.gpa import CourseResult, CourseStat, calc_weighted_gpa
from gradetrack.core.grades import CourseTotals, assignment_percentage, calc_course_totals, count_completed
from gradetrack.core.models import Assignment, Course
from gradetrack.core.scale import DEFAULT_SCALE, GradeScale, get_scale

Record = Union[Mapping[str, Any], Course, Assignment]

logger = create_logger("dashboard_service")


class DashboardServiceError(Exception):
    pass


class RecordStore(Protocol):
    def list_courses(self, owner_id: str) -> Iterable[Record]: ...

    def list_assignments(self, course_id: str) -> Iterable[Record]: ...


@dataclass(frozen=True)
class RecomputeRequest:
    owner_id: str
    revision: int = 0

    def next(self) -> "RecomputeRequest":
        return replace(self, revision=self.revision + 1)


@dataclass(frozen=True)
class DashboardSnapshot:
    owner_id: str
    revision: int
    scale_name: str
    overall_gpa: float = 0.0
    total_credits_counted: float = 0.0
    course_count: int = 0
    course_stats: List[CourseStat] = field(default_factory=list)
    bar_series: List[BarEntry] = field(default_factory=list)
    pie_segments: List[PieSegment] = field(default_factory=list)
    computed_at: Optional[datetime] = None

    def is_stale(self, latest: RecomputeRequest) -> bool:
        return latest.owner_id != self.owner_id or latest.revision > self.revision


@dataclass(frozen=True)
class CourseSummary:
    course_id: str
    totals: CourseTotals
    remaining_allocation: float
    fully_allocated: bool
    assignment_count: int
    completed_count: int
    assignment_percentages: Dict[str, Optional[float]]


class DashboardService:
    def __init__(
        self,
        store: RecordStore,
        scale: GradeScale = DEFAULT_SCALE,
        chart_center: float = DEFAULT_CENTER,
        chart_radius: float = DEFAULT_RADIUS,
    ) -> None:
        self.store = store
        self.scale = scale
        self.chart_center = chart_center
        self.chart_radius = chart_radius

    @classmethod
    def from_settings(cls, store: RecordStore) -> "DashboardService":
        return cls(
            store,
            scale=get_scale(settings.grade_scale),
            chart_center=settings.chart_center,
            chart_radius=settings.chart_radius,
        )

    def _courses(self, owner_id: str) -> List[Course]:
        try:
            rows = list(self.store.list_courses(owner_id))
            return [Course.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise DashboardServiceError(f"Malformed course record for owner {owner_id}: {exc}") from exc
        except Exception as exc:
            logger.error("Failed to list courses", owner_id=owner_id, error=str(exc))
            raise DashboardServiceError(f"Could not load courses for owner {owner_id}") from exc

    def _assignments(self, course_id: str) -> List[Assignment]:
        try:
            rows = list(self.store.list_assignments(course_id))
            return [Assignment.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise DashboardServiceError(f"Malformed assignment record for course {course_id}: {exc}") from exc
        except Exception as exc:
            logger.error("Failed to list assignments", course_id=course_id, error=str(exc))
            raise DashboardServiceError(f"Could not load assignments for course {course_id}") from exc

    def recompute(self, request: RecomputeRequest) -> DashboardSnapshot:
        """Rebuild every dashboard figure from the store's confirmed records."""
        logger.debug("Recomputing dashboard", owner_id=request.owner_id, revision=request.revision)
        courses = self._courses(request.owner_id)

        results = []
        for course in courses:
            totals = calc_course_totals(self._assignments(course.id))
            results.append(
                CourseResult(
                    course_id=course.id,
                    percentage=totals.percentage,
                    credits=course.credits,
                    earned_points=totals.earned_points,
                    allocated_points=totals.allocated_points,
                    label=course.display_name,
                    assignment_count=totals.assignment_count,
                )
            )

        summary = calc_weighted_gpa(results, self.scale)
        snapshot = DashboardSnapshot(
            owner_id=request.owner_id,
            revision=request.revision,
            scale_name=self.scale.name,
            overall_gpa=summary.overall_gpa,
            total_credits_counted=summary.total_credits_counted,
            course_count=len(courses),
            course_stats=summary.course_stats,
            bar_series=build_bar_series(summary.course_stats, self.scale),
            pie_segments=build_pie_segments(
                summary.course_stats, self.scale, self.chart_center, self.chart_radius
            ),
            computed_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Dashboard recomputed",
            owner_id=request.owner_id,
            revision=request.revision,
            courses=snapshot.course_count,
            overall_gpa=round(snapshot.overall_gpa, 2),
        )
        return snapshot

    def course_summary(self, course_id: str) -> CourseSummary:
        assignments = self._assignments(course_id)
        totals = calc_course_totals(assignments)
        return CourseSummary(
            course_id=course_id,
            totals=totals,
            remaining_allocation=remaining_allocation(totals),
            fully_allocated=is_fully_allocated(totals),
            assignment_count=len(assignments),
            completed_count=count_completed(assignments),
            assignment_percentages={a.id: assignment_percentage(a) for a in assignments},
        )

    def propose_assignment(self, course_id: str, max_grade: float) -> Verdict:
        totals = calc_course_totals(self._assignments(course_id))
        verdict = check_allocation(totals, max_grade)
        if not verdict.accepted:
            logger.info(
                "Assignment rejected",
                course_id=course_id,
                max_grade=max_grade,
                reason=verdict.reason.value,
                remaining=verdict.remaining_headroom,
            )
        return verdict

    def propose_grade_entry(self, assignment_id: str, max_grade: float, raw_value: Any) -> Verdict:
        verdict = check_grade_entry(max_grade, raw_value)
        if not verdict.accepted:
            logger.info(
                "Grade entry rejected",
                assignment_id=assignment_id,
                reason=verdict.reason.value,
                bound=verdict.bound,
            )
        return verdict
