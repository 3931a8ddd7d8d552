from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from gradetrack.core.gpa import CourseStat
from gradetrack.core.scale import DEFAULT_SCALE, GradeScale

DEFAULT_CENTER = 50.0
DEFAULT_RADIUS = 40.0
FULL_CIRCLE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class BarEntry:
    label: str
    percentage: float
    letter_grade: str
    color: str
    earned_points: float
    allocated_points: float
    credits: float


@dataclass(frozen=True)
class GradeBucket:
    letter_grade: str
    label: str
    color: str
    count: int


@dataclass(frozen=True)
class ArcGeometry:
    center_x: float
    center_y: float
    radius: float
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    large_arc: bool
    full_circle: bool = False

    def to_svg_path(self) -> str:
        cx, cy, r = self.center_x, self.center_y, self.radius
        if self.full_circle:
            # Full circle: a single arc with equal endpoints renders nothing.
            mid_x = 2 * cx - self.start_x
            mid_y = 2 * cy - self.start_y
            return (
                f"M {self.start_x} {self.start_y} "
                f"A {r} {r} 0 1 1 {mid_x} {mid_y} "
                f"A {r} {r} 0 1 1 {self.end_x} {self.end_y} Z"
            )
        flag = 1 if self.large_arc else 0
        return (
            f"M {cx} {cy} L {self.start_x} {self.start_y} "
            f"A {r} {r} 0 {flag} 1 {self.end_x} {self.end_y} Z"
        )


@dataclass(frozen=True)
class PieSegment:
    letter_grade: str
    label: str
    count: int
    share_percent: float
    start_angle: float
    end_angle: float
    angle: float
    color: str
    arc: ArcGeometry


def build_bar_series(stats: Iterable[CourseStat], scale: GradeScale = DEFAULT_SCALE) -> List[BarEntry]:
    series = []
    for s in stats:
        band = scale.lookup(s.percentage)
        series.append(
            BarEntry(
                label=s.label or s.course_id,
                percentage=s.percentage,
                letter_grade=band.letter,
                color=band.color,
                earned_points=s.earned_points,
                allocated_points=s.allocated_points,
                credits=s.credits,
            )
        )
    return series


def _charted(stats: Iterable[CourseStat]) -> List[CourseStat]:
    return [s for s in stats if s.assignment_count > 0]


def build_grade_distribution(stats: Iterable[CourseStat], scale: GradeScale = DEFAULT_SCALE) -> List[GradeBucket]:
    """Count charted courses per band, in the scale's declaration order.

    Only courses with at least one assignment are charted; a course whose
    assignments are all ungraded still lands in the lowest band.
    """
    counts = {band.letter: 0 for band in scale.bands}
    for s in _charted(stats):
        counts[scale.lookup(s.percentage).letter] += 1
    return [
        GradeBucket(band.letter, scale.band_label(band), band.color, counts[band.letter])
        for band in scale.bands
    ]


def _point_on_circle(angle_deg: float, center: float, radius: float) -> tuple[float, float]:
    rad = math.radians(angle_deg - 90)
    return center + radius * math.cos(rad), center + radius * math.sin(rad)


def build_pie_segments(
    stats: Sequence[CourseStat],
    scale: GradeScale = DEFAULT_SCALE,
    center: float = DEFAULT_CENTER,
    radius: float = DEFAULT_RADIUS,
) -> List[PieSegment]:
    total = len(_charted(stats))
    if total == 0:
        return []

    segments: List[PieSegment] = []
    current = 0.0
    for bucket in build_grade_distribution(stats, scale):
        if bucket.count == 0:
            continue
        angle = (bucket.count / total) * 360
        start, end = current, current + angle
        x1, y1 = _point_on_circle(start, center, radius)
        x2, y2 = _point_on_circle(end, center, radius)
        segments.append(
            PieSegment(
                letter_grade=bucket.letter_grade,
                label=bucket.label,
                count=bucket.count,
                share_percent=(bucket.count / total) * 100,
                start_angle=start,
                end_angle=end,
                angle=angle,
                color=bucket.color,
                arc=ArcGeometry(
                    center, center, radius, x1, y1, x2, y2,
                    large_arc=angle > 180,
                    full_circle=angle >= 360 - FULL_CIRCLE_TOLERANCE,
                ),
            )
        )
        current = end
    return segments
