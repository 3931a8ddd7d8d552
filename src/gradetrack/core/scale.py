from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

GREEN = "#22c55e"
BLUE = "#3b82f6"
YELLOW = "#eab308"
ORANGE = "#f97316"
RED = "#ef4444"


@dataclass(frozen=True)
class GradeBand:
    min_percentage: float
    letter: str
    grade_point: float
    color: str


@dataclass(frozen=True)
class GradeScale:
    """Percentage thresholds mapped to letter grades and grade points.

    Bands are ordered from the highest threshold down. The last band must start
    at 0 so every percentage resolves to some band.
    """

    name: str
    bands: Tuple[GradeBand, ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ValueError(f"Grade scale {self.name!r} has no bands")
        floors = [band.min_percentage for band in self.bands]
        if any(high <= low for high, low in zip(floors, floors[1:])):
            raise ValueError(f"Grade scale {self.name!r} thresholds must be strictly descending")
        if floors[-1] != 0:
            raise ValueError(f"Grade scale {self.name!r} must end with a band starting at 0")

    def lookup(self, percentage: float) -> GradeBand:
        if not math.isnan(percentage):
            for band in self.bands:
                if band.min_percentage <= percentage:
                    return band
        return self.bands[-1]

    def band_label(self, band: GradeBand) -> str:
        index = self.bands.index(band)
        if index == 0:
            return f"{band.letter} [{band.min_percentage:g}-100]"
        upper = self.bands[index - 1].min_percentage
        return f"{band.letter} [{band.min_percentage:g}-{upper:g})"


STANDARD_SCALE = GradeScale(
    name="standard",
    bands=(
        GradeBand(93, "A", 4.0, GREEN),
        GradeBand(90, "A-", 3.7, GREEN),
        GradeBand(87, "B+", 3.3, BLUE),
        GradeBand(83, "B", 3.0, BLUE),
        GradeBand(80, "B-", 2.7, BLUE),
        GradeBand(77, "C+", 2.3, YELLOW),
        GradeBand(73, "C", 2.0, YELLOW),
        GradeBand(70, "C-", 1.7, YELLOW),
        GradeBand(67, "D+", 1.3, ORANGE),
        GradeBand(63, "D", 1.0, ORANGE),
        GradeBand(60, "D-", 0.7, ORANGE),
        GradeBand(0, "F", 0.0, RED),
    ),
)

LETTER_PLUS_SCALE = GradeScale(
    name="letter_plus",
    bands=(
        GradeBand(90, "A+", 4.0, GREEN),
        GradeBand(85, "A", 4.0, GREEN),
        GradeBand(80, "A-", 3.7, GREEN),
        GradeBand(75, "B+", 3.3, BLUE),
        GradeBand(70, "B", 3.0, BLUE),
        GradeBand(65, "B-", 2.7, BLUE),
        GradeBand(60, "C+", 2.3, YELLOW),
        GradeBand(50, "C", 2.0, ORANGE),
        GradeBand(45, "C-", 1.7, RED),
        GradeBand(40, "D", 1.0, RED),
        GradeBand(0, "F", 0.0, RED),
    ),
)

SCALES: Dict[str, GradeScale] = {
    STANDARD_SCALE.name: STANDARD_SCALE,
    LETTER_PLUS_SCALE.name: LETTER_PLUS_SCALE,
}

DEFAULT_SCALE = STANDARD_SCALE


def get_scale(name: str) -> GradeScale:
    try:
        return SCALES[name.strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown grade scale: {name}. Use one of: {', '.join(SCALES)}") from exc


def grade_from_percentage(percentage: float, scale: GradeScale = DEFAULT_SCALE) -> Tuple[str, float]:
    band = scale.lookup(percentage)
    return band.letter, band.grade_point
