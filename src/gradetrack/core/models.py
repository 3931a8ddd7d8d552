from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Course(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    id: str
    name: str = ""
    code: Optional[str] = None
    credits: float = 0
    owner_id: Optional[str] = None

    @field_validator("credits", mode="before")
    @classmethod
    def _missing_credits(cls, value):
        return 0 if value is None else value

    @property
    def display_name(self) -> str:
        return self.name or self.code or f"Course {self.id[:4]}"


class Assignment(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    id: str
    course_id: Optional[str] = None
    name: str = ""
    max_grade: float = 0
    grade: Optional[float] = None
    completed: bool = False
    due_date: Optional[date] = None

    @field_validator("max_grade", mode="before")
    @classmethod
    def _missing_max_grade(cls, value):
        return 0 if value is None else value

    @property
    def is_graded(self) -> bool:
        return self.grade is not None
