from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a roster entry.

    roll_number is the business key: unique and never changed once created.
    """

    student_id: int
    roll_number: str
    name: str
    class_name: str
    course: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "rollNumber": self.roll_number,
            "name": self.name,
            "class": self.class_name,
            "course": self.course,
            "year": self.year,
            "branch": self.branch,
        }
