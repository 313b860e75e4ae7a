from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from ..core.enums import AttendanceStatus, MarkAction
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status on one calendar day.

    (student_id, attendance_date) is unique.
    """

    attendance_id: int
    student_id: int
    attendance_date: date
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """A record joined with the student it belongs to (read side)."""

    record: AttendanceRecord
    student: Student

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["student"] = self.student.to_dict()
        return data


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    action: MarkAction


@dataclass(frozen=True)
class MarkSucceeded:
    student_id: int
    action: MarkAction
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {"studentId": self.student_id, "action": self.action.value, "status": self.status.value}


@dataclass(frozen=True)
class MarkFailed:
    # raw value from the request; may be missing or malformed
    student_id: Optional[object]
    error: str

    def to_dict(self) -> dict:
        return {"studentId": self.student_id, "error": self.error}


ItemOutcome = Union[MarkSucceeded, MarkFailed]


@dataclass
class BatchResult:
    succeeded: List[MarkSucceeded] = field(default_factory=list)
    failed: List[MarkFailed] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        if isinstance(outcome, MarkSucceeded):
            self.succeeded.append(outcome)
        else:
            self.failed.append(outcome)

    def to_dict(self) -> dict:
        return {
            "success": len(self.succeeded),
            "failed": len(self.failed),
            "results": [s.to_dict() for s in self.succeeded],
            "errors": [f.to_dict() for f in self.failed],
        }


@dataclass(frozen=True)
class StatusTally:
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent
