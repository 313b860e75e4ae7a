from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus, MarkAction
from ..students.model import Student
from .model import AttendanceEntry, AttendanceRecord, StatusTally


class AttendanceRepository(Protocol):
    def upsert(
        self, *, student_id: int, attendance_date: date, status: AttendanceStatus
    ) -> Tuple[AttendanceRecord, MarkAction]:
        """Insert or update the record for (student_id, attendance_date) in one atomic statement."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_range(
        self, *, start: Optional[date] = None, end: Optional[date] = None, class_name: Optional[str] = None
    ) -> Sequence[AttendanceEntry]:
        """Records joined with students, newest date first; bounds are inclusive."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def missing_for_date(self, attendance_date: date, *, class_name: Optional[str] = None) -> Sequence[Student]:
        """Roster minus the students that have a record on attendance_date."""

        raise NotImplementedError

    def tally_by_student(
        self, *, start: Optional[date] = None, end: Optional[date] = None, class_name: Optional[str] = None
    ) -> Dict[int, StatusTally]:
        """Present/absent counts per student id (only students with records)."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def delete_for_date(self, attendance_date: date) -> int:
        raise NotImplementedError
