from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.validators import optional_text
from ..core.constants import DEFAULT_DASHBOARD_STUDENT_LIMIT, DEFAULT_LOW_ATTENDANCE_THRESHOLD
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from ..users.access import AccessPolicy
from ..users.model import CallerIdentity
from .calculator.base import PercentageCalculator
from .calculator.standard_calculator import StandardPercentageCalculator

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Date", "Roll Number", "Name", "Class", "Status"]


@dataclass(frozen=True)
class ReportFilter:
    start: Optional[date] = None
    end: Optional[date] = None
    class_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValidationError("Start date must not be after end date")

    def describe(self) -> str:
        if self.start and self.end:
            period = f"{self.start.isoformat()} to {self.end.isoformat()}"
        elif self.start:
            period = f"from {self.start.isoformat()}"
        elif self.end:
            period = f"until {self.end.isoformat()}"
        else:
            period = "All dates"
        return f"{period} ({self.class_name})" if self.class_name else period


class ReportService:
    """Read-only reporting over attendance and roster."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        policy: AccessPolicy,
        *,
        calculator: Optional[PercentageCalculator] = None,
        low_threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._students = students
        self._policy = policy
        self._calculator = calculator or StandardPercentageCalculator()
        self._low_threshold = int(low_threshold)

    def build_attendance_report(self, flt: Optional[ReportFilter] = None) -> list[dict]:
        flt = flt or ReportFilter()
        class_name = optional_text(flt.class_name)
        tallies = self._attendance.tally_by_student(start=flt.start, end=flt.end, class_name=class_name)

        out: list[dict] = []
        for student in self._students.list_all(class_name=class_name):
            tally = tallies.get(student.student_id)
            if not tally or tally.total == 0:
                continue
            out.append(
                {
                    "student": student.to_dict(),
                    "present": tally.present,
                    "absent": tally.absent,
                    "total": tally.total,
                    "percentage": self._calculator.percentage(tally.present, tally.total),
                }
            )
        return out

    def export_rows(self, flt: Optional[ReportFilter] = None) -> list[dict]:
        flt = flt or ReportFilter()
        entries = self._attendance.list_range(start=flt.start, end=flt.end, class_name=optional_text(flt.class_name))
        return [
            {
                "Date": e.record.attendance_date.isoformat(),
                "Roll Number": e.student.roll_number,
                "Name": e.student.name,
                "Class": e.student.class_name,
                "Status": e.record.status.value,
            }
            for e in entries
        ]

    def low_attendance(self, threshold: Optional[object] = None) -> list[dict]:
        if threshold in (None, ""):
            limit = self._low_threshold
        else:
            try:
                limit = int(threshold)
            except (TypeError, ValueError):
                raise ValidationError("Threshold must be a number")
            if not 0 <= limit <= 100:
                raise ValidationError("Threshold must be between 0 and 100")

        rows = [r for r in self.build_attendance_report() if r["percentage"] < limit]
        rows.sort(key=lambda r: (r["percentage"], r["student"]["rollNumber"]))
        logger.info("Low attendance report: %d students below %d%%", len(rows), limit)
        return rows

    def dashboard(self, caller: CallerIdentity, today: date) -> dict:
        role = (caller.role or "").lower()
        students = list(self._students.list_all())
        if not self._policy.is_unrestricted(role):
            students = students[:DEFAULT_DASHBOARD_STUDENT_LIMIT]

        data: dict = {
            "user": {"id": caller.user_id, "name": caller.name, "role": caller.role},
            "students": [s.to_dict() for s in students],
        }

        if role in self._policy.stats_viewers:
            # todayAttendance counts marked students (either status); the rate is coverage of the roster.
            marked = len(self._attendance.list_range(start=today, end=today))
            total_students = self._students.count()
            data["stats"] = {
                "totalStudents": total_students,
                "todayAttendance": marked,
                "attendanceRate": self._calculator.percentage(marked, total_students),
            }
        return data
