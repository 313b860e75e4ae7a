from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_iso_date, parse_optional_date
from ..common.validators import optional_text, require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..reports.calculator.base import PercentageCalculator
from ..reports.calculator.standard_calculator import StandardPercentageCalculator
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.access import AccessPolicy
from ..users.model import CallerIdentity
from .factory import MarkingStrategyFactory
from .model import (
    AttendanceEntry,
    BatchResult,
    ItemOutcome,
    MarkFailed,
    MarkResult,
    MarkSucceeded,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

DateInput = Union[date, str, None]


def parse_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    if value is None or value == "":
        raise ValidationError("Status is required")
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status must be 'Present' or 'Absent'")


def parse_student_id(value: Any) -> int:
    if value is None or value == "":
        raise ValidationError("Student ID is required")
    return require_positive_int(value, "Student ID")


class AttendanceService:
    """Attendance ledger: single and bulk marking, reads and statistics."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        policy: AccessPolicy,
        *,
        strategy_factory: MarkingStrategyFactory,
        bulk_window_check: bool = False,
        calculator: Optional[PercentageCalculator] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._policy = policy
        self._factory = strategy_factory
        self._bulk_window_check = bool(bulk_window_check)
        self._calculator = calculator or StandardPercentageCalculator()

    @staticmethod
    def _resolve_date(value: DateInput, now: datetime) -> date:
        if isinstance(value, date):
            return value
        if value is None or not str(value).strip():
            return now.date()
        return parse_iso_date(value)

    @staticmethod
    def _optional_date(value: DateInput) -> Optional[date]:
        if isinstance(value, date):
            return value
        return parse_optional_date(value)

    def _require_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    # ---- marking ----

    def mark_attendance(
        self,
        caller: CallerIdentity,
        student_id: Any,
        status: Any,
        attendance_date: DateInput = None,
        *,
        now: Optional[datetime] = None,
    ) -> MarkResult:
        now = now or now_local()

        status = parse_status(status)
        student_id = parse_student_id(student_id)
        day = self._resolve_date(attendance_date, now)
        self._require_student(student_id)

        self._factory.for_caller(caller).authorize(caller=caller, attendance_date=day, now=now)

        record, action = self._attendance.upsert(student_id=student_id, attendance_date=day, status=status)
        logger.info("Attendance %s for student %s on %s: %s", action.value, student_id, day, status.value)
        return MarkResult(record=record, action=action)

    def _mark_item(self, item: Any, day: date) -> ItemOutcome:
        raw_id = item.get("studentId") if isinstance(item, dict) else None
        try:
            if not isinstance(item, dict):
                raise ValidationError("Each entry must be an object with studentId and status")
            student_id = parse_student_id(raw_id)
            status = parse_status(item.get("status"))
            self._require_student(student_id)
            _, action = self._attendance.upsert(student_id=student_id, attendance_date=day, status=status)
        except DomainError as e:
            logger.warning("Bulk mark failed for student %r on %s: %s", raw_id, day, e)
            return MarkFailed(student_id=raw_id, error=str(e))
        return MarkSucceeded(student_id=student_id, action=action, status=status)

    def mark_bulk(
        self,
        caller: CallerIdentity,
        items: Any,
        attendance_date: DateInput = None,
        *,
        now: Optional[datetime] = None,
    ) -> BatchResult:
        """Mark a whole class for one day.

        Each item is its own unit of work: a bad or failing item is reported
        in `failed` and the rest of the batch still runs.
        """

        if not isinstance(items, list) or not items:
            raise ValidationError("Students array is required")

        now = now or now_local()
        day = self._resolve_date(attendance_date, now)

        # Role groups always apply; the period window only when BULK_WINDOW_CHECK is on.
        if self._bulk_window_check or not self._policy.is_window_restricted(caller.role):
            self._factory.for_caller(caller).authorize(caller=caller, attendance_date=day, now=now)

        result = BatchResult()
        for item in items:
            result.add(self._mark_item(item, day))

        logger.info(
            "Bulk attendance for %s by user %s: %d succeeded, %d failed",
            day,
            caller.user_id,
            len(result.succeeded),
            len(result.failed),
        )
        return result

    # ---- queries ----

    def records_for_date(self, attendance_date: DateInput, *, class_name: Optional[str] = None) -> list[AttendanceEntry]:
        day = self._resolve_date(attendance_date, now_local())
        return list(self._attendance.list_range(start=day, end=day, class_name=optional_text(class_name)))

    def today(self, *, class_name: Optional[str] = None, now: Optional[datetime] = None) -> list[AttendanceEntry]:
        return self.records_for_date((now or now_local()).date(), class_name=class_name)

    def records_in_range(
        self, start: DateInput, end: DateInput, *, class_name: Optional[str] = None
    ) -> list[AttendanceEntry]:
        if not start or not end:
            raise ValidationError("Start and end dates are required")
        start_day = self._resolve_date(start, now_local())
        end_day = self._resolve_date(end, now_local())
        if start_day > end_day:
            raise ValidationError("Start date must not be after end date")
        return list(self._attendance.list_range(start=start_day, end=end_day, class_name=optional_text(class_name)))

    def summarize(self, present: int, absent: int) -> dict:
        total = present + absent
        return {
            "present": present,
            "absent": absent,
            "total": total,
            "percentage": self._calculator.percentage(present, total),
        }

    def student_history(self, student_id: Any) -> dict:
        student = self._require_student(parse_student_id(student_id))
        records = list(self._attendance.list_for_student(student.student_id))
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        return {
            "student": student.to_dict(),
            "records": [r.to_dict() for r in records],
            "summary": self.summarize(present, len(records) - present),
        }

    def missing_for_date(self, attendance_date: DateInput, *, class_name: Optional[str] = None) -> list[Student]:
        day = self._resolve_date(attendance_date, now_local())
        return list(self._attendance.missing_for_date(day, class_name=optional_text(class_name)))

    def stats_overview(self, attendance_date: DateInput = None, *, now: Optional[datetime] = None) -> dict:
        day = self._resolve_date(attendance_date, now or now_local())
        entries = self._attendance.list_range(start=day, end=day)
        present = sum(1 for e in entries if e.record.status == AttendanceStatus.PRESENT)
        marked = len(entries)
        total_students = self._students.count()
        return {
            "date": day.isoformat(),
            "totalStudents": total_students,
            "marked": marked,
            "present": present,
            "absent": marked - present,
            "unmarked": max(total_students - marked, 0),
            "percentage": self._calculator.percentage(present, marked),
        }

    def stats_by_class(self, start: DateInput = None, end: DateInput = None) -> list[dict]:
        start_day = self._optional_date(start)
        end_day = self._optional_date(end)
        if start_day and end_day and start_day > end_day:
            raise ValidationError("Start date must not be after end date")

        roster: dict[str, int] = defaultdict(int)
        class_of: dict[int, str] = {}
        for s in self._students.list_all():
            roster[s.class_name] += 1
            class_of[s.student_id] = s.class_name

        present: dict[str, int] = defaultdict(int)
        absent: dict[str, int] = defaultdict(int)
        for student_id, tally in self._attendance.tally_by_student(start=start_day, end=end_day).items():
            class_name = class_of.get(student_id)
            if class_name is None:
                continue
            present[class_name] += tally.present
            absent[class_name] += tally.absent

        out = []
        for class_name in sorted(roster):
            row = self.summarize(present[class_name], absent[class_name])
            out.append({"className": class_name, "totalStudents": roster[class_name], **row})
        return out

    # ---- corrections ----

    def delete_record(self, caller: CallerIdentity, attendance_id: int) -> None:
        self._policy.require(caller, self._policy.unrestricted_markers, "You are not allowed to delete attendance")
        if not self._attendance.delete_by_id(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted by user %s", attendance_id, caller.user_id)

    def delete_for_date(self, caller: CallerIdentity, attendance_date: DateInput) -> int:
        self._policy.require(caller, self._policy.unrestricted_markers, "You are not allowed to delete attendance")
        day = self._resolve_date(attendance_date, now_local())
        deleted = self._attendance.delete_for_date(day)
        logger.info("%d attendance records for %s deleted by user %s", deleted, day, caller.user_id)
        return deleted


def entries_to_dicts(entries: Sequence[AttendanceEntry]) -> list[dict]:
    return [e.to_dict() for e in entries]
