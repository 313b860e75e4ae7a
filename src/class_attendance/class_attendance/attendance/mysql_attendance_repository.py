from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence, Tuple

from ..core.enums import AttendanceStatus, MarkAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from ..students.model import Student
from ..students.mysql_student_repository import row_to_student
from .model import AttendanceEntry, AttendanceRecord, StatusTally
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, attendance_date, status"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
    )


def _range_filters(
    *, start: Optional[date], end: Optional[date], class_name: Optional[str]
) -> Tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if start is not None:
        clauses.append("a.attendance_date >= %s")
        params.append(start)
    if end is not None:
        clauses.append("a.attendance_date <= %s")
        params.append(end)
    if class_name:
        clauses.append("s.class_name = %s")
        params.append(class_name)
    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self, *, student_id: int, attendance_date: date, status: AttendanceStatus
    ) -> Tuple[AttendanceRecord, MarkAction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, attendance_date, status)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status)
                """,
                (int(student_id), attendance_date, status.value),
            )
            # MySQL reports 1 for an insert, 2 for a changed row and 0 for an unchanged one.
            # Holds only with CLIENT_FOUND_ROWS off, see DatabaseConnection.connect.
            action = MarkAction.CREATED if cur.rowcount == 1 else MarkAction.UPDATED

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND attendance_date=%s",
                (int(student_id), attendance_date),
            )
            return _row_to_record(fetchone(cur)), action

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND attendance_date=%s",
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_range(
        self, *, start: Optional[date] = None, end: Optional[date] = None, class_name: Optional[str] = None
    ) -> Sequence[AttendanceEntry]:
        clauses, params = _range_filters(start=start, end=end, class_name=class_name)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.student_id, a.attendance_date, a.status,
                    s.roll_number, s.name, s.class_name, s.course, s.year_label, s.branch
                FROM attendance_records a
                JOIN students s ON s.student_id = a.student_id
                {where_clause(clauses)}
                ORDER BY a.attendance_date DESC, s.class_name ASC, s.roll_number ASC
                """,
                tuple(params),
            )
            return [AttendanceEntry(record=_row_to_record(r), student=row_to_student(r)) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s
                ORDER BY attendance_date DESC
                """,
                (int(student_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def missing_for_date(self, attendance_date: date, *, class_name: Optional[str] = None) -> Sequence[Student]:
        clauses = ["a.attendance_id IS NULL"]
        params: list[object] = [attendance_date]
        if class_name:
            clauses.append("s.class_name = %s")
            params.append(class_name)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.student_id, s.roll_number, s.name, s.class_name, s.course, s.year_label, s.branch
                FROM students s
                LEFT JOIN attendance_records a
                    ON a.student_id = s.student_id AND a.attendance_date = %s
                {where_clause(clauses)}
                ORDER BY s.class_name ASC, s.roll_number ASC
                """,
                tuple(params),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def tally_by_student(
        self, *, start: Optional[date] = None, end: Optional[date] = None, class_name: Optional[str] = None
    ) -> Dict[int, StatusTally]:
        clauses, params = _range_filters(start=start, end=end, class_name=class_name)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.student_id,
                    SUM(CASE WHEN a.status='Present' THEN 1 ELSE 0 END) AS present,
                    SUM(CASE WHEN a.status='Absent' THEN 1 ELSE 0 END) AS absent
                FROM attendance_records a
                JOIN students s ON s.student_id = a.student_id
                {where_clause(clauses)}
                GROUP BY a.student_id
                """,
                tuple(params),
            )
            return {
                int(r["student_id"]): StatusTally(present=int(r["present"] or 0), absent=int(r["absent"] or 0))
                for r in fetchall(cur)
            }

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def delete_for_date(self, attendance_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_date=%s", (attendance_date,))
            return int(cur.rowcount)
