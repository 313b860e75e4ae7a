from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, roll_number, name, class_name, course, year_label, branch"


def row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        roll_number=r["roll_number"],
        name=r["name"],
        class_name=r["class_name"],
        course=r.get("course"),
        year=r.get("year_label"),
        branch=r.get("branch"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, class_name: Optional[str] = None) -> Sequence[Student]:
        clauses: list[str] = []
        params: list[object] = []
        if class_name:
            clauses.append("class_name=%s")
            params.append(class_name)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                {where_clause(clauses)}
                ORDER BY class_name ASC, roll_number ASC
                """,
                tuple(params),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE roll_number=%s", (roll_number,))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def create(
        self,
        *,
        roll_number: str,
        name: str,
        class_name: str,
        course: Optional[str],
        year: Optional[str],
        branch: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(roll_number, name, class_name, course, year_label, branch)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (roll_number, name, class_name, course, year, branch),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        student_id: int,
        name: str,
        class_name: str,
        course: Optional[str],
        year: Optional[str],
        branch: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, class_name=%s, course=%s, year_label=%s, branch=%s
                WHERE student_id=%s
                """,
                (name, class_name, course, year, branch, int(student_id)),
            )
            cur.execute("SELECT 1 FROM students WHERE student_id=%s", (int(student_id),))
            # rowcount of the UPDATE is 0 when no column changed, so check existence instead.
            return fetchone(cur) is not None

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

    def count(self, *, class_name: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if class_name:
                cur.execute("SELECT COUNT(*) AS n FROM students WHERE class_name=%s", (class_name,))
            else:
                cur.execute("SELECT COUNT(*) AS n FROM students")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
