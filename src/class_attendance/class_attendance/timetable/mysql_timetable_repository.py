from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import normalize_hhmm
from ..core.constants import DEFAULT_PERIOD_COLOR
from ..core.enums import WEEKDAYS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimetablePeriod
from .repository import TimetableRepository

_COLUMNS = "period_id, day_name, period_number, subject, class_name, teacher_id, start_time, end_time, color"
_DAY_ORDER = "FIELD(day_name, " + ", ".join(f"'{d}'" for d in WEEKDAYS) + ")"


def _row_to_period(r: dict) -> TimetablePeriod:
    return TimetablePeriod(
        period_id=int(r["period_id"]),
        day=r["day_name"],
        period_number=int(r["period_number"]),
        subject=r["subject"],
        class_name=r["class_name"],
        teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
        start_time=normalize_hhmm(r["start_time"]),
        end_time=normalize_hhmm(r["end_time"]),
        color=r.get("color") or DEFAULT_PERIOD_COLOR,
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[TimetablePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timetable_periods ORDER BY {_DAY_ORDER}, period_number ASC")
            return [_row_to_period(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: int) -> Sequence[TimetablePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timetable_periods
                WHERE teacher_id=%s
                ORDER BY {_DAY_ORDER}, period_number ASC
                """,
                (int(teacher_id),),
            )
            return [_row_to_period(r) for r in fetchall(cur)]

    def periods_for(self, *, teacher_id: int, day: str) -> Sequence[TimetablePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timetable_periods
                WHERE teacher_id=%s AND day_name=%s
                ORDER BY period_number ASC
                """,
                (int(teacher_id), day),
            )
            return [_row_to_period(r) for r in fetchall(cur)]

    def get_by_id(self, period_id: int) -> Optional[TimetablePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timetable_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def create(
        self,
        *,
        day: str,
        period_number: int,
        subject: str,
        class_name: str,
        teacher_id: Optional[int],
        start_time: str,
        end_time: str,
        color: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_periods(
                    day_name, period_number, subject, class_name, teacher_id, start_time, end_time, color
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (day, int(period_number), subject, class_name, teacher_id, start_time, end_time, color),
            )
            return int(cur.lastrowid)

    def update(self, period: TimetablePeriod) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timetable_periods
                SET day_name=%s, period_number=%s, subject=%s, class_name=%s,
                    teacher_id=%s, start_time=%s, end_time=%s, color=%s
                WHERE period_id=%s
                """,
                (
                    period.day,
                    int(period.period_number),
                    period.subject,
                    period.class_name,
                    period.teacher_id,
                    period.start_time,
                    period.end_time,
                    period.color,
                    int(period.period_id),
                ),
            )
            cur.execute("SELECT 1 FROM timetable_periods WHERE period_id=%s", (int(period.period_id),))
            return fetchone(cur) is not None

    def delete(self, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetable_periods WHERE period_id=%s", (int(period_id),))
            return cur.rowcount > 0
