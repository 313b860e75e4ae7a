from __future__ import annotations

from datetime import date, datetime

from ...common.datetime_utils import hhmm, weekday_name
from ...core.exceptions import AuthorizationError
from ...timetable.repository import TimetableRepository
from ...users.model import CallerIdentity
from .base import MarkingStrategy

WINDOW_MESSAGE = "You can only mark attendance during your assigned period"


class TimetableWindowStrategy(MarkingStrategy):
    """Teacher-like roles may mark only while one of their periods is running.

    The clock is always the current wall-clock time. reference_day picks the
    weekday the periods are looked up for: "now" (today's weekday) or "date"
    (the weekday of the day being marked).
    """

    def __init__(self, timetable: TimetableRepository, *, reference_day: str = "now"):
        self._timetable = timetable
        self._reference_day = reference_day

    def authorize(self, *, caller: CallerIdentity, attendance_date: date, now: datetime) -> None:
        day_source = attendance_date if self._reference_day == "date" else now.date()
        clock = hhmm(now)

        periods = self._timetable.periods_for(teacher_id=caller.user_id, day=weekday_name(day_source))
        if not any(p.contains(clock) for p in periods):
            raise AuthorizationError(WINDOW_MESSAGE)
