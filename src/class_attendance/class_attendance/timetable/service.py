from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import hhmm, normalize_hhmm, weekday_name
from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_PERIOD_COLOR
from ..core.enums import WEEKDAYS
from ..core.exceptions import NotFoundError, ValidationError
from ..users.access import AccessPolicy
from ..users.model import CallerIdentity
from .model import TimetablePeriod
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


def _normalize_day(value: Optional[str]) -> str:
    day = require_non_empty(value, "Day").capitalize()
    if day not in WEEKDAYS:
        raise ValidationError(f"Invalid day {value!r}. Must be one of: {', '.join(WEEKDAYS)}")
    return day


def _check_times(start_time: Any, end_time: Any) -> tuple[str, str]:
    start = normalize_hhmm(start_time)
    end = normalize_hhmm(end_time)
    if start > end:
        raise ValidationError("Start time must not be after end time")
    return start, end


class TimetableService:
    """Use case: weekly timetable (who teaches which class when)."""

    def __init__(self, periods: TimetableRepository, policy: AccessPolicy):
        self._periods = periods
        self._policy = policy

    def _require_manager(self, caller: CallerIdentity) -> None:
        self._policy.require(caller, self._policy.timetable_managers, "You are not allowed to manage the timetable")

    def list_all(self) -> list[TimetablePeriod]:
        return list(self._periods.list_all())

    def my_schedule(self, teacher_id: int) -> list[TimetablePeriod]:
        return list(self._periods.list_for_teacher(int(teacher_id)))

    def current_period(self, teacher_id: int, now: datetime) -> Optional[TimetablePeriod]:
        clock = hhmm(now)
        for period in self._periods.periods_for(teacher_id=int(teacher_id), day=weekday_name(now.date())):
            if period.contains(clock):
                return period
        return None

    def create_period(
        self,
        caller: CallerIdentity,
        *,
        day: str,
        period_number: Any,
        subject: str,
        class_name: str,
        teacher_id: Any = None,
        start_time: Any,
        end_time: Any,
        color: Optional[str] = None,
    ) -> TimetablePeriod:
        self._require_manager(caller)

        day = _normalize_day(day)
        number = require_positive_int(period_number, "Period number")
        subject = require_non_empty(subject, "Subject")
        class_name = require_non_empty(class_name, "Class")
        teacher = require_positive_int(teacher_id, "Teacher") if teacher_id not in (None, "") else None
        start, end = _check_times(start_time, end_time)
        color = optional_text(color) or DEFAULT_PERIOD_COLOR

        period_id = self._periods.create(
            day=day,
            period_number=number,
            subject=subject,
            class_name=class_name,
            teacher_id=teacher,
            start_time=start,
            end_time=end,
            color=color,
        )
        logger.info("Timetable period %s added: %s P%s %s-%s", period_id, day, number, start, end)
        return TimetablePeriod(
            period_id=period_id,
            day=day,
            period_number=number,
            subject=subject,
            class_name=class_name,
            teacher_id=teacher,
            start_time=start,
            end_time=end,
            color=color,
        )

    def update_period(self, caller: CallerIdentity, period_id: int, **changes: Any) -> TimetablePeriod:
        """Partial update; keys left out (or None) keep their stored value."""

        self._require_manager(caller)
        current = self._periods.get_by_id(int(period_id))
        if not current:
            raise NotFoundError("Timetable period not found")

        def pick(key: str, old: Any) -> Any:
            value = changes.get(key)
            return old if value is None or value == "" else value

        start, end = _check_times(pick("start_time", current.start_time), pick("end_time", current.end_time))
        # teacher_id may be cleared: an explicit None or "" unassigns the period
        teacher = changes["teacher_id"] if "teacher_id" in changes else current.teacher_id
        if teacher == "":
            teacher = None
        updated = TimetablePeriod(
            period_id=current.period_id,
            day=_normalize_day(pick("day", current.day)),
            period_number=require_positive_int(pick("period_number", current.period_number), "Period number"),
            subject=require_non_empty(pick("subject", current.subject), "Subject"),
            class_name=require_non_empty(pick("class_name", current.class_name), "Class"),
            teacher_id=require_positive_int(teacher, "Teacher") if teacher is not None else None,
            start_time=start,
            end_time=end,
            color=optional_text(pick("color", current.color)) or DEFAULT_PERIOD_COLOR,
        )
        if not self._periods.update(updated):
            raise NotFoundError("Timetable period not found")
        return updated

    def delete_period(self, caller: CallerIdentity, period_id: int) -> None:
        self._require_manager(caller)
        if not self._periods.delete(int(period_id)):
            raise NotFoundError("Timetable period not found")
        logger.info("Timetable period %s deleted", period_id)
