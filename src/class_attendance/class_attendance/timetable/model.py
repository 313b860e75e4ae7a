from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_PERIOD_COLOR


@dataclass(frozen=True)
class TimetablePeriod:
    """Domain entity: one weekly teaching period.

    start_time / end_time are zero-padded "HH:MM" strings, compared lexically.
    """

    period_id: int
    day: str
    period_number: int
    subject: str
    class_name: str
    teacher_id: Optional[int]
    start_time: str
    end_time: str
    color: str = DEFAULT_PERIOD_COLOR

    def contains(self, clock: str) -> bool:
        return self.start_time <= clock <= self.end_time

    def to_dict(self) -> dict:
        return {
            "id": self.period_id,
            "day": self.day,
            "periodNumber": self.period_number,
            "subject": self.subject,
            "className": self.class_name,
            "teacherId": self.teacher_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "color": self.color,
        }
