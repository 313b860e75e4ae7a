from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimetablePeriod


class TimetableRepository(Protocol):
    def list_all(self) -> Sequence[TimetablePeriod]:
        """All periods ordered by weekday, then period number."""

        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[TimetablePeriod]:
        raise NotImplementedError

    def periods_for(self, *, teacher_id: int, day: str) -> Sequence[TimetablePeriod]:
        """Periods a teacher owns on one weekday (used by the marking window check)."""

        raise NotImplementedError

    def get_by_id(self, period_id: int) -> Optional[TimetablePeriod]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, period: TimetablePeriod) -> bool:
        raise NotImplementedError

    def delete(self, period_id: int) -> bool:
        raise NotImplementedError
