from __future__ import annotations

from datetime import date, datetime

from ...users.model import CallerIdentity
from .base import MarkingStrategy


class UnrestrictedStrategy(MarkingStrategy):
    """Admin-like roles may mark any day at any time."""

    def authorize(self, *, caller: CallerIdentity, attendance_date: date, now: datetime) -> None:
        return None
