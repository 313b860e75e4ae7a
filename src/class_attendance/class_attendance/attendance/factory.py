from __future__ import annotations

from dataclasses import dataclass

from ..timetable.repository import TimetableRepository
from ..users.access import AccessPolicy
from ..users.model import CallerIdentity
from .strategies.base import MarkingStrategy
from .strategies.denied_strategy import DeniedStrategy
from .strategies.unrestricted_strategy import UnrestrictedStrategy
from .strategies.window_strategy import TimetableWindowStrategy

REFERENCE_DAYS = ("now", "date")


@dataclass
class MarkingStrategyFactory:
    """Factory Pattern: choose the marking rule from the caller's role group."""

    policy: AccessPolicy
    timetable: TimetableRepository
    reference_day: str = "now"

    def __post_init__(self) -> None:
        if self.reference_day not in REFERENCE_DAYS:
            raise ValueError(f"reference_day must be one of {REFERENCE_DAYS}, got {self.reference_day!r}")

    def for_caller(self, caller: CallerIdentity) -> MarkingStrategy:
        if self.policy.is_unrestricted(caller.role):
            return UnrestrictedStrategy()
        if self.policy.is_window_restricted(caller.role):
            return TimetableWindowStrategy(self.timetable, reference_day=self.reference_day)
        return DeniedStrategy()
