from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime

from ...users.model import CallerIdentity


class MarkingStrategy(ABC):
    """Strategy Pattern: encapsulate whether a caller may mark attendance right now."""

    @abstractmethod
    def authorize(self, *, caller: CallerIdentity, attendance_date: date, now: datetime) -> None:
        """Return normally when allowed; raise AuthorizationError otherwise."""

        raise NotImplementedError
