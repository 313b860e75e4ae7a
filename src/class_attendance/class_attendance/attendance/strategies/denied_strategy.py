from __future__ import annotations

from datetime import date, datetime

from ...core.exceptions import AuthorizationError
from ...users.model import CallerIdentity
from .base import MarkingStrategy


class DeniedStrategy(MarkingStrategy):
    """Roles outside both marking groups."""

    def authorize(self, *, caller: CallerIdentity, attendance_date: date, now: datetime) -> None:
        raise AuthorizationError("Unauthorized")
