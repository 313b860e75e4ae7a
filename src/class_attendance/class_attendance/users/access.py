from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import CallerIdentity


def _roles(values: Iterable[str]) -> FrozenSet[str]:
    return frozenset(v.strip().lower() for v in values if v and v.strip())


@dataclass(frozen=True)
class AccessPolicy:
    """Which literal role names belong to which capability group.

    Built from settings; role names outside every group can still log in but
    may only read.
    """

    unrestricted_markers: FrozenSet[str] = field(
        default_factory=lambda: frozenset({Role.ADMIN.value, Role.ADVISOR.value, Role.PRINCIPAL.value, Role.HOD.value})
    )
    window_restricted_markers: FrozenSet[str] = field(default_factory=lambda: frozenset({Role.TEACHER.value}))
    student_managers: FrozenSet[str] = field(
        default_factory=lambda: frozenset({Role.ADMIN.value, Role.ADVISOR.value, Role.PRINCIPAL.value, Role.HOD.value})
    )
    timetable_managers: FrozenSet[str] = field(
        default_factory=lambda: frozenset({Role.ADMIN.value, Role.PRINCIPAL.value, Role.HOD.value})
    )
    admins: FrozenSet[str] = field(default_factory=lambda: frozenset({Role.ADMIN.value}))
    stats_viewers: FrozenSet[str] = field(
        default_factory=lambda: frozenset({Role.ADMIN.value, Role.PRINCIPAL.value, Role.HOD.value})
    )

    @classmethod
    def from_settings(cls, settings) -> "AccessPolicy":
        default = cls()
        return cls(
            unrestricted_markers=_roles(getattr(settings, "UNRESTRICTED_ROLES", default.unrestricted_markers)),
            window_restricted_markers=_roles(
                getattr(settings, "WINDOW_RESTRICTED_ROLES", default.window_restricted_markers)
            ),
            student_managers=_roles(getattr(settings, "STUDENT_MANAGER_ROLES", default.student_managers)),
            timetable_managers=_roles(getattr(settings, "TIMETABLE_MANAGER_ROLES", default.timetable_managers)),
            admins=_roles(getattr(settings, "ADMIN_ROLES", default.admins)),
            stats_viewers=_roles(getattr(settings, "STATS_ROLES", default.stats_viewers)),
        )

    @property
    def known_roles(self) -> FrozenSet[str]:
        return (
            self.unrestricted_markers
            | self.window_restricted_markers
            | self.student_managers
            | self.timetable_managers
            | self.admins
            | self.stats_viewers
        )

    def is_unrestricted(self, role: str) -> bool:
        return (role or "").lower() in self.unrestricted_markers

    def is_window_restricted(self, role: str) -> bool:
        return (role or "").lower() in self.window_restricted_markers

    def is_admin(self, role: str) -> bool:
        return (role or "").lower() in self.admins

    def require(self, caller: CallerIdentity, allowed: FrozenSet[str], message: str = "You do not have permission") -> None:
        if (caller.role or "").lower() not in allowed:
            raise AuthorizationError(message)
