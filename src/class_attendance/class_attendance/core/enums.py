from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Known role names.

    The caller identity carries its role as a plain string; which names may
    mark attendance, and how, is decided by configuration.
    """

    ADMIN = "admin"
    TEACHER = "teacher"
    ADVISOR = "advisor"
    PRINCIPAL = "principal"
    HOD = "hod"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class MarkAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
