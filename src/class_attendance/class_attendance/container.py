from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.factory import MarkingStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD, DEFAULT_REPORT_TITLE, DEFAULT_TOKEN_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableService
from .users.access import AccessPolicy
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    students_repo: StudentRepository
    timetable_repo: TimetableRepository
    attendance_repo: AttendanceRepository

    policy: AccessPolicy
    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    timetable_service: TimetableService
    attendance_service: AttendanceService
    report_service: ReportService

    report_title: str = DEFAULT_REPORT_TITLE


def assemble(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    timetable_repo: TimetableRepository,
    attendance_repo: AttendanceRepository,
    settings: Any,
) -> Container:
    """Wire services on top of the given repositories.

    Shared by the MySQL wiring below and by tests that pass in-memory repositories.
    """

    policy = AccessPolicy.from_settings(settings)
    token_service = TokenService(
        str(getattr(settings, "JWT_SECRET", None) or getattr(settings, "SECRET_KEY")),
        expiry_hours=int(getattr(settings, "JWT_EXPIRY_HOURS", DEFAULT_TOKEN_HOURS)),
    )
    strategy_factory = MarkingStrategyFactory(
        policy=policy,
        timetable=timetable_repo,
        reference_day=str(getattr(settings, "WINDOW_REFERENCE_DAY", "now")),
    )

    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        policy=policy,
        token_service=token_service,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, policy),
        student_service=StudentService(students_repo, policy),
        timetable_service=TimetableService(timetable_repo, policy),
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            policy,
            strategy_factory=strategy_factory,
            bulk_window_check=bool(getattr(settings, "BULK_WINDOW_CHECK", False)),
        ),
        report_service=ReportService(
            attendance_repo,
            students_repo,
            policy,
            low_threshold=int(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", DEFAULT_LOW_ATTENDANCE_THRESHOLD)),
        ),
        report_title=str(getattr(settings, "REPORT_TITLE", DEFAULT_REPORT_TITLE)),
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings=settings,
    )
