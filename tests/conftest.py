from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from config import testing as test_settings
from src.class_attendance.class_attendance.attendance.model import AttendanceEntry, AttendanceRecord, StatusTally
from src.class_attendance.class_attendance.container import assemble
from src.class_attendance.class_attendance.core.enums import WEEKDAYS, AttendanceStatus, MarkAction
from src.class_attendance.class_attendance.core.exceptions import StorageError
from src.class_attendance.class_attendance.students.model import Student
from src.class_attendance.class_attendance.timetable.model import TimetablePeriod
from src.class_attendance.class_attendance.users.model import CallerIdentity, User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_staff_id(self, staff_id: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.staff_id == staff_id), None)

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.user_id)

    def create_user(self, *, name, email, password_hash, role, staff_id=None) -> int:
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id, name=name, email=email, password_hash=password_hash, role=role, staff_id=staff_id
        )
        return self._id

    def update_user(self, *, user_id, name, email, role, staff_id, password_hash=None) -> bool:
        current = self.users.get(int(user_id))
        if not current:
            return False
        self.users[current.user_id] = User(
            user_id=current.user_id,
            name=name,
            email=email,
            password_hash=password_hash or current.password_hash,
            role=role,
            staff_id=staff_id,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(int(user_id), None) is not None

    def count_by_role(self):
        out: dict[str, int] = {}
        for u in self.users.values():
            out[u.role] = out.get(u.role, 0) + 1
        return out


class InMemoryStudents:
    def __init__(self):
        self.students: dict[int, Student] = {}
        self._id = 0

    def add(self, roll_number: str, name: str, class_name: str = "CSE-A") -> Student:
        student_id = self.create(
            roll_number=roll_number, name=name, class_name=class_name, course="B.Tech", year="III", branch="CSE"
        )
        return self.students[student_id]

    def list_all(self, *, class_name=None):
        items = [s for s in self.students.values() if not class_name or s.class_name == class_name]
        return sorted(items, key=lambda s: (s.class_name, s.roll_number))

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(int(student_id))

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return next((s for s in self.students.values() if s.roll_number == roll_number), None)

    def create(self, *, roll_number, name, class_name, course, year, branch) -> int:
        self._id += 1
        self.students[self._id] = Student(
            student_id=self._id,
            roll_number=roll_number,
            name=name,
            class_name=class_name,
            course=course,
            year=year,
            branch=branch,
        )
        return self._id

    def update(self, *, student_id, name, class_name, course, year, branch) -> bool:
        current = self.students.get(int(student_id))
        if not current:
            return False
        self.students[current.student_id] = Student(
            student_id=current.student_id,
            roll_number=current.roll_number,
            name=name,
            class_name=class_name,
            course=course,
            year=year,
            branch=branch,
        )
        return True

    def delete(self, student_id: int) -> bool:
        return self.students.pop(int(student_id), None) is not None

    def count(self, *, class_name=None) -> int:
        return len(self.list_all(class_name=class_name))


class InMemoryTimetable:
    def __init__(self):
        self.periods: dict[int, TimetablePeriod] = {}
        self._id = 0

    def add(self, *, teacher_id: int, day: str, start: str, end: str, class_name: str = "CSE-A", number: int = 1):
        period_id = self.create(
            day=day,
            period_number=number,
            subject="Maths",
            class_name=class_name,
            teacher_id=teacher_id,
            start_time=start,
            end_time=end,
            color="white",
        )
        return self.periods[period_id]

    def _ordered(self, items):
        return sorted(items, key=lambda p: (WEEKDAYS.index(p.day), p.period_number))

    def list_all(self):
        return self._ordered(self.periods.values())

    def list_for_teacher(self, teacher_id: int):
        return self._ordered(p for p in self.periods.values() if p.teacher_id == teacher_id)

    def periods_for(self, *, teacher_id: int, day: str):
        return [p for p in self.list_for_teacher(teacher_id) if p.day == day]

    def get_by_id(self, period_id: int):
        return self.periods.get(int(period_id))

    def create(self, *, day, period_number, subject, class_name, teacher_id, start_time, end_time, color) -> int:
        self._id += 1
        self.periods[self._id] = TimetablePeriod(
            period_id=self._id,
            day=day,
            period_number=period_number,
            subject=subject,
            class_name=class_name,
            teacher_id=teacher_id,
            start_time=start_time,
            end_time=end_time,
            color=color,
        )
        return self._id

    def update(self, period: TimetablePeriod) -> bool:
        if period.period_id not in self.periods:
            return False
        self.periods[period.period_id] = period
        return True

    def delete(self, period_id: int) -> bool:
        return self.periods.pop(int(period_id), None) is not None


class InMemoryAttendance:
    """Keyed by (student_id, date) like the UNIQUE key in MySQL."""

    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.records: dict[tuple[int, date], AttendanceRecord] = {}
        self.fail_for: set[int] = set()
        self._id = 0

    def upsert(self, *, student_id, attendance_date, status):
        if student_id in self.fail_for:
            raise StorageError("Lost connection to MySQL server")
        key = (student_id, attendance_date)
        existing = self.records.get(key)
        if existing:
            record = AttendanceRecord(existing.attendance_id, student_id, attendance_date, status)
            action = MarkAction.UPDATED
        else:
            self._id += 1
            record = AttendanceRecord(self._id, student_id, attendance_date, status)
            action = MarkAction.CREATED
        self.records[key] = record
        return record, action

    def get_by_id(self, attendance_id: int):
        return next((r for r in self.records.values() if r.attendance_id == attendance_id), None)

    def get_for_student_and_date(self, student_id: int, attendance_date: date):
        return self.records.get((student_id, attendance_date))

    def _entries(self, *, start=None, end=None, class_name=None):
        out = []
        for record in self.records.values():
            student = self._students.get_by_id(record.student_id)
            if student is None:
                continue
            if start and record.attendance_date < start:
                continue
            if end and record.attendance_date > end:
                continue
            if class_name and student.class_name != class_name:
                continue
            out.append(AttendanceEntry(record=record, student=student))
        return out

    def list_range(self, *, start=None, end=None, class_name=None):
        entries = self._entries(start=start, end=end, class_name=class_name)
        entries.sort(key=lambda e: e.student.roll_number)
        entries.sort(key=lambda e: e.record.attendance_date, reverse=True)
        return entries

    def list_for_student(self, student_id: int):
        items = [r for r in self.records.values() if r.student_id == student_id]
        return sorted(items, key=lambda r: r.attendance_date, reverse=True)

    def missing_for_date(self, attendance_date: date, *, class_name=None):
        marked = {sid for (sid, d) in self.records if d == attendance_date}
        return [s for s in self._students.list_all(class_name=class_name) if s.student_id not in marked]

    def tally_by_student(self, *, start=None, end=None, class_name=None):
        counts: dict[int, list[int]] = {}
        for e in self._entries(start=start, end=end, class_name=class_name):
            c = counts.setdefault(e.record.student_id, [0, 0])
            c[0 if e.record.status == AttendanceStatus.PRESENT else 1] += 1
        return {sid: StatusTally(present=p, absent=a) for sid, (p, a) in counts.items()}

    def delete_by_id(self, attendance_id: int) -> bool:
        for key, record in list(self.records.items()):
            if record.attendance_id == attendance_id:
                del self.records[key]
                return True
        return False

    def delete_for_date(self, attendance_date: date) -> int:
        keys = [k for k in self.records if k[1] == attendance_date]
        for k in keys:
            del self.records[k]
        return len(keys)


class Repos:
    def __init__(self):
        self.users = InMemoryUsers()
        self.students = InMemoryStudents()
        self.timetable = InMemoryTimetable()
        self.attendance = InMemoryAttendance(self.students)


class Settings:
    """config.testing with per-test overrides."""

    def __init__(self, **overrides):
        for name in dir(test_settings):
            if name.isupper():
                setattr(self, name, getattr(test_settings, name))
        for name, value in overrides.items():
            setattr(self, name, value)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2024, 3, 4, 9, 30, 0)


@pytest.fixture
def repos() -> Repos:
    r = Repos()
    pw = generate_password_hash("password123")
    r.users.create_user(name="Admin User", email="admin@pgp.com", password_hash=pw, role="admin", staff_id="ADM001")
    r.users.create_user(name="John Teacher", email="teacher@pgp.com", password_hash=pw, role="teacher", staff_id="TCH001")
    r.students.add("A001", "Asha", "CSE-A")
    r.students.add("A002", "Bala", "CSE-A")
    r.students.add("A003", "Chitra", "CSE-A")
    return r


@pytest.fixture
def make_container(repos):
    def _make(**overrides):
        return assemble(
            users_repo=repos.users,
            students_repo=repos.students,
            timetable_repo=repos.timetable,
            attendance_repo=repos.attendance,
            settings=Settings(**overrides),
        )

    return _make


@pytest.fixture
def container(make_container):
    return make_container()


@pytest.fixture
def admin() -> CallerIdentity:
    return CallerIdentity(user_id=1, role="admin", name="Admin User")


@pytest.fixture
def teacher() -> CallerIdentity:
    return CallerIdentity(user_id=2, role="teacher", name="John Teacher")


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.class_attendance.class_attendance.main import create_app

    flask_app = create_app(container=container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(caller: CallerIdentity) -> dict:
        token = container.token_service.issue(user_id=caller.user_id, role=caller.role, name=caller.name)
        return {"Authorization": f"Bearer {token}"}

    return _header
