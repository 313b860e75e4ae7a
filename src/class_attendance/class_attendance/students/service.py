from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import optional_text
from ..core.constants import DEFAULT_BRANCH, DEFAULT_COURSE, DEFAULT_YEAR
from ..core.exceptions import NotFoundError, ValidationError
from ..users.access import AccessPolicy
from ..users.model import CallerIdentity
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: roster management."""

    def __init__(self, students: StudentRepository, policy: AccessPolicy):
        self._students = students
        self._policy = policy

    def _require_manager(self, caller: CallerIdentity) -> None:
        self._policy.require(caller, self._policy.student_managers, "You are not allowed to manage students")

    def list_students(self, *, class_name: Optional[str] = None) -> list[Student]:
        return list(self._students.list_all(class_name=optional_text(class_name)))

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_student(
        self,
        caller: CallerIdentity,
        *,
        name: str,
        roll_number: str,
        class_name: str,
        course: Optional[str] = None,
        year: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> Student:
        self._require_manager(caller)

        name = optional_text(name)
        roll_number = optional_text(roll_number)
        class_name = optional_text(class_name)
        if not name or not roll_number or not class_name:
            raise ValidationError("Name, roll number, and class are required")

        if self._students.get_by_roll_number(roll_number):
            raise ValidationError("Roll number already exists")

        course = optional_text(course) or DEFAULT_COURSE
        year = optional_text(year) or DEFAULT_YEAR
        branch = optional_text(branch) or DEFAULT_BRANCH

        student_id = self._students.create(
            roll_number=roll_number,
            name=name,
            class_name=class_name,
            course=course,
            year=year,
            branch=branch,
        )
        logger.info("Student %s (%s) added", roll_number, class_name)
        return Student(
            student_id=student_id,
            roll_number=roll_number,
            name=name,
            class_name=class_name,
            course=course,
            year=year,
            branch=branch,
        )

    def update_student(
        self,
        caller: CallerIdentity,
        student_id: int,
        *,
        name: Optional[str] = None,
        roll_number: Optional[str] = None,
        class_name: Optional[str] = None,
        course: Optional[str] = None,
        year: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> Student:
        """Partial update; blank fields keep their current value."""

        self._require_manager(caller)
        student = self.get_student(student_id)

        new_roll = optional_text(roll_number)
        if new_roll and new_roll != student.roll_number:
            raise ValidationError("Roll number cannot be changed")

        updated = Student(
            student_id=student.student_id,
            roll_number=student.roll_number,
            name=optional_text(name) or student.name,
            class_name=optional_text(class_name) or student.class_name,
            course=optional_text(course) or student.course,
            year=optional_text(year) or student.year,
            branch=optional_text(branch) or student.branch,
        )
        if not self._students.update(
            student_id=updated.student_id,
            name=updated.name,
            class_name=updated.class_name,
            course=updated.course,
            year=updated.year,
            branch=updated.branch,
        ):
            raise NotFoundError("Student not found")
        return updated

    def delete_student(self, caller: CallerIdentity, student_id: int) -> None:
        """Delete a student together with all of its attendance records."""

        self._require_manager(caller)
        student = self.get_student(student_id)
        if not self._students.delete(student.student_id):
            raise NotFoundError("Student not found")
        logger.info("Student %s deleted", student.roll_number)
