from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for the roster.

    Services depend on this interface, not on a concrete database.
    """

    def list_all(self, *, class_name: Optional[str] = None) -> Sequence[Student]:
        """Students ordered by class, then roll number."""

        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        roll_number: str,
        name: str,
        class_name: str,
        course: Optional[str],
        year: Optional[str],
        branch: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        student_id: int,
        name: str,
        class_name: str,
        course: Optional[str],
        year: Optional[str],
        branch: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        """Delete a student; its attendance records go with it."""

        raise NotImplementedError

    def count(self, *, class_name: Optional[str] = None) -> int:
        raise NotImplementedError
