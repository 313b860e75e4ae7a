import pytest

from src.class_attendance.class_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_create_student_fills_classification_defaults(container, admin):
    student = container.student_service.create_student(admin, name=" Deepa ", roll_number="A004", class_name="CSE-A")

    assert student.name == "Deepa"
    assert (student.course, student.year, student.branch) == ("B.Tech", "III", "CSE")
    assert container.student_service.get_student(student.student_id) == student


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "", "roll_number": "A009", "class_name": "CSE-A"},
        {"name": "X", "roll_number": "  ", "class_name": "CSE-A"},
        {"name": "X", "roll_number": "A009", "class_name": None},
    ],
)
def test_create_student_requires_name_roll_and_class(container, admin, fields):
    with pytest.raises(ValidationError, match="Name, roll number, and class are required"):
        container.student_service.create_student(admin, **fields)


def test_roll_number_is_unique(container, admin):
    with pytest.raises(ValidationError, match="already exists"):
        container.student_service.create_student(admin, name="Other", roll_number="A001", class_name="CSE-B")


def test_update_is_partial_and_keeps_roll_number(container, admin):
    svc = container.student_service

    updated = svc.update_student(admin, 1, class_name="CSE-B", roll_number="A001")

    assert (updated.roll_number, updated.name, updated.class_name) == ("A001", "Asha", "CSE-B")
    with pytest.raises(ValidationError, match="cannot be changed"):
        svc.update_student(admin, 1, roll_number="Z999")


def test_teacher_cannot_manage_students(container, teacher):
    with pytest.raises(AuthorizationError):
        container.student_service.create_student(teacher, name="X", roll_number="A010", class_name="CSE-A")
    with pytest.raises(AuthorizationError):
        container.student_service.delete_student(teacher, 1)


def test_delete_student(container, repos, admin):
    container.student_service.delete_student(admin, 3)

    assert repos.students.get_by_id(3) is None
    with pytest.raises(NotFoundError):
        container.student_service.delete_student(admin, 3)


def test_list_students_by_class(container, repos):
    repos.students.add("B001", "Farah", "CSE-B")

    assert [s.roll_number for s in container.student_service.list_students(class_name="CSE-B")] == ["B001"]
    assert len(container.student_service.list_students()) == 4


def test_create_student_accepts_non_string_values(container, admin):
    student = container.student_service.create_student(admin, name=5, roll_number=77, class_name="CSE-A", year=3)

    assert (student.name, student.roll_number, student.year) == ("5", "77", "3")
    with pytest.raises(ValidationError, match="already exists"):
        container.student_service.create_student(admin, name="Other", roll_number="77", class_name="CSE-A")
