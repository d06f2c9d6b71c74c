from __future__ import annotations

import pytest

from src.attendance_link.attendance_link.core.enums import Gender, StudentStatus
from src.attendance_link.attendance_link.core.exceptions import NotFoundError, ValidationError
from src.attendance_link.attendance_link.students.service import StudentService


@pytest.fixture
def service(students_repo, courses_repo):
    return StudentService(students_repo, courses_repo)


def _fields(**overrides):
    fields = {
        "name": "Farah Khan",
        "email": "Farah@Example.edu",
        "gender": "female",
        "abc_id": "100010",
        "course_id": "1",
        "semester": "3",
        "batch": "2025",
        "year": "Second",
        "address": "",
    }
    fields.update(overrides)
    return fields


def test_create_student_normalises_fields(service):
    student = service.create_student(**_fields())

    assert student.student_id == 5
    assert student.email == "farah@example.edu"
    assert student.gender is Gender.FEMALE
    assert student.status is StudentStatus.ACTIVE
    assert (student.abc_id, student.course_id, student.semester, student.batch) == (100010, 1, 3, 2025)
    assert student.address is None
    assert service.get_student(5) == student


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"name": "  "}, "Name is required"),
        ({"email": "not-an-email"}, "Email is not a valid address"),
        ({"gender": "robot"}, "Gender must be one of"),
        ({"abc_id": "12a"}, "ABC ID must be a whole number"),
        ({"abc_id": "²"}, "ABC ID must be a whole number"),
        ({"semester": "0"}, "Semester must be a whole number"),
        ({"status": "Graduated"}, "Status must be one of"),
        ({"batch": "-1"}, "Batch must be a whole number"),
    ],
)
def test_create_student_validation(service, overrides, message):
    with pytest.raises(ValidationError, match=message):
        service.create_student(**_fields(**overrides))


def test_create_student_needs_existing_course(service):
    with pytest.raises(NotFoundError):
        service.create_student(**_fields(course_id=404))


def test_email_and_abc_id_are_unique(service):
    with pytest.raises(ValidationError, match="Email is already registered"):
        service.create_student(**_fields(email="ASHA@example.edu"))
    with pytest.raises(ValidationError, match="ABC ID is already registered"):
        service.create_student(**_fields(abc_id=100001))


def test_update_keeps_own_email_and_moves_course(service):
    student = service.update_student(
        1,
        **_fields(name="Asha Rao", email="asha@example.edu", abc_id=100001, course_id=3, semester=1),
    )

    assert (student.course_id, student.semester) == (3, 1)
    assert service.get_student(1).course_id == 3


def test_update_cannot_take_someone_elses_email(service):
    with pytest.raises(ValidationError, match="Email is already registered"):
        service.update_student(1, **_fields(email="ben@example.edu"))


def test_update_and_delete_unknown_student(service):
    with pytest.raises(NotFoundError):
        service.update_student(99, **_fields())
    with pytest.raises(NotFoundError):
        service.delete_student(99)
    with pytest.raises(NotFoundError):
        service.get_student(99)


def test_delete_student(service):
    service.delete_student(2)
    assert [s.student_id for s in service.list_students()] == [1, 3, 4]


def test_list_filters_and_search(service):
    assert [s.name for s in service.list_students()] == ["Asha Rao", "Ben Thomas", "Chitra Nair", "Dev Menon"]
    assert [s.student_id for s in service.list_students(course_id="2", semester="2")] == [1, 2, 4]
    assert [s.student_id for s in service.list_students(course_id=2, status="inactive")] == [4]
    assert [s.student_id for s in service.list_students(search="chitra")] == [3]
    assert [s.student_id for s in service.list_students(search="100002")] == [2]
    assert [s.student_id for s in service.list_students(search="ASHA@")] == [1]


def test_list_rejects_bad_filters(service):
    with pytest.raises(ValidationError):
        service.list_students(course_id="two")
    with pytest.raises(ValidationError):
        service.list_students(status="Graduated")
