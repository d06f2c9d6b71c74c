from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..common.validators import (
    optional_positive_int,
    optional_text,
    parse_semester,
    require_email,
    require_non_empty,
    require_positive_int,
)
from ..core.constants import COURSE_NOT_FOUND_MESSAGE, STUDENT_NOT_FOUND_MESSAGE
from ..core.enums import Gender, StudentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.repository import CourseRepository
from .model import Student, StudentData
from .repository import StudentRepository

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _choice(enum_cls: Type[E], value: Any, field_name: str) -> E:
    wanted = str(value or "").strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"{field_name} must be one of: {allowed}")


class StudentService:
    """Use case: manage the student roster (admin).

    Every student belongs to exactly one course and semester; the scan
    endpoint relies on that to refuse marks for other classes.
    """

    def __init__(self, students: StudentRepository, courses: CourseRepository):
        self._students = students
        self._courses = courses

    def list_students(
        self,
        *,
        course_id: Any = None,
        semester: Any = None,
        status: Any = None,
        search: Optional[str] = None,
    ) -> list[Student]:
        items = list(
            self._students.list_all(
                course_id=optional_positive_int(course_id, "Course"),
                semester=parse_semester(semester) if semester not in (None, "") else None,
                status=_choice(StudentStatus, status, "Status") if status else None,
            )
        )
        if search:
            needle = search.strip().lower()
            items = [
                s for s in items
                if needle in s.name.lower() or needle in s.email or needle in str(s.abc_id)
            ]
        return sorted(items, key=lambda s: (s.name.lower(), s.student_id))

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(STUDENT_NOT_FOUND_MESSAGE)
        return student

    def _clean(self, fields: dict, *, student_id: Optional[int] = None) -> StudentData:
        data = StudentData(
            name=require_non_empty(fields.get("name"), "Name"),
            email=require_email(fields.get("email")),
            gender=_choice(Gender, fields.get("gender"), "Gender"),
            abc_id=require_positive_int(fields.get("abc_id"), "ABC ID"),
            course_id=require_positive_int(fields.get("course_id"), "Course"),
            semester=parse_semester(fields.get("semester")),
            status=_choice(StudentStatus, fields.get("status") or StudentStatus.ACTIVE.value, "Status"),
            batch=optional_positive_int(fields.get("batch"), "Batch"),
            year=optional_text(fields.get("year")),
            address=optional_text(fields.get("address")),
        )

        if not self._courses.get_by_id(data.course_id):
            raise NotFoundError(COURSE_NOT_FOUND_MESSAGE)

        same_email = self._students.get_by_email(data.email)
        if same_email and same_email.student_id != student_id:
            raise ValidationError("Email is already registered")
        same_abc = self._students.get_by_abc_id(data.abc_id)
        if same_abc and same_abc.student_id != student_id:
            raise ValidationError("ABC ID is already registered")
        return data

    def create_student(self, **fields) -> Student:
        data = self._clean(fields)
        student_id = self._students.create(data)
        logger.info("Added student %s to course %s semester %s", student_id, data.course_id, data.semester)
        return Student.from_data(student_id, data)

    def update_student(self, student_id: int, **fields) -> Student:
        data = self._clean(fields, student_id=int(student_id))
        if not self._students.update(int(student_id), data):
            raise NotFoundError(STUDENT_NOT_FOUND_MESSAGE)
        return Student.from_data(int(student_id), data)

    def delete_student(self, student_id: int) -> None:
        if not self._students.delete(int(student_id)):
            raise NotFoundError(STUDENT_NOT_FOUND_MESSAGE)
        logger.info("Removed student %s", student_id)
