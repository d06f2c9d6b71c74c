from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Gender, StudentStatus


@dataclass(frozen=True)
class StudentData:
    """Validated roster fields, as written to storage."""

    name: str
    email: str
    gender: Gender
    abc_id: int
    course_id: int
    semester: int
    status: StudentStatus = StudentStatus.ACTIVE
    batch: Optional[int] = None
    year: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class Student(StudentData):
    """Domain entity: a student enrolled in one course and semester."""

    student_id: int = 0

    @property
    def is_active(self) -> bool:
        return self.status is StudentStatus.ACTIVE

    @classmethod
    def from_data(cls, student_id: int, data: StudentData) -> "Student":
        return cls(
            student_id=student_id,
            name=data.name,
            email=data.email,
            gender=data.gender,
            abc_id=data.abc_id,
            course_id=data.course_id,
            semester=data.semester,
            status=data.status,
            batch=data.batch,
            year=data.year,
            address=data.address,
        )

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "email": self.email,
            "gender": self.gender.value,
            "abc_id": self.abc_id,
            "course_id": self.course_id,
            "semester": self.semester,
            "status": self.status.value,
            "batch": self.batch,
            "year": self.year,
            "address": self.address,
        }
