from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import StudentStatus
from .model import Student, StudentData


class StudentRepository(Protocol):
    def list_all(
        self,
        *,
        course_id: Optional[int] = None,
        semester: Optional[int] = None,
        status: Optional[StudentStatus] = None,
    ) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_abc_id(self, abc_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create(self, data: StudentData) -> int:
        raise NotImplementedError

    def update(self, student_id: int, data: StudentData) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError
