from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceExportRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def create_record(
        self,
        *,
        student_id: int,
        course_id: int,
        semester: int,
        status: AttendanceStatus,
        marked_by: str,
        marked_at: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        """Insert one mark; a second mark for the same student, course and UTC day raises ValidationError."""

        raise NotImplementedError

    def get_for_student_course_and_date(self, *, student_id: int, course_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        course_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_export_rows(self, *, start_date: date, end_date: date, course_id: Optional[int] = None) -> Sequence[AttendanceExportRow]:
        raise NotImplementedError
