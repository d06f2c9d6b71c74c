from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso8601
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance mark for a course."""

    attendance_id: int
    student_id: int
    course_id: int
    semester: int
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "student_id": self.student_id,
            "course_id": self.course_id,
            "semester": self.semester,
            "status": self.status.value,
            "marked_by": self.marked_by,
            "marked_at": to_iso8601(self.marked_at),
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass(frozen=True)
class AttendanceExportRow:
    """Read-model for CSV export (student and course names joined in)."""

    marked_at: datetime
    student_id: int
    student_name: str
    programme: str
    semester: int
    status: AttendanceStatus
    marked_by: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
