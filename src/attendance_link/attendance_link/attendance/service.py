from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso8601
from ..common.geo import haversine_meters
from ..common.validators import require_latitude, require_longitude, require_positive_int
from ..core.constants import (
    ALREADY_MARKED_MESSAGE,
    COURSE_NOT_FOUND_MESSAGE,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_TOKEN_MAX_AGE_SECONDS,
    STUDENT_NOT_FOUND_MESSAGE,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    LinkInactiveError,
    NotFoundError,
    OutOfRangeError,
    TokenExpiredError,
    ValidationError,
)
from ..courses.repository import CourseRepository
from ..link.token import TokenPayload, decode_payload
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

MARKED_BY_QR = "QR"

# Allowed drift when the scanning device's clock runs ahead of the server.
_CLOCK_SKEW = timedelta(seconds=30)


@dataclass(frozen=True)
class ScanLocation:
    latitude: float
    longitude: float

    @classmethod
    def from_values(cls, lat, lon) -> Optional["ScanLocation"]:
        if lat in (None, "") and lon in (None, ""):
            return None
        return cls(latitude=require_latitude(lat), longitude=require_longitude(lon))


@dataclass(frozen=True)
class ExportData:
    rows: list[dict]


class AttendanceService:
    """Accepts scanned link tokens and turns them into attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        students: StudentRepository,
        *,
        token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
        geofence_radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS,
    ):
        self._attendance = attendance
        self._courses = courses
        self._students = students
        self._max_age = timedelta(seconds=int(token_max_age_seconds))
        self._radius = float(geofence_radius_meters)

    def verify_token(self, raw_payload: str, *, scan_location: Optional[ScanLocation] = None, now: Optional[datetime] = None) -> TokenPayload:
        """Check a scanned payload against the current state of its course.

        The course is re-read on every scan, so a link switched to Inactive
        after the code was displayed rejects the code immediately.
        """

        now = now or now_utc()
        token = decode_payload(raw_payload)

        course = self._courses.get_by_id(token.course_id)
        if not course:
            raise NotFoundError(COURSE_NOT_FOUND_MESSAGE)
        if not course.is_link_active:
            raise LinkInactiveError("The attendance link for this course is inactive")

        age = now - token.generated_at
        if age > self._max_age or age < -_CLOCK_SKEW:
            raise TokenExpiredError("QR code expired, scan the current code")

        if token.has_location and self._radius > 0:
            if scan_location is None:
                raise ValidationError("Location access is required to mark attendance")
            distance = haversine_meters(token.latitude, token.longitude, scan_location.latitude, scan_location.longitude)
            if distance > self._radius:
                raise OutOfRangeError(f"You are too far from class ({int(distance)}m away)")

        return token

    @staticmethod
    def _check_enrolment(student: Student, token: TokenPayload) -> None:
        if not student.is_active:
            raise ValidationError("Student is not active")
        if student.course_id != token.course_id:
            raise ValidationError("Student is not enrolled in this course")
        if student.semester != token.semester:
            raise ValidationError("Student is not enrolled in this semester")

    def record_scan(
        self,
        *,
        student_id,
        raw_payload: str,
        scan_location: Optional[ScanLocation] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        student_id = require_positive_int(student_id, "Student ID")
        now = now or now_utc()

        try:
            student = self._students.get_by_id(student_id)
            if not student:
                raise NotFoundError(STUDENT_NOT_FOUND_MESSAGE)
            token = self.verify_token(raw_payload, scan_location=scan_location, now=now)
            self._check_enrolment(student, token)
        except (ValidationError, LinkInactiveError, TokenExpiredError, OutOfRangeError, NotFoundError) as e:
            logger.warning("Rejected scan from student %s: %s", student_id, e)
            raise

        existing = self._attendance.get_for_student_course_and_date(
            student_id=student_id,
            course_id=token.course_id,
            day=now.date(),
        )
        if existing:
            raise ValidationError(ALREADY_MARKED_MESSAGE)

        lat = scan_location.latitude if scan_location else token.latitude
        lon = scan_location.longitude if scan_location else token.longitude
        attendance_id = self._attendance.create_record(
            student_id=student_id,
            course_id=token.course_id,
            semester=token.semester,
            status=AttendanceStatus.PRESENT,
            marked_by=MARKED_BY_QR,
            marked_at=now,
            latitude=lat,
            longitude=lon,
        )
        logger.info("Marked %s present for course %s semester %s", student_id, token.course_id, token.semester)

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student_id,
            course_id=token.course_id,
            semester=token.semester,
            status=AttendanceStatus.PRESENT,
            marked_by=MARKED_BY_QR,
            marked_at=now,
            latitude=lat,
            longitude=lon,
        )

    def list_records(
        self,
        *,
        course_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        if start and end and end < start:
            raise ValidationError("End date must not be before start date")
        return self._attendance.list_records(course_id=course_id, start_date=start, end_date=end)

    def build_export(self, *, start: date, end: date, course_id: Optional[int] = None) -> ExportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        rows = self._attendance.get_export_rows(start_date=start, end_date=end, course_id=course_id)
        return ExportData(
            rows=[
                {
                    "marked_at": to_iso8601(r.marked_at),
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "programme": r.programme,
                    "semester": r.semester,
                    "status": r.status.value,
                    "marked_by": r.marked_by,
                    "latitude": "" if r.latitude is None else r.latitude,
                    "longitude": "" if r.longitude is None else r.longitude,
                }
                for r in rows
            ]
        )
