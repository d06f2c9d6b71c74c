from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.attendance_link.attendance_link.attendance.model import AttendanceExportRow, AttendanceRecord
from src.attendance_link.attendance_link.container import LinkSettings, assemble
from src.attendance_link.attendance_link.core.constants import ALREADY_MARKED_MESSAGE
from src.attendance_link.attendance_link.core.enums import CourseStatus, Gender, LinkState, Role, StudentStatus
from src.attendance_link.attendance_link.core.exceptions import ValidationError
from src.attendance_link.attendance_link.courses.model import Course
from src.attendance_link.attendance_link.holidays.model import Holiday
from src.attendance_link.attendance_link.locations.model import LocationSample
from src.attendance_link.attendance_link.realtime.feed import ChangeFeed
from src.attendance_link.attendance_link.students.model import Student
from src.attendance_link.attendance_link.users.model import User


class InMemoryCourses:
    def __init__(self, courses=()):
        self._by_id: dict[int, Course] = {c.course_id: c for c in courses}
        self._id = max(self._by_id, default=0)
        self.list_calls = 0

    def list_all(self):
        self.list_calls += 1
        return sorted(self._by_id.values(), key=lambda c: c.programme)

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._by_id.get(course_id)

    def create_course(self, *, programme, duration_months, status, link_state) -> int:
        self._id += 1
        self._by_id[self._id] = Course(
            course_id=self._id,
            programme=programme,
            duration_months=duration_months,
            status=status,
            link_state=link_state,
        )
        return self._id

    def update_link_state(self, course_id: int, link_state: LinkState) -> bool:
        course = self._by_id.get(course_id)
        if course is None:
            return False
        self._by_id[course_id] = replace(course, link_state=link_state)
        return True


class InMemoryLocations:
    def __init__(self):
        self._samples: list[LocationSample] = []
        self.fail_next_latest = False

    def create(self, *, latitude, longitude, created_at) -> int:
        location_id = len(self._samples) + 1
        self._samples.append(LocationSample(location_id, latitude, longitude, created_at))
        return location_id

    def get_latest(self) -> Optional[LocationSample]:
        if self.fail_next_latest:
            self.fail_next_latest = False
            raise ConnectionError("database went away")
        if not self._samples:
            return None
        return max(self._samples, key=lambda s: (s.created_at, s.location_id))


class InMemoryAttendance:
    def __init__(self, courses: InMemoryCourses, students: "InMemoryStudents"):
        self._courses = courses
        self._students = students
        self.records: list[AttendanceRecord] = []

    def create_record(self, *, student_id, course_id, semester, status, marked_by, marked_at, latitude=None, longitude=None) -> int:
        # Same one-per-day key as the MySQL table.
        for r in self.records:
            if (r.student_id, r.course_id, r.marked_at.date()) == (student_id, course_id, marked_at.date()):
                raise ValidationError(ALREADY_MARKED_MESSAGE)
        attendance_id = len(self.records) + 1
        self.records.append(
            AttendanceRecord(
                attendance_id=attendance_id,
                student_id=student_id,
                course_id=course_id,
                semester=semester,
                status=status,
                marked_by=marked_by,
                marked_at=marked_at,
                latitude=latitude,
                longitude=longitude,
            )
        )
        return attendance_id

    def get_for_student_course_and_date(self, *, student_id, course_id, day):
        for r in self.records:
            if r.student_id == student_id and r.course_id == course_id and r.marked_at.date() == day:
                return r
        return None

    def list_records(self, *, course_id=None, start_date=None, end_date=None):
        out = []
        for r in self.records:
            if course_id is not None and r.course_id != course_id:
                continue
            if start_date and r.marked_at.date() < start_date:
                continue
            if end_date and r.marked_at.date() > end_date:
                continue
            out.append(r)
        return sorted(out, key=lambda r: r.marked_at, reverse=True)

    def get_export_rows(self, *, start_date, end_date, course_id=None):
        return [
            AttendanceExportRow(
                marked_at=r.marked_at,
                student_id=r.student_id,
                student_name=self._students.get_by_id(r.student_id).name,
                programme=self._courses.get_by_id(r.course_id).programme,
                semester=r.semester,
                status=r.status,
                marked_by=r.marked_by,
                latitude=r.latitude,
                longitude=r.longitude,
            )
            for r in reversed(self.list_records(course_id=course_id, start_date=start_date, end_date=end_date))
        ]


class InMemoryStudents:
    def __init__(self, students=()):
        self._by_id: dict[int, Student] = {s.student_id: s for s in students}
        self._id = max(self._by_id, default=0)

    def list_all(self, *, course_id=None, semester=None, status=None):
        return [
            s
            for s in self._by_id.values()
            if (course_id is None or s.course_id == course_id)
            and (semester is None or s.semester == semester)
            and (status is None or s.status is status)
        ]

    def get_by_id(self, student_id):
        return self._by_id.get(student_id)

    def get_by_email(self, email):
        for s in self._by_id.values():
            if s.email == email.lower():
                return s
        return None

    def get_by_abc_id(self, abc_id):
        for s in self._by_id.values():
            if s.abc_id == abc_id:
                return s
        return None

    def create(self, data) -> int:
        self._id += 1
        self._by_id[self._id] = Student.from_data(self._id, data)
        return self._id

    def update(self, student_id, data) -> bool:
        if student_id not in self._by_id:
            return False
        self._by_id[student_id] = Student.from_data(student_id, data)
        return True

    def delete(self, student_id) -> bool:
        return self._by_id.pop(student_id, None) is not None


class InMemoryHolidays:
    def __init__(self):
        self._by_id: dict[int, Holiday] = {}
        self._id = 0

    def list_all(self):
        return list(self._by_id.values())

    def create(self, *, title, date_from, date_to) -> int:
        self._id += 1
        self._by_id[self._id] = Holiday(self._id, title, date_from, date_to)
        return self._id

    def update(self, *, holiday_id, title, date_from, date_to) -> bool:
        if holiday_id not in self._by_id:
            return False
        self._by_id[holiday_id] = Holiday(holiday_id, title, date_from, date_to)
        return True

    def delete(self, *, holiday_id) -> bool:
        return self._by_id.pop(holiday_id, None) is not None


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id = {u.user_id: u for u in users}

    def get_by_username(self, username):
        for u in self._by_id.values():
            if u.username == username:
                return u
        return None


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 12, 3, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def courses_repo() -> InMemoryCourses:
    return InMemoryCourses(
        [
            Course(1, "BCA", 36, CourseStatus.ACTIVE, LinkState.INACTIVE),
            Course(2, "MBA Finance", 24, CourseStatus.ACTIVE, LinkState.ACTIVE),
            Course(3, "B.Sc/IT", 36, CourseStatus.ACTIVE, LinkState.INACTIVE),
        ]
    )


@pytest.fixture
def locations_repo() -> InMemoryLocations:
    return InMemoryLocations()


@pytest.fixture
def students_repo() -> InMemoryStudents:
    """Students 1 and 2 sit MBA Finance semester 2; 3 is in BCA; 4 has left."""
    return InMemoryStudents(
        [
            Student(student_id=1, name="Asha Rao", email="asha@example.edu", gender=Gender.FEMALE, abc_id=100001, course_id=2, semester=2),
            Student(student_id=2, name="Ben Thomas", email="ben@example.edu", gender=Gender.MALE, abc_id=100002, course_id=2, semester=2),
            Student(student_id=3, name="Chitra Nair", email="chitra@example.edu", gender=Gender.FEMALE, abc_id=100003, course_id=1, semester=3),
            Student(
                student_id=4,
                name="Dev Menon",
                email="dev@example.edu",
                gender=Gender.MALE,
                abc_id=100004,
                course_id=2,
                semester=2,
                status=StudentStatus.INACTIVE,
            ),
        ]
    )


@pytest.fixture
def attendance_repo(courses_repo, students_repo) -> InMemoryAttendance:
    return InMemoryAttendance(courses_repo, students_repo)


@pytest.fixture
def holidays_repo() -> InMemoryHolidays:
    return InMemoryHolidays()


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(1, "Admin", "admin", generate_password_hash("admin123"), Role.ADMIN),
            User(2, "Teacher", "teacher", generate_password_hash("teach123"), Role.TEACHER),
            User(3, "Gone", "gone", generate_password_hash("gone123"), Role.ADMIN, is_active=False),
        ]
    )


@pytest.fixture
def container(courses_repo, locations_repo, attendance_repo, holidays_repo, users_repo, students_repo, feed):
    return assemble(
        courses_repo=courses_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        users_repo=users_repo,
        students_repo=students_repo,
        settings=LinkSettings(),
        feed=feed,
    )


@pytest.fixture
def make_clock(fixed_now):
    """Controllable clock: returns (clock, advance)."""

    def factory():
        current = [fixed_now]

        def clock():
            return current[0]

        def advance(**kwargs):
            current[0] = current[0] + timedelta(**kwargs)

        return clock, advance

    return factory


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()
