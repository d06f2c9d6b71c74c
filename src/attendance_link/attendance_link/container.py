from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_CLOCK_TICK_SECONDS,
    DEFAULT_DISPLAY_TIMEZONE,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_TOKEN_MAX_AGE_SECONDS,
)
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .link.session import LinkSnapshot, LinkViewerSession
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.repository import LocationRepository
from .locations.service import LocationService
from .realtime.feed import ChangeFeed
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class LinkSettings:
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS
    geofence_radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE
    clock_tick_seconds: float = DEFAULT_CLOCK_TICK_SECONDS

    @classmethod
    def from_settings(cls, settings) -> "LinkSettings":
        return cls(
            token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
            geofence_radius_meters=float(getattr(settings, "GEOFENCE_RADIUS_METERS", DEFAULT_GEOFENCE_RADIUS_METERS)),
            display_timezone=str(getattr(settings, "DISPLAY_TIMEZONE", DEFAULT_DISPLAY_TIMEZONE)),
            clock_tick_seconds=float(getattr(settings, "CLOCK_TICK_SECONDS", DEFAULT_CLOCK_TICK_SECONDS)),
        )


@dataclass(frozen=True)
class Container:
    feed: ChangeFeed
    settings: LinkSettings

    courses_repo: CourseRepository
    locations_repo: LocationRepository
    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    users_repo: UserRepository
    students_repo: StudentRepository

    course_service: CourseService
    location_service: LocationService
    attendance_service: AttendanceService
    holiday_service: HolidayService
    auth_service: AuthService
    student_service: StudentService

    conn: Optional[DatabaseConnection] = None

    def open_link_session(
        self,
        *,
        programme: str,
        semester: str,
        live: bool = False,
        on_change: Optional[Callable[[LinkSnapshot], None]] = None,
    ) -> LinkViewerSession:
        """Create a viewer session; the caller opens and closes it.

        ``live`` sessions also run the clock ticker.
        """

        return LinkViewerSession(
            self.courses_repo,
            self.locations_repo,
            self.feed,
            programme=programme,
            semester=semester,
            display_timezone=self.settings.display_timezone,
            clock_tick_seconds=self.settings.clock_tick_seconds if live else None,
            on_change=on_change,
        )


def assemble(
    *,
    courses_repo: CourseRepository,
    locations_repo: LocationRepository,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    settings: Optional[LinkSettings] = None,
    feed: Optional[ChangeFeed] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    settings = settings or LinkSettings()
    feed = feed or ChangeFeed()

    return Container(
        feed=feed,
        settings=settings,
        courses_repo=courses_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        users_repo=users_repo,
        students_repo=students_repo,
        course_service=CourseService(courses_repo, feed),
        location_service=LocationService(locations_repo, feed),
        attendance_service=AttendanceService(
            attendance_repo,
            courses_repo,
            students_repo,
            token_max_age_seconds=settings.token_max_age_seconds,
            geofence_radius_meters=settings.geofence_radius_meters,
        ),
        holiday_service=HolidayService(holidays_repo),
        auth_service=AuthService(users_repo),
        student_service=StudentService(students_repo, courses_repo),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Optional[LinkSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        courses_repo=MySQLCourseRepository(conn),
        locations_repo=MySQLLocationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        settings=settings,
        conn=conn,
    )
