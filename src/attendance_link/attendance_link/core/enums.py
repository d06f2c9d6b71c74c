from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Dashboard account roles."""

    ADMIN = "admin"
    TEACHER = "teacher"


class LinkState(str, Enum):
    """Per-course attendance link flag."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"

    def toggled(self) -> "LinkState":
        return LinkState.INACTIVE if self is LinkState.ACTIVE else LinkState.ACTIVE


class CourseStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class StudentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class ViewState(str, Enum):
    """Display states of an open link page."""

    LOADING = "LOADING"
    ACTIVE_DISPLAYING = "ACTIVE_DISPLAYING"
    INACTIVE_PLACEHOLDER = "INACTIVE_PLACEHOLDER"
    ERROR = "ERROR"


class ChangeKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
