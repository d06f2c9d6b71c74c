from __future__ import annotations

import logging
from typing import Optional, Sequence
from urllib.parse import unquote

from ..common.validators import require_non_empty
from ..core.enums import ChangeKind, CourseStatus, LinkState
from ..core.exceptions import NotFoundError, ValidationError
from ..core.constants import COURSE_NOT_FOUND_MESSAGE
from ..realtime.feed import ChangeEvent, ChangeFeed, course_channel
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


def match_programme(courses: Sequence[Course], programme: str) -> Optional[Course]:
    """Case-insensitive exact match of a URL path segment against course names."""

    wanted = unquote(programme or "").strip().lower()
    for course in courses:
        if course.programme.lower() == wanted:
            return course
    return None


class CourseService:
    """Use cases around courses; sole writer of the link flag."""

    def __init__(self, courses: CourseRepository, feed: ChangeFeed):
        self._courses = courses
        self._feed = feed

    def list_courses(self, search: Optional[str] = None) -> list[Course]:
        items = list(self._courses.list_all())
        if search:
            needle = search.strip().lower()
            items = [c for c in items if needle in c.programme.lower()]
        return items

    def get_course(self, course_id: int) -> Course:
        course = self._courses.get_by_id(int(course_id))
        if not course:
            raise NotFoundError(COURSE_NOT_FOUND_MESSAGE)
        return course

    def find_by_programme(self, programme: str) -> Course:
        course = match_programme(self._courses.list_all(), programme)
        if not course:
            raise NotFoundError(COURSE_NOT_FOUND_MESSAGE)
        return course

    def create_course(self, *, programme: str, duration_months: int = 0, status: CourseStatus = CourseStatus.ACTIVE) -> Course:
        programme = require_non_empty(programme, "Programme")
        if int(duration_months) < 0:
            raise ValidationError("Duration must not be negative")
        if match_programme(self._courses.list_all(), programme):
            raise ValidationError("A course with this programme already exists")

        course_id = self._courses.create_course(
            programme=programme,
            duration_months=int(duration_months),
            status=status,
            link_state=LinkState.INACTIVE,
        )
        logger.info("Created course %s (%s)", course_id, programme)
        return self.get_course(course_id)

    def set_link_state(self, course_id: int, state: LinkState) -> Course:
        """Persist the flag, then notify watchers with the full updated course.

        Re-applying the current state is not an error; watchers are told again.
        """

        state = LinkState(state)
        if not self._courses.update_link_state(int(course_id), state):
            raise NotFoundError(COURSE_NOT_FOUND_MESSAGE)

        course = self.get_course(course_id)
        logger.info("Course %s link is now %s", course.course_id, course.link_state.value)
        self._feed.publish(ChangeEvent(channel=course_channel(course.course_id), kind=ChangeKind.UPDATE, payload=course))
        return course

    def toggle_link_state(self, course_id: int) -> Course:
        course = self.get_course(course_id)
        return self.set_link_state(course.course_id, course.link_state.toggled())
