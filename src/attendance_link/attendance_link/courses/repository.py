from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import CourseStatus, LinkState
from .model import Course


class CourseRepository(Protocol):
    """Repository interface for courses.

    Note (DIP): services and viewer sessions depend on this interface, not on MySQL.
    """

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def create_course(
        self,
        *,
        programme: str,
        duration_months: int,
        status: CourseStatus,
        link_state: LinkState,
    ) -> int:
        raise NotImplementedError

    def update_link_state(self, course_id: int, link_state: LinkState) -> bool:
        """Persist the flag; returns False when no such course exists."""

        raise NotImplementedError
