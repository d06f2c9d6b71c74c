from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CourseStatus, LinkState


@dataclass(frozen=True)
class Course:
    """Domain entity: a course and its attendance link flag."""

    course_id: int
    programme: str
    duration_months: int
    status: CourseStatus
    link_state: LinkState
    updated_at: Optional[datetime] = None

    @property
    def is_link_active(self) -> bool:
        return self.link_state is LinkState.ACTIVE

    def to_dict(self) -> dict:
        return {
            "course_id": self.course_id,
            "programme": self.programme,
            "duration_months": self.duration_months,
            "status": self.status.value,
            "link_state": self.link_state.value,
        }
