from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import CourseStatus, LinkState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Course
from .repository import CourseRepository

_COLUMNS = "course_id, programme, duration_months, status, link_state, updated_at"


def _to_course(r: dict) -> Course:
    return Course(
        course_id=int(r["course_id"]),
        programme=r["programme"],
        duration_months=int(r.get("duration_months") or 0),
        status=CourseStatus(r["status"]),
        link_state=LinkState(r["link_state"]),
        updated_at=r.get("updated_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY programme")
            return [_to_course(r) for r in fetchall(cur)]

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_id=%s", (int(course_id),))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def create_course(
        self,
        *,
        programme: str,
        duration_months: int,
        status: CourseStatus,
        link_state: LinkState,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses(programme, duration_months, status, link_state)
                VALUES(%s,%s,%s,%s)
                """,
                (programme, int(duration_months), status.value, link_state.value),
            )
            return int(cur.lastrowid)

    def update_link_state(self, course_id: int, link_state: LinkState) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE courses
                SET link_state=%s, updated_at=CURRENT_TIMESTAMP(3)
                WHERE course_id=%s
                """,
                (link_state.value, int(course_id)),
            )
            if cur.rowcount > 0:
                return True

            # Same-value updates report 0 affected rows; tell them apart from a missing course.
            cur.execute("SELECT 1 AS found FROM courses WHERE course_id=%s", (int(course_id),))
            return fetchone(cur) is not None
