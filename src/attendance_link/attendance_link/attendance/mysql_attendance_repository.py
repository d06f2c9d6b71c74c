from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import ensure_utc
from ..core.constants import ALREADY_MARKED_MESSAGE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceExportRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, course_id, semester, status, marked_by, marked_at, latitude, longitude"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        course_id=int(r["course_id"]),
        semester=int(r["semester"]),
        status=AttendanceStatus(r["status"]),
        marked_by=r["marked_by"],
        marked_at=ensure_utc(r["marked_at"]),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
    )


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        marked_at = ensure_utc(marked_at)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        student_id, course_id, semester, status, marked_by, marked_at, marked_on, latitude, longitude
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(student_id),
                        int(course_id),
                        int(semester),
                        status.value,
                        marked_by,
                        marked_at.replace(tzinfo=None),
                        marked_at.date(),
                        latitude,
                        longitude,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            # uq_attendance_student_course_day: one mark per student, course and UTC day.
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError(ALREADY_MARKED_MESSAGE) from e
            raise

    def get_for_student_course_and_date(self, *, student_id: int, course_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND course_id=%s AND marked_on=%s
                ORDER BY marked_at DESC
                LIMIT 1
                """,
                (int(student_id), int(course_id), day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_records(
        self,
        *,
        course_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if course_id is not None:
            clauses.append("course_id=%s")
            params.append(int(course_id))
        if start_date is not None:
            clauses.append("marked_at >= %s")
            params.append(datetime.combine(start_date, time.min))
        if end_date is not None:
            clauses.append("marked_at < %s")
            params.append(datetime.combine(end_date + timedelta(days=1), time.min))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY marked_at DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_export_rows(self, *, start_date: date, end_date: date, course_id: Optional[int] = None) -> Sequence[AttendanceExportRow]:
        lo, hi = _day_bounds(start_date, end_date)
        clauses = ["ar.marked_at >= %s", "ar.marked_at < %s"]
        params: list[object] = [lo, hi]
        if course_id is not None:
            clauses.append("ar.course_id=%s")
            params.append(int(course_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.marked_at, ar.student_id, s.name AS student_name, c.programme, ar.semester, ar.status,
                       ar.marked_by, ar.latitude, ar.longitude
                FROM attendance_records ar
                JOIN courses c ON c.course_id = ar.course_id
                JOIN students s ON s.student_id = ar.student_id
                WHERE {where}
                ORDER BY ar.marked_at DESC, ar.student_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceExportRow(
                    marked_at=ensure_utc(r["marked_at"]),
                    student_id=int(r["student_id"]),
                    student_name=r["student_name"],
                    programme=r["programme"],
                    semester=int(r["semester"]),
                    status=AttendanceStatus(r["status"]),
                    marked_by=r["marked_by"],
                    latitude=r.get("latitude"),
                    longitude=r.get("longitude"),
                )
                for r in fetchall(cur)
            ]
