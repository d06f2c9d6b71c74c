from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Gender, StudentStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentData
from .repository import StudentRepository

_COLUMNS = "student_id, name, email, gender, abc_id, course_id, semester, status, batch, year, address"

DUPLICATE_STUDENT_MESSAGE = "A student with this email or ABC ID already exists"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        email=r["email"],
        gender=Gender(r["gender"]),
        abc_id=int(r["abc_id"]),
        course_id=int(r["course_id"]),
        semester=int(r["semester"]),
        status=StudentStatus(r["status"]),
        batch=int(r["batch"]) if r.get("batch") is not None else None,
        year=r.get("year"),
        address=r.get("address"),
    )


def _params(data: StudentData) -> tuple:
    return (
        data.name,
        data.email,
        data.gender.value,
        int(data.abc_id),
        int(data.course_id),
        int(data.semester),
        data.status.value,
        data.batch,
        data.year,
        data.address,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(
        self,
        *,
        course_id: Optional[int] = None,
        semester: Optional[int] = None,
        status: Optional[StudentStatus] = None,
    ) -> Sequence[Student]:
        clauses = ["1=1"]
        params: list[object] = []
        if course_id is not None:
            clauses.append("course_id=%s")
            params.append(int(course_id))
        if semester is not None:
            clauses.append("semester=%s")
            params.append(int(semester))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where} ORDER BY name, student_id", tuple(params))
            return [_to_student(r) for r in fetchall(cur)]

    def _get_one(self, column: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {column}=%s LIMIT 1", (value,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id", int(student_id))

    def get_by_email(self, email: str) -> Optional[Student]:
        return self._get_one("email", email.lower())

    def get_by_abc_id(self, abc_id: int) -> Optional[Student]:
        return self._get_one("abc_id", int(abc_id))

    def create(self, data: StudentData) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(name, email, gender, abc_id, course_id, semester, status, batch, year, address)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    _params(data),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError(DUPLICATE_STUDENT_MESSAGE) from e
            raise

    def update(self, student_id: int, data: StudentData) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE students
                    SET name=%s, email=%s, gender=%s, abc_id=%s, course_id=%s, semester=%s,
                        status=%s, batch=%s, year=%s, address=%s
                    WHERE student_id=%s
                    """,
                    _params(data) + (int(student_id),),
                )
                if cur.rowcount > 0:
                    return True
                cur.execute("SELECT 1 AS found FROM students WHERE student_id=%s", (int(student_id),))
                return fetchone(cur) is not None
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError(DUPLICATE_STUDENT_MESSAGE) from e
            raise

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
