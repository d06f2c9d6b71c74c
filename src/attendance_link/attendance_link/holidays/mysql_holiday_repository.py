from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        title=r["title"],
        date_from=r["date_from"],
        date_to=r["date_to"],
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, title, date_from, date_to FROM holidays ORDER BY date_from, holiday_id")
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(self, *, title: str, date_from: date, date_to: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(title, date_from, date_to) VALUES(%s,%s,%s)",
                (title, date_from, date_to),
            )
            return int(cur.lastrowid)

    def update(self, *, holiday_id: int, title: str, date_from: date, date_to: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE holidays SET title=%s, date_from=%s, date_to=%s WHERE holiday_id=%s",
                (title, date_from, date_to, int(holiday_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return fetchone(cur) is not None

    def delete(self, *, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
