from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ensure_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import LocationSample
from .repository import LocationRepository


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, latitude: float, longitude: float, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO location_samples(latitude, longitude, created_at) VALUES(%s,%s,%s)",
                (float(latitude), float(longitude), ensure_utc(created_at).replace(tzinfo=None)),
            )
            return int(cur.lastrowid)

    def get_latest(self) -> Optional[LocationSample]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            # location_id breaks ties between samples created in the same millisecond.
            cur.execute(
                """
                SELECT location_id, latitude, longitude, created_at
                FROM location_samples
                ORDER BY created_at DESC, location_id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return LocationSample(
                location_id=int(r["location_id"]),
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                created_at=ensure_utc(r["created_at"]),
            )
