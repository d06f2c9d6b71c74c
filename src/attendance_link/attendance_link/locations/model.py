from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import to_iso8601


@dataclass(frozen=True)
class LocationSample:
    """Domain entity: one append-only coordinate snapshot."""

    location_id: int
    latitude: float
    longitude: float
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "created_at": to_iso8601(self.created_at),
        }
