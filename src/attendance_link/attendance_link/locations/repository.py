from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import LocationSample


class LocationRepository(Protocol):
    """Append-only location log. There is no update or delete."""

    def create(self, *, latitude: float, longitude: float, created_at: datetime) -> int:
        raise NotImplementedError

    def get_latest(self) -> Optional[LocationSample]:
        """Most recently created sample (created_at DESC, LIMIT 1), or None."""

        raise NotImplementedError
