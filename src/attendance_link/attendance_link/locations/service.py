from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_latitude, require_longitude
from ..core.enums import ChangeKind
from ..realtime.feed import ChangeEvent, ChangeFeed, location_channel
from .model import LocationSample
from .repository import LocationRepository

logger = logging.getLogger(__name__)


class LocationService:
    def __init__(self, locations: LocationRepository, feed: ChangeFeed):
        self._locations = locations
        self._feed = feed

    def publish_location(self, lat, lon, *, now: Optional[datetime] = None) -> LocationSample:
        """Append a new sample and announce its creation.

        The event carries the created sample, but watchers re-query
        latest_location() instead of trusting it.
        """

        latitude = require_latitude(lat)
        longitude = require_longitude(lon)
        created_at = now or now_utc()

        location_id = self._locations.create(latitude=latitude, longitude=longitude, created_at=created_at)
        sample = LocationSample(location_id=location_id, latitude=latitude, longitude=longitude, created_at=created_at)
        logger.info("Published location %s (%.6f, %.6f)", location_id, latitude, longitude)

        self._feed.publish(ChangeEvent(channel=location_channel(), kind=ChangeKind.CREATE, payload=sample))
        return sample

    def latest_location(self) -> Optional[LocationSample]:
        return self._locations.get_latest()
