from __future__ import annotations

from datetime import timedelta

import pytest

from src.attendance_link.attendance_link.core.enums import ChangeKind
from src.attendance_link.attendance_link.core.exceptions import ValidationError
from src.attendance_link.attendance_link.locations.service import LocationService
from src.attendance_link.attendance_link.realtime.feed import location_channel


@pytest.fixture
def service(locations_repo, feed):
    return LocationService(locations_repo, feed)


def test_latest_is_none_when_empty(service):
    assert service.latest_location() is None


def test_publish_appends_and_announces(service, feed, fixed_now):
    events = []
    feed.subscribe(location_channel(), events.append)

    sample = service.publish_location("12.97", 77.59, now=fixed_now)

    assert sample.latitude == 12.97
    assert sample.created_at == fixed_now
    assert service.latest_location() == sample
    assert [e.kind for e in events] == [ChangeKind.CREATE]
    assert events[0].payload == sample


def test_latest_is_the_most_recently_created(service, fixed_now):
    service.publish_location(1, 1, now=fixed_now)
    service.publish_location(2, 2, now=fixed_now + timedelta(seconds=1))
    service.publish_location(3, 3, now=fixed_now + timedelta(seconds=2))

    assert (service.latest_location().latitude, service.latest_location().longitude) == (3, 3)


@pytest.mark.parametrize("lat,lon", [(91, 0), (-90.5, 0), (0, 181), ("x", 0), (None, 0), (float("nan"), 0)])
def test_publish_rejects_bad_coordinates(service, feed, lat, lon):
    events = []
    feed.subscribe(location_channel(), events.append)

    with pytest.raises(ValidationError):
        service.publish_location(lat, lon)

    assert events == []
    assert service.latest_location() is None
