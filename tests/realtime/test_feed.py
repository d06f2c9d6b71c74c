from __future__ import annotations

from src.attendance_link.attendance_link.core.enums import ChangeKind
from src.attendance_link.attendance_link.realtime.feed import ChangeEvent, ChangeFeed, course_channel, location_channel


def test_channel_names():
    assert course_channel(5) == "courses.5"
    assert location_channel() == "locations"


def test_publish_delivers_in_subscription_order_per_channel():
    feed = ChangeFeed()
    seen = []
    feed.subscribe("courses.1", lambda e: seen.append(("a", e.kind)))
    feed.subscribe("courses.1", lambda e: seen.append(("b", e.kind)))
    feed.subscribe("courses.2", lambda e: seen.append(("other", e.kind)))

    delivered = feed.publish(ChangeEvent("courses.1", ChangeKind.UPDATE))

    assert delivered == 2
    assert seen == [("a", ChangeKind.UPDATE), ("b", ChangeKind.UPDATE)]


def test_every_event_is_delivered_without_coalescing():
    feed = ChangeFeed()
    seen = []
    feed.subscribe("locations", seen.append)

    for i in range(3):
        feed.publish(ChangeEvent("locations", ChangeKind.CREATE, payload=i))

    assert [e.payload for e in seen] == [0, 1, 2]


def test_closed_subscription_gets_nothing_and_close_twice_is_fine():
    feed = ChangeFeed()
    seen = []
    sub = feed.subscribe("locations", seen.append)

    sub.close()
    sub.close()

    assert sub.closed
    assert feed.subscriber_count() == 0
    assert feed.publish(ChangeEvent("locations", ChangeKind.CREATE)) == 0
    assert seen == []


def test_subscription_as_context_manager():
    feed = ChangeFeed()
    with feed.subscribe("locations", lambda e: None):
        assert feed.subscriber_count("locations") == 1
    assert feed.subscriber_count("locations") == 0


def test_failing_subscriber_does_not_stop_the_others(caplog):
    feed = ChangeFeed()
    seen = []

    def boom(event):
        raise RuntimeError("listener broke")

    feed.subscribe("courses.1", boom)
    feed.subscribe("courses.1", seen.append)

    delivered = feed.publish(ChangeEvent("courses.1", ChangeKind.UPDATE))

    assert delivered == 1
    assert len(seen) == 1
    assert "listener broke" in caplog.text


def test_subscriber_closed_during_delivery_is_skipped():
    feed = ChangeFeed()
    seen = []
    second = None

    def first(event):
        second.close()

    feed.subscribe("courses.1", first)
    second = feed.subscribe("courses.1", seen.append)

    feed.publish(ChangeEvent("courses.1", ChangeKind.UPDATE))

    assert seen == []
