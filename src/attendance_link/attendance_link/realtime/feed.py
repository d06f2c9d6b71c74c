"""In-process change feed.

Writers (CourseService, LocationService) publish a ChangeEvent after the
write is persisted; open link pages subscribe to the channels they watch.
Channel names follow the document-database convention the dashboard uses:
``courses.<id>`` for updates of one course and ``locations`` for the whole
location collection.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import COURSE_CHANNEL_PREFIX, LOCATION_CHANNEL
from ..core.enums import ChangeKind

logger = logging.getLogger(__name__)


def course_channel(course_id: int) -> str:
    return f"{COURSE_CHANNEL_PREFIX}.{int(course_id)}"


def location_channel() -> str:
    return LOCATION_CHANNEL


@dataclass(frozen=True)
class ChangeEvent:
    channel: str
    kind: ChangeKind
    payload: Any = None
    occurred_at: datetime = field(default_factory=now_utc)


Callback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ChangeFeed.subscribe; close() is safe to call twice."""

    def __init__(self, feed: "ChangeFeed", channel: str, callback: Callback):
        self._feed = feed
        self.channel = channel
        self.callback = callback
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, channel: str, callback: Callback) -> Subscription:
        sub = Subscription(self, channel, callback)
        with self._lock:
            self._subscribers.setdefault(channel, []).append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscribers.get(sub.channel)
            if not subs:
                return
            try:
                subs.remove(sub)
            except ValueError:
                return
            if not subs:
                del self._subscribers[sub.channel]

    def subscriber_count(self, channel: Optional[str] = None) -> int:
        with self._lock:
            if channel is not None:
                return len(self._subscribers.get(channel, ()))
            return sum(len(v) for v in self._subscribers.values())

    def publish(self, event: ChangeEvent) -> int:
        """Deliver to current subscribers in subscription order.

        Returns the number of callbacks that completed. A failing callback is
        logged and skipped; it never fails the writer that published.
        """

        with self._lock:
            targets = list(self._subscribers.get(event.channel, ()))

        delivered = 0
        for sub in targets:
            # Closed while an earlier callback in this loop ran.
            if sub.closed:
                continue
            try:
                sub.callback(event)
                delivered += 1
            except Exception:
                logger.exception("Subscriber on %s failed handling %s event", event.channel, event.kind.value)
        return delivered
