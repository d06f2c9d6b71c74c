from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import unquote

from ..common.datetime_utils import format_clock, now_utc
from ..common.validators import parse_semester
from ..core.constants import (
    COURSE_NOT_FOUND_MESSAGE,
    DEFAULT_DISPLAY_TIMEZONE,
    LIVE_UPDATE_FAILED_MESSAGE,
    LOAD_FAILED_MESSAGE,
)
from ..core.enums import ChangeKind, ViewState
from ..core.exceptions import ValidationError
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..courses.service import match_programme
from ..locations.model import LocationSample
from ..locations.repository import LocationRepository
from ..realtime.feed import ChangeEvent, ChangeFeed, Subscription, course_channel, location_channel
from .clock import ClockTicker
from .token import build_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkSnapshot:
    """What an open link page shows at one point in time."""

    state: ViewState
    programme: str
    semester: str
    course: Optional[Course]
    location: Optional[LocationSample]
    payload: str
    clock: str
    error: Optional[str] = None
    live_error: Optional[str] = None

    @property
    def link_active(self) -> bool:
        return self.state is ViewState.ACTIVE_DISPLAYING

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "programme": self.programme,
            "semester": self.semester,
            "course": self.course.to_dict() if self.course else None,
            "location": self.location.to_dict() if self.location else None,
            "link_active": self.link_active,
            "payload": self.payload,
            "clock": self.clock,
            "error": self.error,
            "live_error": self.live_error,
        }


def _is_newer(candidate: LocationSample, current: Optional[LocationSample]) -> bool:
    if current is None:
        return True
    return (candidate.created_at, candidate.location_id) >= (current.created_at, current.location_id)


class LinkViewerSession:
    """One open link page: LOADING -> ACTIVE_DISPLAYING / INACTIVE_PLACEHOLDER, or ERROR.

    open() loads the course and the latest location and subscribes to both
    change channels; close() releases everything it acquired and is safe to
    call from any exit path. Every change is pushed to ``on_change`` as a
    LinkSnapshot.
    """

    def __init__(
        self,
        courses: CourseRepository,
        locations: LocationRepository,
        feed: ChangeFeed,
        *,
        programme: str,
        semester: str,
        clock: Callable[[], datetime] = now_utc,
        display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
        clock_tick_seconds: Optional[float] = None,
        on_change: Optional[Callable[[LinkSnapshot], None]] = None,
    ):
        self._courses = courses
        self._locations = locations
        self._feed = feed
        self._programme = unquote(programme or "")
        self._raw_semester = str(semester if semester is not None else "")
        self._clock = clock
        self._display_timezone = display_timezone
        self._clock_tick_seconds = clock_tick_seconds
        self._on_change = on_change

        self._lock = threading.RLock()
        self._state = ViewState.LOADING
        self._semester: Optional[int] = None
        self._course: Optional[Course] = None
        self._location: Optional[LocationSample] = None
        self._payload = ""
        self._error: Optional[str] = None
        self._live_error: Optional[str] = None
        self._closed = False
        self._course_sub: Optional[Subscription] = None
        self._location_sub: Optional[Subscription] = None
        self._ticker: Optional[ClockTicker] = None

    # -- read side -----------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def payload(self) -> str:
        return self._payload

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> LinkSnapshot:
        with self._lock:
            return LinkSnapshot(
                state=self._state,
                programme=self._course.programme if self._course else self._programme,
                semester=self._raw_semester,
                course=self._course,
                location=self._location,
                payload=self._payload,
                clock=format_clock(self._clock(), self._display_timezone),
                error=self._error,
                live_error=self._live_error,
            )

    # -- lifecycle -----------------------------------------------------

    def __enter__(self) -> "LinkViewerSession":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def open(self) -> LinkSnapshot:
        with self._lock:
            if self._closed or self._state is not ViewState.LOADING:
                return self.snapshot()

            try:
                self._semester = parse_semester(self._raw_semester)
            except ValidationError as e:
                return self._fail(str(e))

            try:
                course = match_programme(self._courses.list_all(), self._programme)
                if course is None:
                    return self._fail(COURSE_NOT_FOUND_MESSAGE)

                self._course = course
                self._course_sub = self._feed.subscribe(course_channel(course.course_id), self._on_course_event)
                self._location = self._locations.get_latest()
                self._location_sub = self._feed.subscribe(location_channel(), self._on_location_event)
            except Exception:
                logger.exception("Loading link page for %r failed", self._programme)
                return self._fail(LOAD_FAILED_MESSAGE)

            self._apply_link_state()
            if self._clock_tick_seconds:
                self._ticker = ClockTicker(self._clock_tick_seconds, self.tick)
                self._ticker.start()

            logger.info("Opened link session for course %s semester %s", self._course.course_id, self._semester)
            snap = self.snapshot()

        self._emit(snap)
        return snap

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            ticker = self._release()
        # Joined outside the lock: a tick waiting on it would otherwise stall close.
        if ticker is not None:
            ticker.stop()
        logger.debug("Closed link session for %r", self._programme)

    def _release(self) -> Optional[ClockTicker]:
        for sub in (self._course_sub, self._location_sub):
            if sub is not None:
                sub.close()
        self._course_sub = None
        self._location_sub = None
        ticker, self._ticker = self._ticker, None
        return ticker

    def _fail(self, message: str) -> LinkSnapshot:
        self._release()
        self._state = ViewState.ERROR
        self._error = message
        self._payload = ""
        snap = self.snapshot()
        self._emit(snap)
        return snap

    # -- live updates --------------------------------------------------

    def _on_course_event(self, event: ChangeEvent) -> None:
        if event.kind is not ChangeKind.UPDATE or not isinstance(event.payload, Course):
            return

        with self._lock:
            if self._closed or self._state is ViewState.ERROR or self._course is None:
                return
            if event.payload.course_id != self._course.course_id:
                return

            self._course = event.payload
            self._live_error = None
            if self._state is not ViewState.LOADING:
                self._apply_link_state()
            snap = self.snapshot()

        self._emit(snap)

    def _on_location_event(self, event: ChangeEvent) -> None:
        if event.kind is not ChangeKind.CREATE or self._closed:
            return

        # The created document is not necessarily the newest one when several
        # writers publish at once; ask for the latest instead.
        try:
            latest = self._locations.get_latest()
        except Exception:
            logger.exception("Re-querying the latest location failed")
            with self._lock:
                if self._closed:
                    return
                self._live_error = LIVE_UPDATE_FAILED_MESSAGE
                snap = self.snapshot()
            self._emit(snap)
            return

        with self._lock:
            if self._closed or self._state is ViewState.ERROR:
                return
            if latest is not None and _is_newer(latest, self._location):
                self._location = latest
            self._live_error = None
            if self._state is not ViewState.LOADING:
                self._recompute()
            snap = self.snapshot()

        self._emit(snap)

    def tick(self) -> None:
        """Clock refresh: the payload timestamp moves with the displayed time."""

        with self._lock:
            if self._closed or self._state not in (ViewState.ACTIVE_DISPLAYING, ViewState.INACTIVE_PLACEHOLDER):
                return
            self._recompute()
            snap = self.snapshot()

        self._emit(snap)

    def _apply_link_state(self) -> None:
        self._state = ViewState.ACTIVE_DISPLAYING if self._course.is_link_active else ViewState.INACTIVE_PLACEHOLDER
        self._recompute()

    def _recompute(self) -> None:
        if self._state is ViewState.ACTIVE_DISPLAYING:
            self._payload = build_payload(self._course, self._semester, self._clock(), self._location)
        else:
            self._payload = ""

    def _emit(self, snap: LinkSnapshot) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(snap)
        except Exception:
            logger.exception("Delivering link snapshot failed")
