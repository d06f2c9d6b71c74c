from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ClockTicker:
    """Calls ``on_tick`` every ``interval`` seconds on a daemon thread until stopped.

    stop() returns once the loop has been told to exit; a tick already in
    progress finishes, no new one starts.
    """

    def __init__(self, interval: float, on_tick: Callable[[], None], *, name: str = "link-clock"):
        self._interval = float(interval)
        self._on_tick = on_tick
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Clock tick failed")

    def stop(self) -> None:
        self._stop.set()
        t = self._thread
        if t is not None and t is not threading.current_thread():
            t.join(timeout=1.0)
