from __future__ import annotations

import threading

from src.attendance_link.attendance_link.link.clock import ClockTicker


def test_ticker_calls_back_until_stopped():
    ticked = threading.Event()
    ticker = ClockTicker(0.01, ticked.set)

    ticker.start()
    try:
        assert ticked.wait(2.0)
        assert ticker.running
    finally:
        ticker.stop()

    assert not ticker.running


def test_failing_tick_keeps_the_loop_alive():
    calls = []
    done = threading.Event()

    def on_tick():
        calls.append(1)
        if len(calls) >= 2:
            done.set()
        raise RuntimeError("render failed")

    ticker = ClockTicker(0.01, on_tick)
    ticker.start()
    try:
        assert done.wait(2.0)
    finally:
        ticker.stop()


def test_stop_without_start_is_harmless():
    ticker = ClockTicker(60, lambda: None)
    ticker.stop()
    assert not ticker.running
