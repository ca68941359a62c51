import threading
import time

import pytest

from src.services.timer import SystemClock, ThreadingTicker


def test_system_clock_is_monotonic():
    clock = SystemClock()
    a = clock.now()
    assert clock.now() >= a


def test_ticker_fires_repeatedly_until_cancelled():
    fired = []
    enough = threading.Event()

    def on_tick():
        fired.append(1)
        if len(fired) >= 3:
            enough.set()

    ticker = ThreadingTicker(0.01)
    ticker.start(on_tick)
    assert ticker.active
    assert enough.wait(2)
    ticker.cancel()
    count = len(fired)
    time.sleep(0.05)
    assert len(fired) == count
    assert not ticker.active


def test_cancel_is_idempotent_and_safe_before_start():
    ticker = ThreadingTicker(0.01)
    ticker.cancel()
    ticker.cancel()
    assert not ticker.active


def test_cannot_start_twice():
    ticker = ThreadingTicker(5)
    ticker.start(lambda: None)
    try:
        with pytest.raises(RuntimeError):
            ticker.start(lambda: None)
    finally:
        ticker.cancel()


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ThreadingTicker(0)


def test_ticker_stops_itself_after_max_ticks():
    fired = []
    ticker = ThreadingTicker(0.01, max_ticks=2)
    ticker.start(lambda: fired.append(1))
    deadline = time.monotonic() + 2
    while ticker.active and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.05)
    assert fired == [1, 1]
    assert ticker.ticks == 2
    assert not ticker.active
    ticker.cancel()


def test_max_ticks_must_be_positive():
    with pytest.raises(ValueError):
        ThreadingTicker(1, max_ticks=0)
