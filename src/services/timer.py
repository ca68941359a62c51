from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Protocol


class Clock(Protocol):
    def now(self) -> float: ...


class SystemClock:
    """Monotonic seconds; immune to wall-clock adjustments."""

    def now(self) -> float:
        return time.monotonic()


class Ticker(Protocol):
    """A cancellable periodic callback."""

    @property
    def active(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class ThreadingTicker:
    """
    Calls `callback` every `interval` seconds on a daemon timer thread.

    - `start` may be called once.
    - `cancel` is idempotent; once it returns, the callback will not run again.
    - With `max_ticks` set, the ticker stops by itself after that many calls,
      so an abandoned round does not keep a thread alive forever.
    """

    def __init__(self, interval: float = 1.0, max_ticks: Optional[int] = None) -> None:
        if interval <= 0:
            raise ValueError("`interval` must be > 0.")
        if max_ticks is not None and max_ticks < 1:
            raise ValueError("`max_ticks` must be >= 1.")
        self.interval = interval
        self.max_ticks = max_ticks
        self.ticks = 0
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._callback: Optional[Callable[[], None]] = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._callback is not None and not self._cancelled

    def start(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._callback is not None:
                raise RuntimeError("Ticker already started.")
            self._callback = callback
            self._arm()

    def _arm(self) -> None:
        timer = threading.Timer(self.interval, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        # The lock is held across the callback so cancel() waits for an
        # in-flight tick instead of racing it.
        with self._lock:
            if self._cancelled or self._callback is None:
                return
            self._callback()
            self.ticks += 1
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                self._cancelled = True
                self._timer = None
                return
            self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


__all__ = ["Clock", "SystemClock", "Ticker", "ThreadingTicker"]
