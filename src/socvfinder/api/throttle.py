"""Start-to-start spacing for calls to a rate-limited service.

The throttle owns the lock that serializes callers. Whoever holds a slot
is the only caller waiting or in flight; the next caller cannot begin its
own wait until the slot is released.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from socvfinder.contracts.protocols import Notifier
from socvfinder.core.logging import get_logger

logger = get_logger(__name__)


class Throttle:
    """Thread-safe minimum-interval gate.

    Usage:
        throttle = Throttle(interval_ms=1000)

        with throttle.slot(notifier):
            response = call_api()  # still inside the critical section
    """

    def __init__(
        self,
        interval_ms: int,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize throttle.

        Args:
            interval_ms: Minimum milliseconds between two call starts
            clock: Monotonic clock in seconds (injectable for tests)
        """
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        self._interval = interval_ms / 1000.0
        self._clock = clock
        self._lock = threading.Lock()
        self._wake = threading.Event()
        self._last_call_start: float | None = None

    @property
    def interval_ms(self) -> int:
        return round(self._interval * 1000)

    @property
    def last_call_start(self) -> float | None:
        """Clock value of the most recent call start, None before the first."""
        return self._last_call_start

    @contextmanager
    def slot(self, notifier: Notifier | None = None) -> Iterator[float]:
        """Hold the critical section for one call.

        Waits out the rest of the interval, records the call start and
        yields it. The lock is held until the ``with`` block exits.

        Args:
            notifier: Told how long the wait will be, before waiting
        """
        with self._lock:
            self._wait_turn(notifier)
            self._last_call_start = self._clock()
            yield self._last_call_start

    def interrupt(self) -> None:
        """Wake a caller blocked in its wait.

        The woken caller logs the early wake and waits out the remainder;
        spacing is never shortened.
        """
        self._wake.set()

    def time_to_wait(self) -> float:
        """Seconds until the next call may start (<= 0 means now)."""
        if self._last_call_start is None:
            return 0.0
        return self._interval - (self._clock() - self._last_call_start)

    def _wait_turn(self, notifier: Notifier | None) -> None:
        remaining = self.time_to_wait()
        logger.debug("throttle_check", time_to_wait_ms=round(remaining * 1000))
        if remaining <= 0:
            return

        wait_ms = round(remaining * 1000)
        if notifier is not None:
            notifier.message(f"Throttle for {wait_ms} ms to not upset SO")

        while remaining > 0:
            self._wake.clear()
            if self._wake.wait(remaining):
                logger.warning(
                    "throttle_spurious_wake",
                    remaining_ms=round(self.time_to_wait() * 1000),
                )
            remaining = self.time_to_wait()
