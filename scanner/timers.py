"""Admission control for outbound JSON-RPC requests.

The accumulator holds the total "virtual latency" reserved by requests that
have been admitted but not yet notionally completed. A caller reserves its
endpoint's latency budget and sleeps for whatever backlog was already there;
a ticker thread drains the backlog at 1 unit per millisecond.

This is deliberately not a token bucket. Bursts of reservations can over- or
under-shoot the target rate, and retry pacing depends on that shape.
"""

import threading
import time

TICK_SECONDS = 0.001


class DelayAccumulator:
    def __init__(self, tick_seconds: float = TICK_SECONDS):
        self._value = 0
        self._lock = threading.Lock()
        self._tick_seconds = tick_seconds
        self._thread: threading.Thread | None = None
        self._stopped = threading.Event()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def reserve(self, latency_ms: int) -> int:
        """Return the current backlog in ms and add ``latency_ms`` to it."""
        if latency_ms < 0:
            raise ValueError("latency budget must be non-negative")
        with self._lock:
            wait_ms = self._value
            self._value += latency_ms
        return wait_ms

    def tick(self) -> None:
        with self._lock:
            if self._value > 0:
                self._value -= 1

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._count_down, name="merter-delay", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout=1)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _count_down(self) -> None:
        while not self._stopped.is_set():
            self.tick()
            time.sleep(self._tick_seconds)


_shared: DelayAccumulator | None = None
_shared_lock = threading.Lock()


def shared_accumulator() -> DelayAccumulator:
    """Process-wide accumulator, started on first use."""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = DelayAccumulator()
            _shared.start()
        return _shared
