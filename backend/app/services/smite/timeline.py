"""Delayed callbacks for the smite engine.

Both timelines expose ``call_later(delay_ms, fn, *args)``. Delays are in
milliseconds. Callbacks are never cancelled; they are expected to check
their own run id before acting.
"""

import heapq
import itertools
from typing import Any, Callable, List, Tuple


class SocketIOTimeline:
    """Runs each callback in a Socket.IO background task after sleeping."""

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay_ms: float, fn: Callable[..., Any], *args: Any) -> None:
        self.socketio.start_background_task(self._worker, max(0.0, delay_ms), fn, args)

    def _worker(self, delay_ms: float, fn, args) -> None:
        if delay_ms:
            self.socketio.sleep(delay_ms / 1000.0)
        fn(*args)


class ManualTimeline:
    """Virtual clock; nothing fires until ``advance`` or ``run_next`` is called.

    Callbacks due at the same instant run in scheduling order.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, Callable[..., Any], tuple]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, fn: Callable[..., Any], *args: Any) -> None:
        heapq.heappush(self._queue, (self.now + max(0.0, delay_ms), next(self._seq), fn, args))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next_due(self):
        return self._queue[0][0] if self._queue else None

    def run_next(self) -> bool:
        if not self._queue:
            return False
        due, _, fn, args = heapq.heappop(self._queue)
        self.now = max(self.now, due)
        fn(*args)
        return True

    def advance(self, ms: float) -> None:
        """Move the clock forward, running every callback due on the way."""
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            self.run_next()
        self.now = target

    def run_until_idle(self, limit: int = 10000) -> int:
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran
