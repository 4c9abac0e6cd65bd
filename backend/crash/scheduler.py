"""
Timers for the round lifecycle.

Every scheduled callback is handed back as a Timer so the owner can
cancel it when it leaves the state that scheduled it. Two schedulers
share the interface: AsyncioScheduler for live play on an event loop,
ManualScheduler with a virtual clock for tests and headless simulation.
"""

import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


class Timer:
    def __init__(self, label: str = ""):
        self.label = label
        self.cancelled = False
        self._handle = None

    def cancel(self):
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def active(self) -> bool:
        return not self.cancelled

    def __repr__(self):
        state = "cancelled" if self.cancelled else "active"
        return f"<Timer {self.label or '?'} {state}>"


class Scheduler:
    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback, label: str = "") -> Timer:
        raise NotImplementedError

    def call_every(self, interval: float, callback, label: str = "") -> Timer:
        """callback(elapsed_seconds) runs every interval until the timer is cancelled."""
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    def __init__(self, loop=None):
        self.loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay, callback, label=""):
        timer = Timer(label)

        def fire():
            if timer.cancelled:
                return
            timer.cancelled = True
            timer._handle = None
            callback()

        timer._handle = self.loop.call_later(max(0.0, delay), fire)
        return timer

    def call_every(self, interval, callback, label=""):
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = Timer(label)
        last = self.loop.time()

        def fire():
            nonlocal last
            if timer.cancelled:
                return
            now = self.loop.time()
            elapsed, last = now - last, now
            # reschedule first so a callback may cancel its own timer
            timer._handle = self.loop.call_later(interval, fire)
            callback(elapsed)

        timer._handle = self.loop.call_later(interval, fire)
        return timer


class ManualScheduler(Scheduler):
    """Virtual clock. Nothing runs until advance() moves time forward."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue = []
        self._seq = itertools.count()

    def now(self):
        return self._now

    def _push(self, when, timer, fn):
        heapq.heappush(self._queue, (when, next(self._seq), timer, fn))

    def call_later(self, delay, callback, label=""):
        timer = Timer(label)

        def fire():
            timer.cancelled = True
            callback()

        self._push(self._now + max(0.0, delay), timer, fire)
        return timer

    def call_every(self, interval, callback, label=""):
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = Timer(label)
        state = {"last": self._now}

        def fire():
            elapsed, state["last"] = self._now - state["last"], self._now
            self._push(self._now + interval, timer, fire)
            callback(elapsed)

        self._push(self._now + interval, timer, fire)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer, _ in self._queue if not timer.cancelled)

    def advance(self, seconds: float):
        """Run every callback due within the next `seconds`, in time order."""
        deadline = self._now + seconds
        while self._queue and self._queue[0][0] <= deadline + 1e-12:
            when, _, timer, fn = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = max(self._now, when)
            fn()
        self._now = max(self._now, deadline)

    def run_until(self, predicate, step: float = 0.05, limit: float = 3600.0) -> bool:
        """Advance in steps until predicate() holds. Returns False on timeout."""
        waited = 0.0
        while not predicate():
            if waited >= limit:
                logger.warning("run_until gave up after %.1fs of virtual time", waited)
                return False
            self.advance(step)
            waited += step
        return True
