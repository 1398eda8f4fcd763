"""Timer backends used by Alarm.

A Scheduler only has to do one thing: run a callback once after a delay
and hand back something that can cancel it. Two backends ship here:

- VirtualScheduler keeps its own clock and only moves when told to. Tests
  and offline replays drive it with advance().
- AsyncioScheduler delegates to an asyncio event loop, so callbacks run on
  the loop's thread alongside the code that pushes into batchers.
"""

from __future__ import annotations

import asyncio
import heapq
import logging
from itertools import count
from typing import Callable, Protocol, runtime_checkable

from happybatcher.core.clock import Clock
from happybatcher.core.temporal import Instant

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@runtime_checkable
class TimerHandle(Protocol):
    """A pending call that can be cancelled before it runs."""

    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    """Anything that can run a callback after a delay in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle: ...


class ScheduledCall:
    """Entry on the VirtualScheduler heap.

    Ordering uses (due time, insertion order) so calls due at the same
    instant run first-in, first-out.
    """

    __slots__ = ("time", "callback", "_sort_index", "_cancelled")

    def __init__(self, time: Instant, callback: Callback, sort_index: int):
        self.time = time
        self.callback = callback
        self._sort_index = sort_index
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Mark the call as cancelled. The scheduler skips it when popped."""
        self._cancelled = True

    def __lt__(self, other: ScheduledCall) -> bool:
        return (self.time, self._sort_index) < (other.time, other._sort_index)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "pending"
        return f"ScheduledCall({self.time!r}, {state})"


class VirtualScheduler:
    """Deterministic scheduler driven by simulated time.

    Time starts at ``Instant.Epoch`` and only moves through advance() or
    advance_to(). Every call due inside the advanced window runs, in due
    order, with the clock set to its due time; calls scheduled by those
    callbacks run too if they fall inside the window.

    Example::

        scheduler = VirtualScheduler()
        batcher = Batcher.create().flush_at_least_every(1000, scheduler=scheduler)
        batcher.push("a")
        scheduler.advance(1000)  # periodic flush fires here
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock if clock is not None else Clock()
        self._heap: list[ScheduledCall] = []
        self._counter = count()

    @property
    def now(self) -> Instant:
        return self._clock.now

    @property
    def clock(self) -> Clock:
        return self._clock

    def call_later(self, delay_ms: float, callback: Callback) -> ScheduledCall:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        call = ScheduledCall(
            self.now + Instant.from_millis(delay_ms), callback, next(self._counter)
        )
        heapq.heappush(self._heap, call)
        return call

    def pending_count(self) -> int:
        """Number of scheduled calls that are not cancelled."""
        return sum(1 for call in self._heap if not call.cancelled)

    def advance(self, ms: float) -> int:
        """Move time forward by ``ms`` milliseconds. Returns calls run."""
        if ms < 0:
            raise ValueError(f"Cannot advance by a negative amount: {ms}ms")
        return self.advance_to(self.now + Instant.from_millis(ms))

    def advance_to(self, target: Instant) -> int:
        """Move time forward to ``target``, running every call due on the way."""
        if target < self.now:
            raise ValueError(f"Cannot move time backwards from {self.now!r} to {target!r}")

        ran = 0
        while self._heap and self._heap[0].time <= target:
            call = heapq.heappop(self._heap)
            if call.cancelled:
                continue
            self._clock.update(call.time)
            call.callback()
            ran += 1

        self._clock.update(target)
        if ran:
            logger.debug("Advanced to %r, ran %d scheduled call(s)", target, ran)
        return ran


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Loop to schedule on. Defaults to the running loop, so creating
            one outside a coroutine without passing ``loop`` raises
            RuntimeError.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def call_later(self, delay_ms: float, callback: Callback) -> asyncio.TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        return self._loop.call_later(delay_ms / 1000.0, callback)
