"""Item accumulation with pluggable flush triggers.

A Batcher collects items one push at a time and hands them out as a single
ordered batch when flushed. It is a small event source with a buffer
attached: "push" fires after every append and "flush" fires with each
released batch. The flush policies are themselves plain subscribers to
those events, so user handlers and policies compose in subscription order.

Example::

    batcher = Batcher.create("metrics").flush_at_size(100)
    batcher.on("flush", lambda batch: client.write_many(batch))
    for point in points:
        batcher.push(point)
    batcher.flush()  # release the tail
"""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from happybatcher.core.alarm import TIMEOUT, Alarm
from happybatcher.core.emitter import EventEmitter
from happybatcher.core.scheduler import AsyncioScheduler, Scheduler

if TYPE_CHECKING:
    from happybatcher.config import BatcherConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

Batch = tuple[T, ...]
"""An ordered, immutable snapshot of flushed items."""

PUSH = "push"
FLUSH = "flush"


@dataclass(frozen=True)
class BatcherStats:
    """Snapshot of batcher counters."""

    items_pushed: int = 0
    batches_flushed: int = 0
    items_flushed: int = 0
    empty_flushes: int = 0


class Batcher(Generic[T]):
    """Ordered buffer that releases its contents as a batch on flush().

    flush() is unconditional: flushing an empty batcher emits an empty
    batch. The buffer is swapped out before "flush" handlers run, so a
    handler always sees the batcher already empty (or holding only items
    pushed by that handler).

    All configuration methods return the batcher and add an independent
    policy each time they are called; nothing is ever replaced.

    Not thread-safe. Push, flush and alarm callbacks must all run on one
    thread, such as an asyncio event loop.

    Args:
        name: Label used in log records and repr.
    """

    def __init__(self, name: str | None = None):
        self.name = name if name is not None else "batcher"
        self._items: list[T] = []
        self._emitter = EventEmitter((PUSH, FLUSH))
        self._alarms: list[Alarm] = []
        self._closed = False

        self._items_pushed = 0
        self._batches_flushed = 0
        self._items_flushed = 0
        self._empty_flushes = 0

    @classmethod
    def create(cls, name: str | None = None) -> Batcher[T]:
        """Return an empty batcher with no subscribers."""
        return cls(name)

    @classmethod
    def from_config(
        cls,
        config: BatcherConfig,
        *,
        name: str | None = None,
        scheduler: Scheduler | None = None,
    ) -> Batcher[T]:
        """Build a batcher with the policies described by ``config``."""
        batcher = cls.create(name)
        if config.flush_at_size is not None:
            batcher.flush_at_size(config.flush_at_size)
        if config.flush_interval_ms is not None:
            batcher.flush_at_least_every(
                config.flush_interval_ms,
                skip_empty=config.skip_empty,
                scheduler=scheduler,
            )
        return batcher

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._items

    def size(self) -> int:
        return len(self._items)

    def items(self) -> Batch[T]:
        """Snapshot of the items accumulated since the last flush.

        Each call copies the buffer into a new tuple, so reading it after
        every push costs O(n) per call. Use size() or is_empty() when the
        count is all that matters.
        """
        return tuple(self._items)

    def push(self, item: T) -> None:
        """Append ``item`` then notify "push" subscribers with it.

        Subscribers may flush before this returns. If one raises, the item
        stays in the buffer and the exception propagates.
        """
        self._items.append(item)
        self._items_pushed += 1
        self._emitter.emit(PUSH, item)

    def flush(self) -> None:
        """Release the buffer as a batch and notify "flush" subscribers."""
        batch = tuple(self._items)
        self._items = []

        self._batches_flushed += 1
        self._items_flushed += len(batch)
        if not batch:
            self._empty_flushes += 1
        logger.debug(
            "[%s] Flushing batch of %d item(s)",
            self.name,
            len(batch),
            extra={"batcher": self.name},
        )
        self._emitter.emit(FLUSH, batch)

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def on(self, event: str, handler: Callable[[Any], None]) -> Batcher[T]:
        """Subscribe to "push" (item payload) or "flush" (batch payload)."""
        self._emitter.on(event, handler)
        return self

    def off(self, event: str, handler: Callable[[Any], None]) -> Batcher[T]:
        self._emitter.off(event, handler)
        return self

    def listener_count(self, event: str) -> int:
        return self._emitter.listener_count(event)

    # ------------------------------------------------------------------
    # Flush policies
    # ------------------------------------------------------------------

    def flush_at_size(self, size: int) -> Batcher[T]:
        """Flush as soon as a push brings the buffer to ``size`` items.

        A size of 1 flushes after every push.

        Raises:
            TypeError: If ``size`` is not an int.
            ValueError: If ``size`` is less than 1.
        """
        if isinstance(size, bool) or not isinstance(size, int):
            raise TypeError(f"size must be an int, got {type(size).__name__}")
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        logger.debug("[%s] Flushing at size %d", self.name, size)
        return self.flush_when_true(lambda batcher: batcher.size() >= size)

    def flush_when_true(self, predicate: Callable[[Batcher[T]], bool]) -> Batcher[T]:
        """Flush after any push for which ``predicate(self)`` is true.

        The predicate runs once per push, after the append. It may keep its
        own state but must not mutate the batcher.
        """
        if not callable(predicate):
            raise TypeError(f"predicate must be callable, got {type(predicate).__name__}")

        def flush_if_true(_item: T) -> None:
            if predicate(self):
                self.flush()

        self._emitter.on(PUSH, flush_if_true)
        return self

    def flush_at_least_every(
        self,
        interval_ms: float,
        *,
        skip_empty: bool = False,
        scheduler: Scheduler | None = None,
    ) -> Batcher[T]:
        """Guarantee a flush at least once per ``interval_ms``.

        An alarm counts down from the last flush, whatever triggered it.
        When it expires the batcher flushes. With ``skip_empty`` an empty
        buffer is left alone and the countdown simply starts over.

        The alarm only holds a weak reference to the batcher and is stopped
        once the batcher is garbage collected; call close() to stop it
        earlier.

        Args:
            interval_ms: Maximum time between flushes, in milliseconds.
            skip_empty: Skip timer flushes while the buffer is empty.
            scheduler: Timer backend. Defaults to an AsyncioScheduler on the
                running event loop.

        Raises:
            RuntimeError: If the batcher is closed, or no scheduler was given
                and no event loop is running.
            TypeError: If ``interval_ms`` is not a number.
            ValueError: If ``interval_ms`` is not positive and finite.
        """
        if self._closed:
            raise RuntimeError(f"Batcher {self.name} is closed")
        if scheduler is None:
            scheduler = AsyncioScheduler()
        alarm = Alarm(interval_ms, scheduler)
        batcher_ref = weakref.ref(self)

        def on_timeout(expired: Alarm) -> None:
            batcher = batcher_ref()
            if batcher is None:
                expired.stop()
                return
            if skip_empty and batcher.is_empty():
                expired.restart()
                return
            batcher.flush()

        def rearm(_batch: Batch[T]) -> None:
            if not self._closed:
                alarm.restart()

        # Nothing is attached to the batcher until the alarm is running.
        alarm.on(TIMEOUT, on_timeout)
        alarm.start()
        self._emitter.on(FLUSH, rearm)
        self._alarms.append(alarm)
        weakref.finalize(self, alarm.stop)

        logger.debug(
            "[%s] Flushing at least every %gms (skip_empty=%s)",
            self.name,
            interval_ms,
            skip_empty,
        )
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def alarms(self) -> tuple[Alarm, ...]:
        """Alarms created by flush_at_least_every(), in creation order."""
        return tuple(self._alarms)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop every periodic alarm.

        Pending items are not flushed and subscribers stay attached, so the
        batcher keeps working with manual, size and predicate flushes.
        """
        if self._closed:
            return
        self._closed = True
        for alarm in self._alarms:
            alarm.stop()
        logger.debug("[%s] Closed", self.name)

    @property
    def stats(self) -> BatcherStats:
        return BatcherStats(
            items_pushed=self._items_pushed,
            batches_flushed=self._batches_flushed,
            items_flushed=self._items_flushed,
            empty_flushes=self._empty_flushes,
        )

    def __repr__(self) -> str:
        return f"Batcher({self.name!r}, size={len(self._items)})"
