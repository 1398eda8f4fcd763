"""Restartable repeating alarm.

An Alarm counts down a fixed interval on a Scheduler and emits "timeout"
each time the interval elapses. It keeps repeating until stop() is called.
restart() throws away the current countdown and begins a full interval
from now, which is how periodic flushing gets pushed back whenever a
batch goes out early.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from happybatcher.core.emitter import EventEmitter
from happybatcher.core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

TIMEOUT = "timeout"


class Alarm:
    """Repeating countdown with start/restart/stop.

    Created stopped. On expiry the alarm re-arms itself for the next
    interval *before* notifying, so a handler that calls restart() or
    stop() has the final say.

    Args:
        interval_ms: Countdown length in milliseconds. Must be > 0.
        scheduler: Backend that runs the countdown.

    Raises:
        TypeError: If ``interval_ms`` is not a number.
        ValueError: If ``interval_ms`` is not positive and finite.
    """

    def __init__(self, interval_ms: float, scheduler: Scheduler):
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, (int, float)):
            raise TypeError(f"interval_ms must be a number, got {type(interval_ms).__name__}")
        if not math.isfinite(interval_ms) or interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0 and finite, got {interval_ms}")
        self._interval_ms = interval_ms
        self._scheduler = scheduler
        self._emitter = EventEmitter((TIMEOUT,))
        self._handle: TimerHandle | None = None
        self._timeouts = 0

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def timeouts(self) -> int:
        """How many times this alarm has expired."""
        return self._timeouts

    def on(self, event: str, handler: Callable[[Alarm], None]) -> Alarm:
        self._emitter.on(event, handler)
        return self

    def start(self) -> None:
        """Begin counting down. Does nothing if already running."""
        if self._handle is None:
            self._arm()
            logger.debug("Alarm started (%gms)", self._interval_ms)

    def restart(self) -> None:
        """Reset the countdown to a full interval, running or not."""
        self._cancel()
        self._arm()
        logger.debug("Alarm restarted (%gms)", self._interval_ms)

    def stop(self) -> None:
        if self._handle is not None:
            self._cancel()
            logger.debug("Alarm stopped (%gms)", self._interval_ms)

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._interval_ms, self._expire)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self) -> None:
        self._timeouts += 1
        self._arm()
        logger.debug("Alarm timeout #%d (%gms)", self._timeouts, self._interval_ms)
        self._emitter.emit(TIMEOUT, self)

    def __repr__(self) -> str:
        state = "running" if self.is_running else "stopped"
        return f"Alarm({self._interval_ms:g}ms, {state})"
