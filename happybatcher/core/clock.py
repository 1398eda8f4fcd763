"""Mutable holder for the current scheduler time."""

from happybatcher.core.temporal import Instant


class Clock:
    """Tracks "now" for a VirtualScheduler.

    Only the scheduler moves the clock; everything else reads it.
    """

    def __init__(self, start_time: Instant = Instant.Epoch):
        self._current_time = start_time

    @property
    def now(self) -> Instant:
        return self._current_time

    def update(self, time: Instant) -> None:
        self._current_time = time
