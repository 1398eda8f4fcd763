"""Points in time for scheduling.

Instants are stored as integer nanoseconds so that repeated interval
arithmetic never accumulates floating point error.
"""

from __future__ import annotations

from typing import Union

_NANOS_PER_SECOND = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000


class Instant:
    """An immutable point in time, measured from an arbitrary epoch.

    Adding or subtracting a plain number treats it as seconds. Subtracting
    one instant from another yields the gap as an Instant.
    """

    __slots__ = ("_nanoseconds",)

    Epoch: Instant

    def __init__(self, nanoseconds: int):
        self._nanoseconds = int(nanoseconds)

    @property
    def nanoseconds(self) -> int:
        return self._nanoseconds

    @classmethod
    def from_seconds(cls, seconds: float) -> Instant:
        return cls(round(seconds * _NANOS_PER_SECOND))

    @classmethod
    def from_millis(cls, millis: float) -> Instant:
        return cls(round(millis * _NANOS_PER_MILLI))

    def to_seconds(self) -> float:
        return self._nanoseconds / _NANOS_PER_SECOND

    def to_millis(self) -> float:
        return self._nanoseconds / _NANOS_PER_MILLI

    def __add__(self, other: Union[Instant, int, float]) -> Instant:
        if isinstance(other, Instant):
            return Instant(self._nanoseconds + other._nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self._nanoseconds + round(other * _NANOS_PER_SECOND))
        return NotImplemented

    def __sub__(self, other: Union[Instant, int, float]) -> Instant:
        if isinstance(other, Instant):
            return Instant(self._nanoseconds - other._nanoseconds)
        if isinstance(other, (int, float)):
            return Instant(self._nanoseconds - round(other * _NANOS_PER_SECOND))
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanoseconds == other._nanoseconds

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanoseconds < other._nanoseconds

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanoseconds <= other._nanoseconds

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanoseconds > other._nanoseconds

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._nanoseconds >= other._nanoseconds

    def __hash__(self) -> int:
        return hash(self._nanoseconds)

    def __repr__(self) -> str:
        return f"Instant({self.to_millis():g}ms)"


Instant.Epoch = Instant(0)
