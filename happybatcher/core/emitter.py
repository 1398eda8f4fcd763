"""Synchronous publish/subscribe channel.

EventEmitter is the notification mechanism shared by Batcher and Alarm.
Handlers run on the caller's thread, in registration order, and finish
before emit() returns. Nothing is queued and nothing is caught: an
exception raised by a handler stops the dispatch and propagates to
whoever called emit().
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

Handler = Callable[[Any], None]
"""Signature for subscribers: called with the event payload."""


class EventEmitter:
    """Ordered handler lists keyed by a fixed set of event names.

    Args:
        events: The event names this emitter accepts. Subscribing to or
            emitting any other name raises ValueError.
    """

    __slots__ = ("_handlers",)

    def __init__(self, events: Iterable[str]):
        self._handlers: dict[str, list[Handler]] = {name: [] for name in events}
        if not self._handlers:
            raise ValueError("EventEmitter needs at least one event name")

    @property
    def events(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def _handlers_for(self, event: str) -> list[Handler]:
        try:
            return self._handlers[event]
        except KeyError:
            raise ValueError(
                f"Unknown event {event!r}; expected one of {sorted(self._handlers)}"
            ) from None

    def on(self, event: str, handler: Handler) -> EventEmitter:
        """Register a handler for ``event``. Returns self for chaining.

        Registering the same handler twice makes it run twice per emit.
        """
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        self._handlers_for(event).append(handler)
        return self

    def off(self, event: str, handler: Handler) -> EventEmitter:
        """Remove the earliest registration of ``handler`` for ``event``."""
        handlers = self._handlers_for(event)
        try:
            handlers.remove(handler)
        except ValueError:
            raise ValueError(f"handler is not subscribed to {event!r}") from None
        return self

    def emit(self, event: str, payload: Any) -> None:
        """Call every handler for ``event`` with ``payload``, in order.

        Dispatch works on a snapshot of the handler list, so handlers added
        while dispatching only see later emits.
        """
        for handler in tuple(self._handlers_for(event)):
            handler(payload)

    def listener_count(self, event: str) -> int:
        return len(self._handlers_for(event))
