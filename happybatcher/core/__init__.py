"""Collaborators the batcher is built on: events, time and alarms."""

from happybatcher.core.alarm import Alarm
from happybatcher.core.clock import Clock
from happybatcher.core.emitter import EventEmitter
from happybatcher.core.scheduler import (
    AsyncioScheduler,
    ScheduledCall,
    Scheduler,
    TimerHandle,
    VirtualScheduler,
)
from happybatcher.core.temporal import Instant

__all__ = [
    "Alarm",
    "AsyncioScheduler",
    "Clock",
    "EventEmitter",
    "Instant",
    "ScheduledCall",
    "Scheduler",
    "TimerHandle",
    "VirtualScheduler",
]
