"""happybatcher: accumulate pushed items and release them as ordered batches.

The library is silent by default. Call one of the ``enable_*_logging``
helpers, or ``configure_from_env()``, to see what it is doing.
"""

import logging

from happybatcher.batcher import Batch, Batcher, BatcherStats
from happybatcher.config import BatcherConfig, load_config_from_env
from happybatcher.core import (
    Alarm,
    AsyncioScheduler,
    Clock,
    EventEmitter,
    Instant,
    Scheduler,
    VirtualScheduler,
)
from happybatcher.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Alarm",
    "AsyncioScheduler",
    "Batch",
    "Batcher",
    "BatcherConfig",
    "BatcherStats",
    "Clock",
    "EventEmitter",
    "Instant",
    "Scheduler",
    "VirtualScheduler",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "load_config_from_env",
    "set_level",
]
