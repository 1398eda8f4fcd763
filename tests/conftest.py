"""
Shared pytest fixtures for happybatcher tests.
"""

import logging

import pytest

from happybatcher.core.scheduler import VirtualScheduler


@pytest.fixture
def scheduler() -> VirtualScheduler:
    """A fresh simulated-time scheduler starting at Instant.Epoch."""
    return VirtualScheduler()


@pytest.fixture
def flushed() -> list:
    """Collects batches; pass ``flushed.append`` as a "flush" handler."""
    return []


@pytest.fixture(autouse=True)
def reset_happybatcher_logging():
    """Reset logging state before and after each test.

    Leaves only a NullHandler on the package logger and resets its level to
    NOTSET, so one test's logging setup never leaks into the next.
    """
    logger = logging.getLogger("happybatcher")

    def reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    reset()
    yield
    reset()
