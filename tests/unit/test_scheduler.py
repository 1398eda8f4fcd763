"""Unit tests for VirtualScheduler and AsyncioScheduler."""

import asyncio

import pytest

from happybatcher.core.scheduler import (
    AsyncioScheduler,
    Scheduler,
    TimerHandle,
    VirtualScheduler,
)
from happybatcher.core.temporal import Instant


class TestVirtualScheduler:
    def test_starts_at_epoch(self, scheduler):
        assert scheduler.now == Instant.Epoch
        assert scheduler.pending_count() == 0

    def test_runs_call_when_due(self, scheduler):
        calls = []
        scheduler.call_later(100, lambda: calls.append(scheduler.now))

        scheduler.advance(99)
        assert calls == []

        scheduler.advance(1)
        assert calls == [Instant.from_millis(100)]

    def test_clock_lands_on_target(self, scheduler):
        scheduler.call_later(10, lambda: None)
        ran = scheduler.advance(25)

        assert ran == 1
        assert scheduler.now == Instant.from_millis(25)

    def test_same_time_calls_run_fifo(self, scheduler):
        calls = []
        scheduler.call_later(50, lambda: calls.append("first"))
        scheduler.call_later(50, lambda: calls.append("second"))
        scheduler.call_later(20, lambda: calls.append("earliest"))

        scheduler.advance(50)

        assert calls == ["earliest", "first", "second"]

    def test_cancelled_call_is_skipped(self, scheduler):
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append("x"))
        handle.cancel()

        assert handle.cancelled
        assert scheduler.pending_count() == 0
        assert scheduler.advance(100) == 0
        assert calls == []

    def test_calls_scheduled_inside_window_also_run(self, scheduler):
        times = []

        def tick():
            times.append(scheduler.now.to_millis())
            scheduler.call_later(30, tick)

        scheduler.call_later(30, tick)
        scheduler.advance(100)

        assert times == [30.0, 60.0, 90.0]
        assert scheduler.pending_count() == 1

    def test_rejects_negative_values(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.advance(-1)
        with pytest.raises(ValueError):
            scheduler.call_later(-1, lambda: None)

        scheduler.advance(10)
        with pytest.raises(ValueError, match="backwards"):
            scheduler.advance_to(Instant.from_millis(5))

    def test_satisfies_protocols(self, scheduler):
        assert isinstance(scheduler, Scheduler)
        assert isinstance(scheduler.call_later(1, lambda: None), TimerHandle)


class TestAsyncioScheduler:
    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler()

    def test_runs_callback_on_loop(self):
        async def main():
            loop = asyncio.get_running_loop()
            scheduler = AsyncioScheduler()
            done = loop.create_future()
            scheduler.call_later(5, lambda: done.set_result("fired"))
            return await asyncio.wait_for(done, timeout=2)

        assert asyncio.run(main()) == "fired"

    def test_cancel(self):
        async def main():
            scheduler = AsyncioScheduler()
            calls = []
            handle = scheduler.call_later(5, lambda: calls.append(1))
            handle.cancel()
            await asyncio.sleep(0.05)
            return calls

        assert asyncio.run(main()) == []

    def test_explicit_loop(self):
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop)
            assert scheduler.loop is loop
            assert isinstance(scheduler, Scheduler)
        finally:
            loop.close()
