"""
Tests for the restartable interval timer.
"""

import asyncio
import pytest

from barberpro.utils.periodic_timer import PeriodicTimer


class TestPeriodicTimer:

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            PeriodicTimer(0, lambda: None)

    def test_start_requires_running_loop(self):
        timer = PeriodicTimer(1, lambda: None)
        with pytest.raises(RuntimeError):
            timer.start()
        assert not timer.is_running

    @pytest.mark.asyncio
    async def test_fires_immediately_then_periodically(self):
        calls = []
        timer = PeriodicTimer(0.01, lambda: calls.append(1))

        assert timer.start() is True
        await asyncio.sleep(0)
        assert len(calls) == 1

        await asyncio.sleep(0.05)
        timer.stop()
        assert len(calls) >= 3
        assert timer.tick_count == len(calls)

    @pytest.mark.asyncio
    async def test_delayed_first_tick(self):
        calls = []
        timer = PeriodicTimer(0.02, lambda: calls.append(1), fire_immediately=False)
        timer.start()
        await asyncio.sleep(0)
        assert calls == []
        await asyncio.sleep(0.03)
        timer.stop()
        assert len(calls) >= 1

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self):
        timer = PeriodicTimer(10, lambda: None)
        assert timer.start() is True
        assert timer.start() is False
        assert timer.stop() is True
        assert timer.stop() is False
        await asyncio.sleep(0)
        assert not timer.is_running

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        calls = []
        timer = PeriodicTimer(10, lambda: calls.append(1))
        timer.start()
        await asyncio.sleep(0)
        timer.stop()
        timer.start()
        await asyncio.sleep(0)
        timer.stop()
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_failing_callback_keeps_ticking(self):
        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("tick failed")

        timer = PeriodicTimer(0.01, flaky)
        timer.start()
        await asyncio.sleep(0.05)
        assert timer.is_running
        timer.stop()
        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_awaits_coroutine_callbacks(self):
        done = []

        async def work():
            await asyncio.sleep(0)
            done.append(1)

        timer = PeriodicTimer(10, work)
        timer.start()
        await asyncio.sleep(0.01)
        timer.stop()
        assert done == [1]
