"""
Tests for the CountdownTimer.

Run with: pytest -q
"""
import asyncio

import pytest

from relay_sequencer.execution.timer import CountdownTimer


class TestCountdownTimer:

    @pytest.mark.asyncio
    async def test_ticks_down_to_zero(self):
        ticks = []
        timer = CountdownTimer(3, ticks.append, interval=0.0)

        timer.start()
        completed = await timer.wait()

        assert completed is True
        assert ticks == [2, 1, 0]
        assert timer.remaining == 0
        assert not timer.active

    @pytest.mark.asyncio
    async def test_zero_seconds_completes_without_ticks(self):
        ticks = []
        timer = CountdownTimer(0, ticks.append, interval=0.0)

        timer.start()

        assert await timer.wait() is True
        assert ticks == []

    @pytest.mark.asyncio
    async def test_cancel_stops_ticking(self):
        ticks = []
        timer = CountdownTimer(100, ticks.append, interval=60.0)
        timer.start()
        await asyncio.sleep(0)

        assert timer.cancel() is True
        assert await timer.wait() is False
        assert timer.cancelled
        assert ticks == []

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        timer = CountdownTimer(5, lambda remaining: None, interval=60.0)
        timer.start()

        assert timer.cancel() is True
        assert timer.cancel() is False
        assert timer.cancel() is False

    @pytest.mark.asyncio
    async def test_cancel_after_completion_has_no_effect(self):
        timer = CountdownTimer(1, lambda remaining: None, interval=0.0)
        timer.start()
        await timer.wait()

        assert timer.cancel() is False
        assert not timer.cancelled

    def test_cancel_before_start_has_no_effect(self):
        timer = CountdownTimer(5, lambda remaining: None)
        assert timer.cancel() is False

    @pytest.mark.asyncio
    async def test_cannot_start_twice(self):
        timer = CountdownTimer(1, lambda remaining: None, interval=0.0)
        timer.start()

        with pytest.raises(RuntimeError):
            timer.start()

        await timer.wait()
