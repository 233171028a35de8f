"""Tests for the single-shot idle timer."""

import asyncio

import pytest

from loyalty.core.timer import IdleTimer


class TestArm:
    """Tests for arming and firing."""

    @pytest.mark.asyncio
    async def test_fires_once_after_duration(self):
        """Test that the callback runs once after the delay."""
        fired = []
        timer = IdleTimer()
        timer.arm(0.02, lambda: fired.append(1))

        assert timer.is_armed
        await asyncio.sleep(0.08)

        assert fired == [1]
        assert not timer.is_armed

    @pytest.mark.asyncio
    async def test_rearm_replaces_previous_deadline(self):
        """Test that arming again cancels the earlier callback."""
        fired = []
        timer = IdleTimer()
        timer.arm(0.02, lambda: fired.append("first"))
        timer.arm(0.05, lambda: fired.append("second"))

        await asyncio.sleep(0.1)

        assert fired == ["second"]

    @pytest.mark.asyncio
    async def test_rearm_restarts_with_last_callback(self):
        """Test that rearm pushes the deadline out with the same callback."""
        fired = []
        timer = IdleTimer()
        timer.arm(0.1, lambda: fired.append(1))
        await asyncio.sleep(0.06)
        assert timer.rearm()
        await asyncio.sleep(0.06)

        assert fired == []
        await asyncio.sleep(0.1)
        assert fired == [1]

    def test_rearm_without_arm_is_noop(self):
        """Test that rearm before any arm reports False."""
        assert IdleTimer().rearm() is False

    @pytest.mark.asyncio
    async def test_negative_duration_rejected(self):
        """Test that negative durations raise ValueError."""
        with pytest.raises(ValueError):
            IdleTimer().arm(-1, lambda: None)

    @pytest.mark.asyncio
    async def test_remaining_counts_down(self):
        """Test deadline and remaining time reporting."""
        timer = IdleTimer()
        assert timer.deadline is None
        assert timer.remaining is None

        timer.arm(10, lambda: None)
        assert timer.deadline is not None
        assert 9 < timer.remaining <= 10
        timer.cancel()


class TestCancel:
    """Tests for cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_before_deadline_prevents_callback(self):
        """Test that cancel issued before expiry always wins."""
        fired = []
        timer = IdleTimer()
        timer.arm(0.02, lambda: fired.append(1))
        timer.cancel()

        await asyncio.sleep(0.06)

        assert fired == []
        assert not timer.is_armed

    @pytest.mark.asyncio
    async def test_cancel_wins_against_already_dequeued_handle(self):
        """Test that a stale handle does nothing once its generation is cancelled."""
        fired = []
        timer = IdleTimer()
        timer.arm(0, lambda: fired.append(1))
        stale_generation = timer._generation
        timer.cancel()

        # Simulate the loop running the old handle after cancellation
        timer._fire(stale_generation)
        await asyncio.sleep(0.01)

        assert fired == []

    @pytest.mark.asyncio
    async def test_callback_error_is_contained(self):
        """Test that an exception from the callback does not break the timer."""

        def boom():
            raise RuntimeError("boom")

        timer = IdleTimer()
        timer.arm(0, boom)
        await asyncio.sleep(0.01)

        fired = []
        timer.arm(0, lambda: fired.append(1))
        await asyncio.sleep(0.01)
        assert fired == [1]
