"""Unit tests for the frame loop."""

import asyncio

import numpy as np
import pytest

from conftest import FakeClock
from orrery.view import FrameLoop, GraphView


class TestFrameLoop:
    """Tests for FrameLoop."""

    def test_interval(self, view: GraphView) -> None:
        """Test tick interval from frame rate."""
        assert FrameLoop(view, frame_rate=50).interval == pytest.approx(0.02)

    def test_tick_updates_then_draws(self, view: GraphView, sample_entities, sample_relationships, clock: FakeClock) -> None:
        """Test a tick advances the transition and draws the new pose."""
        view.set_data(sample_entities, sample_relationships)
        view.focus_on_entity(2)
        loop = FrameLoop(view, clock=clock)

        loop.tick(clock.advance(1000))
        assert loop.frames == 1
        assert view.scene.frames_drawn == 1
        target, _ = view.scene.last_pose
        np.testing.assert_allclose(target, view.snapshot.position(2))

    @pytest.mark.asyncio
    async def test_run_max_frames(self, view: GraphView) -> None:
        """Test bounded run."""
        loop = FrameLoop(view, frame_rate=1000)
        ran = await loop.run(max_frames=5)
        assert ran == 5
        assert view.scene.frames_drawn == 5

    @pytest.mark.asyncio
    async def test_stop(self, view: GraphView) -> None:
        """Test stopping a running loop from another task."""
        loop = FrameLoop(view, frame_rate=1000)
        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.02)
        loop.stop()
        ran = await asyncio.wait_for(task, timeout=1.0)
        assert ran >= 1
        assert view.scene.frames_drawn == ran
