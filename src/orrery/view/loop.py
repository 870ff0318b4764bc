"""Fixed-tick frame loop: update, then draw."""

import asyncio
import logging
from collections.abc import Callable

from orrery.config import settings
from orrery.view.camera import monotonic_ms
from orrery.view.graph_view import GraphView

logger = logging.getLogger(__name__)


class FrameLoop:
    """Drives a GraphView once per display refresh.

    Only ever reads the view's latest published snapshot; layout work is
    done by ``GraphView.set_data`` outside the loop.
    """

    def __init__(
        self,
        view: GraphView,
        frame_rate: float | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.view = view
        self.frame_rate = frame_rate or settings.frame_rate
        self.frames = 0
        self._clock = clock
        self._stop = asyncio.Event()

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return 1.0 / self.frame_rate

    def tick(self, now_ms: float | None = None) -> None:
        """Run one frame."""
        now_ms = now_ms if now_ms is not None else self._clock()
        self.view.update(now_ms)
        self.view.draw()
        self.frames += 1

    def stop(self) -> None:
        self._stop.set()

    async def run(self, max_frames: int | None = None) -> int:
        """Tick until stopped (or ``max_frames`` is reached); returns frames run."""
        self._stop.clear()
        started = self.frames
        logger.info(f"Frame loop started at {self.frame_rate:.0f} fps")

        while not self._stop.is_set():
            tick_started = self._clock()
            self.tick(tick_started)
            if max_frames is not None and self.frames - started >= max_frames:
                break
            elapsed = (self._clock() - tick_started) / 1000.0
            await asyncio.sleep(max(0.0, self.interval - elapsed))

        logger.info(f"Frame loop stopped after {self.frames - started} frames")
        return self.frames - started
