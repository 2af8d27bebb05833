"""Animate Karel's world in the terminal with rich.live."""

from __future__ import annotations

import logging
import time
from typing import Callable

from rich.console import Console, RenderableType
from rich.live import Live

from karel.render.closed_view import show_until_closed
from karel.render.painter import WorldPainter, cell_center, new_canvas
from karel.render.terminal import DEFAULT_COLUMNS_PER_CELL, render_frame
from karel.sim.contracts import RobotError, WorldSnapshot

logger = logging.getLogger(__name__)

# Milliseconds to hold a frame after each action.
LONG_DURATION_MS = 300
# Milliseconds per intermediate frame while moving.
SHORT_DURATION_MS = 30
DEFAULT_ANIMATION_STEPS = 10


class LiveRenderer:
    def __init__(
        self,
        *,
        console: Console | None = None,
        animation_steps: int = DEFAULT_ANIMATION_STEPS,
        columns_per_cell: int = DEFAULT_COLUMNS_PER_CELL,
        wait_on_close: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._console = console or Console()
        self._animation_steps = max(0, animation_steps)
        self._columns_per_cell = columns_per_cell
        self._wait_on_close = wait_on_close
        self._sleep = sleep
        self._live: Live | None = None
        self._last_frame: RenderableType | None = None

    def show(self, snapshot: WorldSnapshot, *, long_duration: bool = True) -> None:
        self._present(snapshot, None)
        self._hold(snapshot, LONG_DURATION_MS if long_duration else SHORT_DURATION_MS)

    def animate_move(
        self,
        snapshot: WorldSnapshot,
        start: tuple[int, int],
        end: tuple[int, int],
    ) -> None:
        steps = self._animation_steps
        for step in range(1, steps + 1):
            fraction = step / steps
            x = start[0] * (1 - fraction) + end[0] * fraction
            y = start[1] * (1 - fraction) + end[1] * fraction
            self._present(snapshot, cell_center(x, y))
            self._hold(snapshot, SHORT_DURATION_MS)

    def show_error(self, snapshot: WorldSnapshot, error: RobotError) -> None:
        logger.debug("Drawing error overlay: %s", error.value)
        self._present(snapshot, None)
        self._hold(snapshot, LONG_DURATION_MS)

    def close(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
        if self._wait_on_close and self._last_frame is not None:
            show_until_closed(self._last_frame)

    @property
    def last_frame(self) -> RenderableType | None:
        return self._last_frame

    def _present(
        self, snapshot: WorldSnapshot, robot_at: tuple[float, float] | None
    ) -> None:
        canvas = new_canvas(snapshot)
        WorldPainter(canvas).paint(snapshot, robot_at=robot_at)
        frame = render_frame(
            canvas, snapshot, columns_per_cell=self._columns_per_cell
        )
        self._last_frame = frame
        if self._live is None:
            self._live = Live(frame, console=self._console, auto_refresh=False)
            self._live.start()
        self._live.update(frame, refresh=True)

    def _hold(self, snapshot: WorldSnapshot, duration_ms: int) -> None:
        self._sleep(duration_ms / 1000 / snapshot.speed)
