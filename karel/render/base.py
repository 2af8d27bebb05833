"""Renderer interface consumed by the simulator."""

from __future__ import annotations

from typing import Protocol

from karel.sim.contracts import RobotError, WorldSnapshot


class Renderer(Protocol):
    def show(self, snapshot: WorldSnapshot, *, long_duration: bool = True) -> None:
        """Draw one frame and hold it for the short or long frame delay."""

    def animate_move(
        self,
        snapshot: WorldSnapshot,
        start: tuple[int, int],
        end: tuple[int, int],
    ) -> None:
        """Interpolate the robot between two internal-coordinate cells."""

    def show_error(self, snapshot: WorldSnapshot, error: RobotError) -> None:
        """Overlay an error message on the current frame."""

    def close(self) -> None:
        """Stop drawing; may block until the display is dismissed."""


class NullRenderer:
    """Renderer that draws nothing, for tests and headless runs."""

    def show(self, snapshot: WorldSnapshot, *, long_duration: bool = True) -> None:
        return None

    def animate_move(
        self,
        snapshot: WorldSnapshot,
        start: tuple[int, int],
        end: tuple[int, int],
    ) -> None:
        return None

    def show_error(self, snapshot: WorldSnapshot, error: RobotError) -> None:
        return None

    def close(self) -> None:
        return None
