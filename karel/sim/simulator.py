"""Karel's simulator: lifecycle, commands, predicates and state getters."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from rich.console import Console

from karel.db.csv_snapshot import CSV_FILE_NAME, write_world_csv
from karel.render.base import NullRenderer, Renderer
from karel.render.painter import WorldPainter, new_canvas
from karel.render.prompt import Prompter
from karel.sim.contracts import MIN_SPEED, Orientation, RobotError, WorldSnapshot
from karel.sim.world_loader import load_world_spec
from karel.sim.world_state import (
    Cell,
    RobotState,
    World,
    build_default_spec,
    build_world,
    snapshot_state,
)

logger = logging.getLogger(__name__)


class SimulatorState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    READY = "READY"
    FINISHED = "FINISHED"


class Simulator:
    """One robot in one world.

    Commands are no-ops once the robot has finished. A failed precondition
    latches an error and finishes the robot instead of raising; only world
    file errors escape, from `initialize`.
    """

    def __init__(
        self,
        *,
        renderer: Renderer | None = None,
        prompter: Prompter | None = None,
        csv_path: Path | str | None = None,
        speed_override: float | None = None,
        error_console: Console | None = None,
    ) -> None:
        self._renderer: Renderer = renderer or NullRenderer()
        self._prompter = prompter or Prompter()
        self._csv_path = Path(csv_path) if csv_path else Path(CSV_FILE_NAME)
        self._speed_override = speed_override
        self._error_console = error_console or Console(stderr=True)
        self._world: World | None = None
        self._robot = RobotState()

    # Lifecycle.

    def initialize(self, path: Path | str | None = None, *, force: bool = False) -> None:
        """Load a world file, or the default world when `path` is empty.

        Only the first call has an effect unless `force` is set, which resets
        every mutable field and rebuilds the grid.
        """
        if self._robot.initialized and not force:
            logger.debug("Simulator already initialized; ignoring %s", path or "default world")
            return
        spec = load_world_spec(path) if path else build_default_spec()
        world, robot = build_world(spec)
        if not force:
            robot.prompt_between_actions = self._robot.prompt_between_actions
            robot.csv_output = self._robot.csv_output
        if self._speed_override is not None:
            robot.speed = max(self._speed_override, MIN_SPEED)
        robot.initialized = True
        self._world = world
        self._robot = robot
        logger.info(
            "Initialized %dx%d world with Karel at (%d, %d) facing %s",
            world.width,
            world.height,
            self.x_position,
            self.y_position,
            robot.orientation.value,
        )
        self._show(long_duration=True)

    def ensure_initialized(self) -> None:
        if not self._robot.initialized:
            self.initialize()

    @property
    def state(self) -> SimulatorState:
        if not self._robot.initialized:
            return SimulatorState.UNINITIALIZED
        if self._robot.finished:
            return SimulatorState.FINISHED
        return SimulatorState.READY

    # Commands.

    def move(self) -> None:
        if not self._begin_command():
            return
        robot = self._robot
        orientation = robot.orientation
        if not self.direction_is_clear(orientation):
            self._fail(RobotError.cannot_move(orientation))
            return
        dx, dy = orientation.delta
        start = (robot.x, robot.y)
        end = (robot.x + dx, robot.y + dy)
        self._renderer.animate_move(self.snapshot(), start, end)
        robot.x, robot.y = end
        logger.debug("Moved %s to internal %s", orientation.value, end)
        self._show(long_duration=True)

    def turn_left(self) -> None:
        if not self._begin_command():
            return
        self._robot.orientation = self._robot.orientation.turned_left()
        self._show(long_duration=True)

    def put_beeper(self) -> None:
        if not self._begin_command():
            return
        robot = self._robot
        if not self.has_beepers_in_bag():
            self._fail(RobotError.CANNOT_PUT_BEEPER)
            return
        if not robot.has_infinite_bag:
            robot.bag -= 1
        self._current_cell().beepers += 1
        self._show(long_duration=True)

    def pick_beeper(self) -> None:
        if not self._begin_command():
            return
        robot = self._robot
        if not self.beepers_present():
            self._fail(RobotError.CANNOT_PICK_BEEPER)
            return
        self._current_cell().beepers -= 1
        if not robot.has_infinite_bag:
            robot.bag += 1
        self._show(long_duration=True)

    def finish(self) -> None:
        self.ensure_initialized()
        if self._robot.finished:
            return
        self._robot.finished = True
        logger.info("Finished with error state %s", self._robot.error.value)
        if self._robot.csv_output:
            self._write_csv()
        self._renderer.close()

    def enable_prompt_before_action(self) -> None:
        self._robot.prompt_between_actions = True

    def enable_csv_output(self) -> None:
        self._robot.csv_output = True
        self._robot.prompt_between_actions = True

    # Predicates.

    def direction_is_clear(self, orientation: Orientation) -> bool:
        """True when Karel could step one cell toward `orientation`.

        A wall blocks whether it is recorded on this cell or on the
        neighbour's opposite side; the grid edge always blocks.
        """
        self.ensure_initialized()
        world = self._require_world()
        dx, dy = orientation.delta
        x, y = self._robot.x, self._robot.y
        if not world.in_bounds(x + dx, y + dy):
            return False
        if world.cell(x, y).has_wall(orientation):
            return False
        return not world.cell(x + dx, y + dy).has_wall(orientation.opposite())

    def front_is_clear(self) -> bool:
        self.ensure_initialized()
        return self.direction_is_clear(self._robot.orientation)

    def front_is_blocked(self) -> bool:
        return not self.front_is_clear()

    def left_is_clear(self) -> bool:
        self.ensure_initialized()
        return self.direction_is_clear(self._robot.orientation.turned_left())

    def left_is_blocked(self) -> bool:
        return not self.left_is_clear()

    def right_is_clear(self) -> bool:
        self.ensure_initialized()
        return self.direction_is_clear(self._robot.orientation.turned_right())

    def right_is_blocked(self) -> bool:
        return not self.right_is_clear()

    def has_beepers_in_bag(self) -> bool:
        self.ensure_initialized()
        return self._robot.bag > 0

    def no_beepers_in_bag(self) -> bool:
        return not self.has_beepers_in_bag()

    def beepers_present(self) -> bool:
        self.ensure_initialized()
        return self._current_cell().beepers > 0

    def no_beepers_present(self) -> bool:
        return not self.beepers_present()

    def facing_north(self) -> bool:
        return self._facing(Orientation.NORTH)

    def not_facing_north(self) -> bool:
        return not self.facing_north()

    def facing_east(self) -> bool:
        return self._facing(Orientation.EAST)

    def not_facing_east(self) -> bool:
        return not self.facing_east()

    def facing_south(self) -> bool:
        return self._facing(Orientation.SOUTH)

    def not_facing_south(self) -> bool:
        return not self.facing_south()

    def facing_west(self) -> bool:
        return self._facing(Orientation.WEST)

    def not_facing_west(self) -> bool:
        return not self.facing_west()

    # Getters, in user coordinates.

    @property
    def orientation(self) -> Orientation:
        self.ensure_initialized()
        return self._robot.orientation

    @property
    def x_position(self) -> int:
        self.ensure_initialized()
        return self._robot.x + 1

    @property
    def y_position(self) -> int:
        self.ensure_initialized()
        return self._require_world().height - self._robot.y

    @property
    def beepers_in_bag(self) -> int | float:
        self.ensure_initialized()
        return self._robot.bag

    @property
    def world_width(self) -> int:
        self.ensure_initialized()
        return self._require_world().width

    @property
    def world_height(self) -> int:
        self.ensure_initialized()
        return self._require_world().height

    @property
    def error(self) -> RobotError:
        return self._robot.error

    @property
    def finished(self) -> bool:
        return self._robot.finished

    @property
    def speed(self) -> float:
        self.ensure_initialized()
        return self._robot.speed

    @property
    def prompt_between_actions(self) -> bool:
        return self._robot.prompt_between_actions

    @property
    def csv_output(self) -> bool:
        return self._robot.csv_output

    @property
    def csv_path(self) -> Path:
        return self._csv_path

    def cell(self, x: int, y: int) -> Cell:
        self.ensure_initialized()
        world = self._require_world()
        return world.cell(*world.user_to_internal(x, y))

    def snapshot(self) -> WorldSnapshot:
        self.ensure_initialized()
        return snapshot_state(self._require_world(), self._robot)

    def save_world_bmp(self, path: Path | str) -> Path:
        snapshot = self.snapshot()
        canvas = new_canvas(snapshot)
        WorldPainter(canvas).paint(snapshot)
        path = Path(path)
        canvas.save_bmp(path)
        logger.info("Saved world image to %s", path)
        return path

    # Internals.

    def _begin_command(self) -> bool:
        self.ensure_initialized()
        if self._robot.finished:
            return False
        if self._robot.prompt_between_actions:
            self._prompter.wait()
        return True

    def _show(self, *, long_duration: bool) -> None:
        if self._robot.finished:
            return
        self._renderer.show(self.snapshot(), long_duration=long_duration)
        if long_duration and self._robot.csv_output:
            self._write_csv()

    def _fail(self, error: RobotError) -> None:
        self._robot.error = error
        message = error.message.replace("\n", " ")
        logger.debug("Command failed: %s", error.value)
        self._error_console.print(f"Error: {message}", markup=False, highlight=False)
        self._renderer.show_error(self.snapshot(), error)
        self.finish()

    def _write_csv(self) -> None:
        write_world_csv(self._csv_path, self.snapshot())

    def _facing(self, orientation: Orientation) -> bool:
        self.ensure_initialized()
        return self._robot.orientation == orientation

    def _current_cell(self) -> Cell:
        return self._require_world().cell(self._robot.x, self._robot.y)

    def _require_world(self) -> World:
        if self._world is None:
            raise RuntimeError("Simulator has no world; call initialize() first")
        return self._world
