"""Grid world and robot runtime state."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from karel.sim.contracts import (
    CellSnapshot,
    Orientation,
    PositionAndOrientation,
    RobotError,
    WorldSnapshot,
    WorldSpec,
)

DEFAULT_DIMENSION = 10
INFINITE_BAG = math.inf


@dataclass
class Cell:
    beepers: int = 0
    walls: set[Orientation] = field(default_factory=set)

    def has_wall(self, side: Orientation) -> bool:
        return side in self.walls

    def add_wall(self, side: Orientation) -> None:
        self.walls.add(side)

    def remove_wall(self, side: Orientation) -> None:
        self.walls.discard(side)

    def has_north_wall(self) -> bool:
        return self.has_wall(Orientation.NORTH)

    def has_east_wall(self) -> bool:
        return self.has_wall(Orientation.EAST)

    def has_south_wall(self) -> bool:
        return self.has_wall(Orientation.SOUTH)

    def has_west_wall(self) -> bool:
        return self.has_wall(Orientation.WEST)


@dataclass
class World:
    """Rectangular grid indexed as grid[x][y] in internal coordinates.

    Internal (0, 0) is the top-left cell; user (1, 1) is the bottom-left one.
    """

    width: int
    height: int
    grid: list[list[Cell]]

    @classmethod
    def empty(cls, width: int, height: int) -> "World":
        grid = [[Cell() for _ in range(height)] for _ in range(width)]
        return cls(width=width, height=height, grid=grid)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the world")
        return self.grid[x][y]

    def user_to_internal(self, x: int, y: int) -> tuple[int, int]:
        return x - 1, self.height - y

    def internal_to_user(self, x: int, y: int) -> tuple[int, int]:
        return x + 1, self.height - y


@dataclass
class RobotState:
    x: int = 0
    y: int = 0
    orientation: Orientation = Orientation.EAST
    bag: int | float = INFINITE_BAG
    error: RobotError = RobotError.NONE
    initialized: bool = False
    finished: bool = False
    speed: float = 1.0
    prompt_between_actions: bool = False
    csv_output: bool = False

    @property
    def has_infinite_bag(self) -> bool:
        return math.isinf(self.bag)


def build_default_spec() -> WorldSpec:
    return WorldSpec(
        width=DEFAULT_DIMENSION,
        height=DEFAULT_DIMENSION,
        karel=PositionAndOrientation(x=1, y=1, orientation=Orientation.EAST),
        bag=None,
    )


def build_world(spec: WorldSpec) -> tuple[World, RobotState]:
    """Build a fresh world and initial robot state from a validated spec."""
    world = World.empty(spec.width, spec.height)
    for wall in spec.walls:
        world.cell(*world.user_to_internal(wall.x, wall.y)).add_wall(wall.side)
    for beeper in spec.beepers:
        world.cell(*world.user_to_internal(beeper.x, beeper.y)).beepers = beeper.count

    x, y = world.user_to_internal(spec.karel.x, spec.karel.y)
    robot = RobotState(
        x=x,
        y=y,
        orientation=spec.karel.orientation,
        bag=INFINITE_BAG if spec.bag is None else spec.bag,
        speed=spec.speed,
    )
    return world, robot


def snapshot_state(world: World, robot: RobotState) -> WorldSnapshot:
    cells: list[CellSnapshot] = []
    for user_y in range(1, world.height + 1):
        for user_x in range(1, world.width + 1):
            cell = world.cell(*world.user_to_internal(user_x, user_y))
            cells.append(
                CellSnapshot(
                    x=user_x,
                    y=user_y,
                    beepers=cell.beepers,
                    walls=frozenset(cell.walls),
                )
            )
    user_x, user_y = world.internal_to_user(robot.x, robot.y)
    return WorldSnapshot(
        width=world.width,
        height=world.height,
        karel=PositionAndOrientation(
            x=user_x, y=user_y, orientation=robot.orientation
        ),
        bag=None if robot.has_infinite_bag else int(robot.bag),
        speed=robot.speed,
        error=robot.error,
        finished=robot.finished,
        cells=cells,
    )
