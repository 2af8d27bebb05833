"""Core data contracts for Karel's world."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_BEEPERS = 1_000_000
MAX_DIMENSION = 1_000
MIN_SPEED = 0.1


class Orientation(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @classmethod
    def parse(cls, token: str) -> "Orientation":
        try:
            return cls(token.lower())
        except ValueError as exc:
            raise ValueError(f"Unknown orientation {token}") from exc

    @property
    def clockwise_index(self) -> int:
        return _CLOCKWISE.index(self)

    @property
    def delta(self) -> tuple[int, int]:
        """Step in internal coordinates, where y grows downward."""
        return _DELTAS[self]

    def turned_left(self) -> "Orientation":
        return _CLOCKWISE[(self.clockwise_index - 1) % 4]

    def turned_right(self) -> "Orientation":
        return _CLOCKWISE[(self.clockwise_index + 1) % 4]

    def opposite(self) -> "Orientation":
        return _CLOCKWISE[(self.clockwise_index + 2) % 4]


_CLOCKWISE = (Orientation.NORTH, Orientation.EAST, Orientation.SOUTH, Orientation.WEST)
_DELTAS = {
    Orientation.NORTH: (0, -1),
    Orientation.EAST: (1, 0),
    Orientation.SOUTH: (0, 1),
    Orientation.WEST: (-1, 0),
}


class RobotError(str, Enum):
    NONE = "NONE"
    CANNOT_MOVE_NORTH = "CANNOT_MOVE_NORTH"
    CANNOT_MOVE_EAST = "CANNOT_MOVE_EAST"
    CANNOT_MOVE_SOUTH = "CANNOT_MOVE_SOUTH"
    CANNOT_MOVE_WEST = "CANNOT_MOVE_WEST"
    CANNOT_PUT_BEEPER = "CANNOT_PUT_BEEPER"
    CANNOT_PICK_BEEPER = "CANNOT_PICK_BEEPER"

    @classmethod
    def cannot_move(cls, orientation: Orientation) -> "RobotError":
        return _MOVE_ERRORS[orientation]

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_MOVE_ERRORS = {
    Orientation.NORTH: RobotError.CANNOT_MOVE_NORTH,
    Orientation.EAST: RobotError.CANNOT_MOVE_EAST,
    Orientation.SOUTH: RobotError.CANNOT_MOVE_SOUTH,
    Orientation.WEST: RobotError.CANNOT_MOVE_WEST,
}

_ERROR_MESSAGES = {
    RobotError.NONE: "",
    RobotError.CANNOT_MOVE_NORTH: "Cannot move north",
    RobotError.CANNOT_MOVE_EAST: "Cannot move east",
    RobotError.CANNOT_MOVE_SOUTH: "Cannot move south",
    RobotError.CANNOT_MOVE_WEST: "Cannot move west",
    RobotError.CANNOT_PUT_BEEPER: "Cannot put beeper\n(No beepers in bag)",
    RobotError.CANNOT_PICK_BEEPER: "Cannot pick beeper\n(No beepers present)",
}


class PositionAndOrientation(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    orientation: Orientation = Orientation.EAST


class WallSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    side: Orientation


class BeeperSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    count: int = Field(ge=0, le=MAX_BEEPERS)


class WorldSpec(BaseModel):
    """Declarative world description in user coordinates.

    `bag` is `None` for an infinite bag.
    """

    model_config = ConfigDict(extra="forbid")

    width: int = Field(ge=1, le=MAX_DIMENSION)
    height: int = Field(ge=1, le=MAX_DIMENSION)
    karel: PositionAndOrientation = PositionAndOrientation(x=1, y=1)
    bag: int | None = Field(default=0, ge=0, le=MAX_BEEPERS)
    speed: float = Field(default=1.0, gt=0)
    walls: list[WallSpec] = Field(default_factory=list)
    beepers: list[BeeperSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_positions(self) -> "WorldSpec":
        points = [(self.karel.x, self.karel.y)]
        points.extend((wall.x, wall.y) for wall in self.walls)
        points.extend((beeper.x, beeper.y) for beeper in self.beepers)
        for x, y in points:
            if not (1 <= x <= self.width and 1 <= y <= self.height):
                raise ValueError(
                    f"Position ({x}, {y}) is outside the "
                    f"{self.width}x{self.height} world"
                )
        return self


class CellSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    beepers: int
    walls: frozenset[Orientation] = frozenset()


class WorldSnapshot(BaseModel):
    """Observable state in user coordinates, consumed by presentation adapters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int
    height: int
    karel: PositionAndOrientation
    bag: int | None
    speed: float
    error: RobotError = RobotError.NONE
    finished: bool = False
    cells: list[CellSnapshot]

    def cell(self, x: int, y: int) -> CellSnapshot:
        return self.cells[(y - 1) * self.width + (x - 1)]
