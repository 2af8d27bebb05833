"""Simulation core and world model."""

from karel.sim.contracts import (
    CellSnapshot,
    Orientation,
    PositionAndOrientation,
    RobotError,
    WorldSnapshot,
    WorldSpec,
)
from karel.sim.world_loader import (
    InvalidWorldFile,
    load_world,
    load_world_spec,
    parse_world_text,
)
from karel.sim.world_state import (
    INFINITE_BAG,
    Cell,
    RobotState,
    World,
    build_default_spec,
    build_world,
)

__all__ = [
    "INFINITE_BAG",
    "Cell",
    "CellSnapshot",
    "InvalidWorldFile",
    "Orientation",
    "PositionAndOrientation",
    "RobotError",
    "RobotState",
    "World",
    "WorldSnapshot",
    "WorldSpec",
    "build_default_spec",
    "build_world",
    "load_world",
    "load_world_spec",
    "parse_world_text",
]
