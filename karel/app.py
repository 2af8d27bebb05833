"""Application entry for running a student program against Karel's world."""

from __future__ import annotations

import logging
import runpy
from pathlib import Path

from rich.console import RenderableType
from rich.table import Table

from karel import facade
from karel.settings import RunSettings
from karel.sim.contracts import WorldSpec
from karel.sim.simulator import Simulator, SimulatorState
from karel.sim.world_loader import load_world_spec

logger = logging.getLogger(__name__)


def run_program(
    program: Path,
    *,
    world: Path | None = None,
    settings: RunSettings | None = None,
    bmp_path: Path | None = None,
) -> Simulator:
    """Run `program` with a fresh shared simulator and finish it afterwards.

    A `world` given here is loaded before the program starts, so any
    `load_world` call inside the program is ignored.
    """
    simulator = facade.reset_simulator(facade.build_simulator(settings))
    if world is not None:
        simulator.initialize(world)
    logger.info("Running %s", program)
    try:
        runpy.run_path(str(program), run_name="__main__")
        if bmp_path is not None:
            simulator.save_world_bmp(bmp_path)
    finally:
        # A program that never touched Karel has nothing on screen to close.
        if simulator.state != SimulatorState.UNINITIALIZED:
            simulator.finish()
    return simulator


def describe_world(path: Path) -> RenderableType:
    spec = load_world_spec(path)
    return world_summary(spec, title=str(path))


def world_summary(spec: WorldSpec, *, title: str) -> RenderableType:
    table = Table(title=title, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Dimension", f"{spec.width} x {spec.height}")
    karel = spec.karel
    table.add_row(
        "Karel", f"({karel.x}, {karel.y}) facing {karel.orientation.value}"
    )
    table.add_row("Beeper bag", "infinite" if spec.bag is None else str(spec.bag))
    table.add_row("Speed", f"{spec.speed:g}")
    table.add_row("Walls", str(len(spec.walls)))
    table.add_row("Beepers", str(sum(beeper.count for beeper in spec.beepers)))
    return table
