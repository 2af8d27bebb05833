"""Flat student command surface bound to a process-wide simulator."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from karel.db.csv_snapshot import CSV_FILE_NAME
from karel.render.base import NullRenderer, Renderer
from karel.render.live_renderer import LiveRenderer
from karel.settings import RunSettings, resolve_settings
from karel.sim.simulator import Simulator
from karel.sim.world_loader import InvalidWorldFile

_simulator: Simulator | None = None


def build_simulator(settings: RunSettings | None = None) -> Simulator:
    settings = settings or resolve_settings()
    renderer: Renderer
    if settings.headless:
        renderer = NullRenderer()
    else:
        renderer = LiveRenderer(
            animation_steps=settings.animation_steps,
            wait_on_close=settings.wait_on_close,
        )
    simulator = Simulator(
        renderer=renderer,
        csv_path=settings.csv_dir / CSV_FILE_NAME,
        speed_override=settings.speed,
    )
    if settings.csv_output:
        simulator.enable_csv_output()
    if settings.prompt:
        simulator.enable_prompt_before_action()
    return simulator


def get_simulator() -> Simulator:
    """Return the shared simulator, constructing it on first use."""
    global _simulator
    if _simulator is None:
        _simulator = build_simulator()
    return _simulator


def reset_simulator(simulator: Simulator | None = None) -> Simulator:
    """Replace the shared simulator; used by tests and the program runner."""
    global _simulator
    _simulator = simulator or build_simulator()
    return _simulator


def load_world(path: Path | str) -> None:
    """Load a world file. Ignored once any other command has run.

    An invalid file is reported on stderr and ends the program with status 1.
    """
    try:
        get_simulator().initialize(path)
    except InvalidWorldFile as exc:
        Console(stderr=True).print(
            f"Invalid world file: {exc}", markup=False, highlight=False
        )
        raise SystemExit(1) from exc


def move() -> None:
    get_simulator().move()


def turn_left() -> None:
    get_simulator().turn_left()


def put_beeper() -> None:
    get_simulator().put_beeper()


def pick_beeper() -> None:
    get_simulator().pick_beeper()


def finish() -> None:
    get_simulator().finish()


def enable_csv_output() -> None:
    get_simulator().enable_csv_output()


def enable_prompt_before_action() -> None:
    get_simulator().enable_prompt_before_action()


def front_is_clear() -> bool:
    return get_simulator().front_is_clear()


def front_is_blocked() -> bool:
    return get_simulator().front_is_blocked()


def left_is_clear() -> bool:
    return get_simulator().left_is_clear()


def left_is_blocked() -> bool:
    return get_simulator().left_is_blocked()


def right_is_clear() -> bool:
    return get_simulator().right_is_clear()


def right_is_blocked() -> bool:
    return get_simulator().right_is_blocked()


def has_beepers_in_bag() -> bool:
    return get_simulator().has_beepers_in_bag()


def no_beepers_in_bag() -> bool:
    return get_simulator().no_beepers_in_bag()


def beepers_present() -> bool:
    return get_simulator().beepers_present()


def no_beepers_present() -> bool:
    return get_simulator().no_beepers_present()


def facing_north() -> bool:
    return get_simulator().facing_north()


def not_facing_north() -> bool:
    return get_simulator().not_facing_north()


def facing_east() -> bool:
    return get_simulator().facing_east()


def not_facing_east() -> bool:
    return get_simulator().not_facing_east()


def facing_south() -> bool:
    return get_simulator().facing_south()


def not_facing_south() -> bool:
    return get_simulator().not_facing_south()


def facing_west() -> bool:
    return get_simulator().facing_west()


def not_facing_west() -> bool:
    return get_simulator().not_facing_west()
