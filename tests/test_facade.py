from pathlib import Path

import pytest

import karel
from karel import facade
from karel.render.base import NullRenderer
from karel.sim.simulator import Simulator, SimulatorState

WORLDS = Path(__file__).parent / "worlds"


@pytest.fixture
def simulator(tmp_path: Path) -> Simulator:
    sim = Simulator(renderer=NullRenderer(), csv_path=tmp_path / "karel_world.csv")
    facade.reset_simulator(sim)
    return sim


def test_student_surface_drives_shared_simulator(simulator: Simulator) -> None:
    karel.load_world(WORLDS / "2x1.w")
    assert karel.front_is_clear()
    karel.move()
    assert karel.front_is_blocked()
    assert simulator.x_position == 2

    karel.turn_left()
    assert karel.facing_north()
    assert karel.not_facing_east()
    karel.put_beeper()
    assert karel.beepers_present()
    karel.pick_beeper()
    assert karel.no_beepers_present()
    karel.finish()
    assert simulator.finished


def test_load_world_ignored_after_first_command(simulator: Simulator) -> None:
    karel.turn_left()
    karel.load_world(WORLDS / "2x1.w")
    assert simulator.world_width == 10
    assert karel.facing_north()


def test_bad_world_reports_and_exits(
    simulator: Simulator, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        karel.load_world(WORLDS / "bad_dimension.w")

    assert excinfo.value.code == 1
    assert isinstance(excinfo.value.__cause__, karel.InvalidWorldFile)
    err = capsys.readouterr().err
    assert "Invalid world file" in err
    assert "bad_dimension.w:1:" in err
    assert simulator.state == SimulatorState.UNINITIALIZED


def test_shared_simulator_built_lazily_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("KAREL_HEADLESS", "1")
    monkeypatch.setenv("KAREL_CSV_DIR", str(tmp_path))
    monkeypatch.setattr(facade, "_simulator", None)

    sim = facade.get_simulator()
    assert facade.get_simulator() is sim
    assert sim.csv_path == tmp_path / "karel_world.csv"
    assert karel.has_beepers_in_bag()
    assert sim.world_width == 10


def test_enable_flags_before_any_command(simulator: Simulator) -> None:
    karel.enable_csv_output()
    assert simulator.csv_output
    assert simulator.prompt_between_actions
    assert not simulator.finished
