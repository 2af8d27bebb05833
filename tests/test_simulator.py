import csv
import math
from pathlib import Path

import pytest

from karel.render.base import NullRenderer
from karel.sim.contracts import Orientation, RobotError
from karel.sim.simulator import Simulator, SimulatorState
from karel.sim.world_loader import InvalidWorldFile

WORLDS = Path(__file__).parent / "worlds"


class CountingPrompter:
    def __init__(self) -> None:
        self.calls = 0

    def wait(self) -> str:
        self.calls += 1
        return ""


def build_simulator(tmp_path: Path, world: str | None = None, **kwargs) -> Simulator:
    simulator = Simulator(
        renderer=NullRenderer(), csv_path=tmp_path / "karel_world.csv", **kwargs
    )
    simulator.initialize(WORLDS / world if world else None)
    return simulator


def write_world(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "world.w"
    path.write_text(text, encoding="utf-8")
    return path


def test_default_world_and_turn_cycle(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path)

    assert sim.world_width == 10
    assert sim.world_height == 10
    for x in range(1, 11):
        for y in range(1, 11):
            cell = sim.cell(x, y)
            assert cell.beepers == 0
            assert not cell.walls
    assert (sim.x_position, sim.y_position) == (1, 1)
    assert sim.orientation == Orientation.EAST
    assert math.isinf(sim.beepers_in_bag)

    expected = [Orientation.NORTH, Orientation.WEST, Orientation.SOUTH, Orientation.EAST]
    for orientation in expected:
        sim.turn_left()
        assert sim.orientation == orientation
    assert sim.error == RobotError.NONE


def test_two_by_one_east_then_blocked(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "2x1.w")

    sim.move()
    assert (sim.x_position, sim.y_position) == (2, 1)
    assert sim.error == RobotError.NONE

    sim.move()
    assert sim.error == RobotError.CANNOT_MOVE_EAST
    assert (sim.x_position, sim.y_position) == (2, 1)
    assert sim.finished
    assert sim.state == SimulatorState.FINISHED

    sim.turn_left()
    sim.put_beeper()
    assert sim.orientation == Orientation.EAST
    assert sim.cell(2, 1).beepers == 0


def test_beeper_round_trip_on_default_world(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path)
    assert not sim.beepers_present()
    assert sim.has_beepers_in_bag()

    for count in range(1, 11):
        sim.put_beeper()
        assert sim.beepers_present()
        assert sim.cell(1, 1).beepers == count
    assert math.isinf(sim.beepers_in_bag)

    for count in range(9, -1, -1):
        sim.pick_beeper()
        assert sim.beepers_present() == (count > 0)
        assert sim.cell(1, 1).beepers == count
    assert sim.error == RobotError.NONE

    sim.pick_beeper()
    assert sim.error == RobotError.CANNOT_PICK_BEEPER
    assert sim.finished


def test_wall_blocks_from_either_side(tmp_path: Path) -> None:
    below = write_world(
        tmp_path, "Dimension: (3, 3)\nKarel: (2, 2) north\nWall: (2, 2) north\n"
    )
    sim = Simulator(renderer=NullRenderer())
    sim.initialize(below)
    assert not sim.front_is_clear()
    sim.move()
    assert sim.error == RobotError.CANNOT_MOVE_NORTH
    assert (sim.x_position, sim.y_position) == (2, 2)

    above = write_world(
        tmp_path, "Dimension: (3, 3)\nKarel: (2, 3) south\nWall: (2, 2) north\n"
    )
    sim = Simulator(renderer=NullRenderer())
    sim.initialize(above)
    assert not sim.front_is_clear()
    sim.move()
    assert sim.error == RobotError.CANNOT_MOVE_SOUTH
    assert (sim.x_position, sim.y_position) == (2, 3)


def test_left_and_right_when_facing_north(tmp_path: Path) -> None:
    path = write_world(
        tmp_path, "Dimension: (3, 3)\nKarel: (2, 2) north\nWall: (2, 2) west\n"
    )
    sim = Simulator(renderer=NullRenderer())
    sim.initialize(path)

    assert sim.facing_north()
    assert not sim.left_is_clear()
    assert sim.left_is_blocked()
    assert sim.right_is_clear()
    assert not sim.right_is_blocked()


def test_failed_load_leaves_simulator_uninitialized() -> None:
    sim = Simulator(renderer=NullRenderer())
    with pytest.raises(InvalidWorldFile) as excinfo:
        sim.initialize(WORLDS / "bad_dimension.w")
    assert excinfo.value.line_number == 1
    assert sim.state == SimulatorState.UNINITIALIZED


@pytest.mark.parametrize(
    ("turns", "error"),
    [
        (0, RobotError.CANNOT_MOVE_EAST),
        (1, RobotError.CANNOT_MOVE_NORTH),
        (2, RobotError.CANNOT_MOVE_WEST),
        (3, RobotError.CANNOT_MOVE_SOUTH),
    ],
)
def test_cannot_move_through_outer_walls(
    tmp_path: Path, turns: int, error: RobotError
) -> None:
    sim = build_simulator(tmp_path, "outer_walls.w")
    assert sim.cell(3, 5).has_north_wall()
    assert sim.cell(2, 6).has_east_wall()
    assert sim.cell(3, 7).has_south_wall()
    assert sim.cell(4, 6).has_west_wall()
    for _ in range(turns):
        sim.turn_left()

    assert sim.front_is_blocked()
    assert sim.left_is_blocked()
    assert sim.right_is_blocked()
    sim.move()
    assert sim.error == error
    assert (sim.x_position, sim.y_position) == (3, 6)


@pytest.mark.parametrize(
    ("turns", "error"),
    [
        (0, RobotError.CANNOT_MOVE_EAST),
        (1, RobotError.CANNOT_MOVE_NORTH),
        (2, RobotError.CANNOT_MOVE_WEST),
        (3, RobotError.CANNOT_MOVE_SOUTH),
    ],
)
def test_cannot_move_through_inner_walls(
    tmp_path: Path, turns: int, error: RobotError
) -> None:
    sim = build_simulator(tmp_path, "inner_walls.w")
    for _ in range(turns):
        sim.turn_left()
    sim.move()

    assert sim.front_is_blocked()
    assert sim.left_is_blocked()
    assert sim.right_is_blocked()
    assert sim.error == error


@pytest.mark.parametrize(
    ("turns", "error"),
    [
        (1, RobotError.CANNOT_MOVE_NORTH),
        (2, RobotError.CANNOT_MOVE_WEST),
        (3, RobotError.CANNOT_MOVE_SOUTH),
    ],
)
def test_world_edges_raise_direction_errors(
    tmp_path: Path, turns: int, error: RobotError
) -> None:
    sim = build_simulator(tmp_path, "2x1.w")
    for _ in range(turns):
        sim.turn_left()
    sim.move()
    assert sim.error == error
    assert (sim.x_position, sim.y_position) == (1, 1)


def test_moves_east_and_west(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "8x1.w")
    for x in range(2, 9):
        sim.move()
        assert (sim.x_position, sim.y_position) == (x, 1)
    sim.turn_left()
    sim.turn_left()
    for x in range(7, 0, -1):
        sim.move()
        assert (sim.x_position, sim.y_position) == (x, 1)
    assert sim.error == RobotError.NONE


def test_moves_north_and_south(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "1x8.w")
    sim.turn_left()
    for y in range(2, 9):
        sim.move()
        assert (sim.x_position, sim.y_position) == (1, y)
    sim.turn_left()
    sim.turn_left()
    for y in range(7, 0, -1):
        sim.move()
        assert (sim.x_position, sim.y_position) == (1, y)
    assert sim.error == RobotError.NONE


def test_clearance_is_symmetric_for_every_cell_and_side(tmp_path: Path) -> None:
    for side in Orientation:
        for record_on_neighbour in (False, True):
            sim = build_simulator(tmp_path)
            _place(sim, x=6, y=5)
            dx, dy = side.delta
            # Internal dy grows downward, user y grows upward.
            if record_on_neighbour:
                sim.cell(6 + dx, 5 - dy).add_wall(side.opposite())
            else:
                sim.cell(6, 5).add_wall(side)
            assert not sim.direction_is_clear(side)
            for other in Orientation:
                if other != side:
                    assert sim.direction_is_clear(other)


def test_finite_bag_runs_out(tmp_path: Path) -> None:
    path = write_world(tmp_path, "Dimension: (2, 2)\nBeeperBag: 2\n")
    sim = Simulator(renderer=NullRenderer())
    sim.initialize(path)

    sim.put_beeper()
    sim.pick_beeper()
    assert sim.beepers_in_bag == 2
    assert sim.cell(1, 1).beepers == 0

    sim.put_beeper()
    sim.put_beeper()
    assert sim.beepers_in_bag == 0
    assert sim.no_beepers_in_bag()
    sim.put_beeper()
    assert sim.error == RobotError.CANNOT_PUT_BEEPER
    assert sim.cell(1, 1).beepers == 2


def test_empty_bag_errors_immediately(tmp_path: Path) -> None:
    path = write_world(tmp_path, "Dimension: (2, 2)\nBeeperBag: 0\n")
    sim = Simulator(renderer=NullRenderer())
    sim.initialize(path)
    sim.put_beeper()
    assert sim.error == RobotError.CANNOT_PUT_BEEPER
    assert sim.finished


def test_negated_predicates_mirror(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "beepers.w")
    pairs = [
        (sim.front_is_clear, sim.front_is_blocked),
        (sim.left_is_clear, sim.left_is_blocked),
        (sim.right_is_clear, sim.right_is_blocked),
        (sim.has_beepers_in_bag, sim.no_beepers_in_bag),
        (sim.beepers_present, sim.no_beepers_present),
        (sim.facing_north, sim.not_facing_north),
        (sim.facing_east, sim.not_facing_east),
        (sim.facing_south, sim.not_facing_south),
        (sim.facing_west, sim.not_facing_west),
    ]
    for _ in range(4):
        for positive, negative in pairs:
            assert negative() == (not positive())
        sim.turn_left()


def test_predicates_still_answer_after_finish(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "2x1.w")
    sim.finish()
    assert sim.error == RobotError.NONE
    assert sim.front_is_clear()
    assert sim.facing_east()
    sim.move()
    assert (sim.x_position, sim.y_position) == (1, 1)
    sim.finish()
    assert sim.finished


def test_second_initialize_is_ignored_unless_forced(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "2x1.w")
    sim.move()
    sim.initialize(WORLDS / "8x1.w")
    assert sim.world_width == 2
    assert sim.x_position == 2

    sim.initialize(WORLDS / "8x1.w", force=True)
    assert sim.world_width == 8
    assert sim.x_position == 1
    assert sim.state == SimulatorState.READY


def test_force_initialize_resets_error_and_grid(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path)
    sim.put_beeper()
    sim.turn_left()
    sim.turn_left()
    sim.move()
    assert sim.finished

    sim.initialize(force=True)
    assert sim.error == RobotError.NONE
    assert not sim.finished
    assert sim.cell(1, 1).beepers == 0
    assert sim.orientation == Orientation.EAST


def test_reloading_same_file_gives_same_state(tmp_path: Path) -> None:
    first = build_simulator(tmp_path, "beepers.w").snapshot()
    second = build_simulator(tmp_path, "beepers.w").snapshot()
    assert first == second
    assert first.bag == 3
    assert first.speed == 2.5


def test_runtime_error_is_printed_to_stderr(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    sim = build_simulator(tmp_path, "2x1.w")
    sim.turn_left()
    sim.move()

    captured = capsys.readouterr()
    assert "Error: Cannot move north" in captured.err


def test_commands_prompt_but_predicates_do_not(tmp_path: Path) -> None:
    prompter = CountingPrompter()
    sim = build_simulator(tmp_path, prompter=prompter)
    sim.enable_prompt_before_action()

    sim.front_is_clear()
    sim.beepers_present()
    assert prompter.calls == 0
    sim.move()
    sim.turn_left()
    sim.put_beeper()
    sim.pick_beeper()
    assert prompter.calls == 4


def test_csv_output_written_each_action_and_enables_prompt(tmp_path: Path) -> None:
    prompter = CountingPrompter()
    sim = build_simulator(tmp_path, "2x1.w", prompter=prompter)
    sim.enable_csv_output()
    assert sim.prompt_between_actions

    sim.move()
    assert prompter.calls == 1
    with sim.csv_path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == ["o (1,1)", "", "ke (2,1)"]

    sim.finish()
    assert sim.csv_path.exists()


def test_speed_override_is_clamped(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "beepers.w", speed_override=0.0)
    assert sim.speed == 0.1


def test_lazy_initialization_on_first_command() -> None:
    sim = Simulator(renderer=NullRenderer())
    assert sim.state == SimulatorState.UNINITIALIZED
    sim.turn_left()
    assert sim.state == SimulatorState.READY
    assert sim.world_width == 10
    assert sim.facing_north()


def _place(sim: Simulator, *, x: int, y: int) -> None:
    """Walk Karel from (1, 1) to user (x, y) and face east again."""
    for _ in range(x - 1):
        sim.move()
    sim.turn_left()
    for _ in range(y - 1):
        sim.move()
    sim.turn_left()
    sim.turn_left()
    sim.turn_left()
    assert (sim.x_position, sim.y_position) == (x, y)
    assert sim.error == RobotError.NONE


def test_removed_wall_no_longer_blocks(tmp_path: Path) -> None:
    sim = build_simulator(tmp_path, "inner_walls.w")
    cell = sim.cell(3, 2)
    cell.remove_wall(Orientation.EAST)
    cell.remove_wall(Orientation.EAST)

    assert not cell.has_east_wall()
    assert cell.has_north_wall()
    assert sim.front_is_clear()
    sim.move()
    assert (sim.x_position, sim.y_position) == (4, 2)
    assert sim.error == RobotError.NONE
