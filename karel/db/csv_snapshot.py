"""CSV snapshots of Karel's world for screen-reader users."""

from __future__ import annotations

import csv
from pathlib import Path

from karel.sim.contracts import Orientation, WorldSnapshot

CSV_FILE_NAME = "karel_world.csv"
WALL_MARK = "w"
EMPTY_MARK = "o"

ROBOT_TOKENS = {
    Orientation.NORTH: "kn",
    Orientation.EAST: "ke",
    Orientation.SOUTH: "ks",
    Orientation.WEST: "kw",
}

LEGEND = [
    ("Legend", ""),
    ("kn", "Karel facing north"),
    ("ke", "Karel facing east"),
    ("ks", "Karel facing south"),
    ("kw", "Karel facing west"),
    ("bN", "N beepers on the cell"),
    (EMPTY_MARK, "empty cell"),
    ("(x,y)", "cell coordinates; (1,1) is the bottom-left cell"),
    (WALL_MARK, "wall between the neighbouring cells"),
]


def world_rows(snapshot: WorldSnapshot) -> list[list[str]]:
    """Two rows per grid row, top first: cell contents, then walls below them."""
    rows: list[list[str]] = []
    for y in range(snapshot.height, 0, -1):
        content: list[str] = []
        walls_below: list[str] = []
        for x in range(1, snapshot.width + 1):
            content.append(_cell_label(snapshot, x, y))
            walls_below.append(WALL_MARK if _wall_below(snapshot, x, y) else "")
            if x < snapshot.width:
                content.append(WALL_MARK if _wall_east(snapshot, x, y) else "")
                walls_below.append("")
        rows.append(content)
        rows.append(walls_below)
    return rows


def write_world_csv(path: Path, snapshot: WorldSnapshot) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerows(world_rows(snapshot))
        writer.writerow([])
        writer.writerows(LEGEND)
    return path


def _cell_label(snapshot: WorldSnapshot, x: int, y: int) -> str:
    tokens: list[str] = []
    karel = snapshot.karel
    if karel.x == x and karel.y == y:
        tokens.append(ROBOT_TOKENS[karel.orientation])
    beepers = snapshot.cell(x, y).beepers
    if beepers > 0:
        tokens.append(f"b{beepers}")
    if not tokens:
        tokens.append(EMPTY_MARK)
    tokens.append(f"({x},{y})")
    return " ".join(tokens)


def _wall_east(snapshot: WorldSnapshot, x: int, y: int) -> bool:
    if Orientation.EAST in snapshot.cell(x, y).walls:
        return True
    return x < snapshot.width and Orientation.WEST in snapshot.cell(x + 1, y).walls


def _wall_below(snapshot: WorldSnapshot, x: int, y: int) -> bool:
    if Orientation.SOUTH in snapshot.cell(x, y).walls:
        return True
    return y > 1 and Orientation.NORTH in snapshot.cell(x, y - 1).walls
