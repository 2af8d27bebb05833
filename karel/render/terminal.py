"""Show a painted canvas in the terminal with Rich half-block cells."""

from __future__ import annotations

from PIL import Image
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from karel.render.canvas import ImageCanvas
from karel.sim.contracts import RobotError, WorldSnapshot

UPPER_HALF_BLOCK = "▀"
DEFAULT_COLUMNS_PER_CELL = 4


def image_to_text(image: Image.Image, *, columns: int) -> Text:
    """Downsample an image to `columns` wide; each character covers two pixel rows."""
    columns = max(1, columns)
    rows = max(2, round(image.height * columns / image.width))
    rows += rows % 2
    small = image.convert("RGB").resize((columns, rows), Image.Resampling.BOX)
    pixels = small.load()
    text = Text()
    for y in range(0, rows, 2):
        for x in range(columns):
            top = pixels[x, y]
            bottom = pixels[x, y + 1]
            text.append(
                UPPER_HALF_BLOCK,
                style=f"rgb({top[0]},{top[1]},{top[2]}) on "
                f"rgb({bottom[0]},{bottom[1]},{bottom[2]})",
            )
        if y + 2 < rows:
            text.append("\n")
    return text


def status_line(snapshot: WorldSnapshot) -> Text:
    bag = "infinite" if snapshot.bag is None else str(snapshot.bag)
    karel = snapshot.karel
    line = Text(
        f"Karel at ({karel.x}, {karel.y}) facing {karel.orientation.value}"
        f"  |  bag: {bag}  |  speed: {snapshot.speed:g}"
    )
    if snapshot.error != RobotError.NONE:
        line.append(
            f"  |  Error: {snapshot.error.message.splitlines()[0]}",
            style="bold red",
        )
    elif snapshot.finished:
        line.append("  |  finished", style="bold")
    return line


def render_frame(
    canvas: ImageCanvas,
    snapshot: WorldSnapshot,
    *,
    columns_per_cell: int = DEFAULT_COLUMNS_PER_CELL,
) -> RenderableType:
    columns = max(snapshot.width, 5) * columns_per_cell + columns_per_cell
    body = Group(image_to_text(canvas.image, columns=columns), status_line(snapshot))
    return Panel(body, title="Karel's World", expand=False)
