"""Draw Karel's world and the robot onto a canvas."""

from __future__ import annotations

import math

from karel.render.canvas import WHITE, Canvas, Color, ImageCanvas
from karel.sim.contracts import Orientation, RobotError, WorldSnapshot

PX_PER_CELL = 50
MARK_SIZE = 10
ROBOT_SIZE = 30
BEEPER_SIZE = 30
EYE_SIZE = 4
EYE_OFFSET = 2
LEG_LENGTH = 6
LIMB_WIDTH = 5
WALL_THICKNESS = 3
FONT_SIZE = 16
ERROR_FONT_SIZE = 20
MARGIN = 32
MIN_WIDTH_CELLS = 5

EYE_COLOR = Color(50, 50, 50)
KAREL_COLOR = Color(125, 125, 125)
MARK_COLOR = Color(150, 150, 255)
INNER_BEEPER_COLOR = Color(172, 147, 194)
LIMB_COLOR = Color(105, 105, 105)
WALL_COLOR = Color(50, 50, 50)
GRID_COLOR = Color(220, 220, 220)
ERROR_COLOR = Color(173, 0, 35)


def canvas_size(width: int, height: int) -> tuple[int, int]:
    min_width = MIN_WIDTH_CELLS * PX_PER_CELL + MARGIN
    return max(width * PX_PER_CELL + MARGIN, min_width), height * PX_PER_CELL + MARGIN


def cell_center(x: float, y: float) -> tuple[float, float]:
    """Pixel centre of an internal-coordinate cell; fractional cells interpolate."""
    return x * PX_PER_CELL + PX_PER_CELL / 2, y * PX_PER_CELL + PX_PER_CELL / 2


def new_canvas(snapshot: WorldSnapshot) -> ImageCanvas:
    return ImageCanvas(*canvas_size(snapshot.width, snapshot.height))


class WorldPainter:
    def __init__(self, canvas: Canvas) -> None:
        self.canvas = canvas

    def paint(
        self,
        snapshot: WorldSnapshot,
        *,
        robot_at: tuple[float, float] | None = None,
    ) -> None:
        """Full draw cycle; `robot_at` overrides the robot centre in pixels."""
        self.canvas.clear(WHITE)
        self.draw_world(snapshot)
        if robot_at is None:
            robot_at = cell_center(*_internal(snapshot, snapshot.karel.x, snapshot.karel.y))
        self.draw_robot(snapshot.karel.orientation, *robot_at)
        if snapshot.error != RobotError.NONE:
            self.draw_error(snapshot.error)

    def draw_world(self, snapshot: WorldSnapshot) -> None:
        canvas = self.canvas
        width = snapshot.width
        height = snapshot.height
        canvas.draw_rectangle(0, 0, width * PX_PER_CELL, height * PX_PER_CELL, WHITE)
        for i in range(height + 1):
            x = PX_PER_CELL * width - 1
            y = i * PX_PER_CELL
            canvas.draw_line(0, y, x, y, GRID_COLOR, WALL_THICKNESS)
            if i < height:
                # Row labels count up from the bottom in user coordinates.
                canvas.draw_text(
                    x + FONT_SIZE / 2,
                    y + (PX_PER_CELL - FONT_SIZE) / 2,
                    str(height - i),
                    FONT_SIZE,
                    WALL_COLOR,
                )
        for i in range(width + 1):
            x = i * PX_PER_CELL
            y = PX_PER_CELL * height - 1
            canvas.draw_line(x, 0, x, y, GRID_COLOR, WALL_THICKNESS)
            if i < width:
                canvas.draw_text(
                    x + (PX_PER_CELL - FONT_SIZE) / 2,
                    y + FONT_SIZE / 2,
                    str(i + 1),
                    FONT_SIZE,
                    WALL_COLOR,
                )
        for cell in snapshot.cells:
            i, j = _internal(snapshot, cell.x, cell.y)
            x_center, y_center = cell_center(i, j)
            canvas.draw_line(
                x_center - MARK_SIZE / 2,
                y_center,
                x_center + MARK_SIZE / 2,
                y_center,
                MARK_COLOR,
                WALL_THICKNESS,
            )
            canvas.draw_line(
                x_center,
                y_center - MARK_SIZE / 2,
                x_center,
                y_center + MARK_SIZE / 2,
                MARK_COLOR,
                WALL_THICKNESS,
            )
            if cell.beepers > 0:
                self._draw_beeper(x_center, y_center, cell.beepers)
            self._draw_walls(i, j, cell.walls)

    def draw_robot(self, orientation: Orientation, pixel_x: float, pixel_y: float) -> None:
        canvas = self.canvas
        half = ROBOT_SIZE / 2
        canvas.draw_rectangle(
            pixel_x - half, pixel_y - half, ROBOT_SIZE, ROBOT_SIZE, KAREL_COLOR
        )
        # Unit vectors: `fx, fy` toward the facing side, `sx, sy` across it.
        fx, fy = orientation.delta
        sx, sy = -fy, fx
        near = half - EYE_SIZE / 2
        canvas.draw_circle(
            pixel_x + fx * (near - EYE_OFFSET),
            pixel_y + fy * (near - EYE_OFFSET),
            EYE_SIZE,
            WHITE,
        )
        canvas.draw_circle(
            pixel_x - fx * EYE_OFFSET, pixel_y - fy * EYE_OFFSET, EYE_SIZE, WHITE
        )
        canvas.draw_circle(pixel_x + fx * near, pixel_y + fy * near, EYE_SIZE, EYE_COLOR)
        # Limbs stick out of the side opposite the facing direction.
        back_x = pixel_x - fx * half
        back_y = pixel_y - fy * half
        for sign in (-1, 1):
            start_x = back_x + sx * sign * LEG_LENGTH
            start_y = back_y + sy * sign * LEG_LENGTH
            canvas.draw_line(
                start_x,
                start_y,
                start_x - fx * LEG_LENGTH,
                start_y - fy * LEG_LENGTH,
                LIMB_COLOR,
                LIMB_WIDTH,
            )
        canvas.draw_circle(pixel_x, pixel_y, EYE_SIZE, EYE_COLOR)

    def draw_error(self, error: RobotError) -> None:
        message = f"Error: {error.message}"
        approx_width = 25 * ERROR_FONT_SIZE / 4
        text_x = max(2, self.canvas.width / 2 - approx_width)
        text_y = self.canvas.height / 2 - ERROR_FONT_SIZE / 2
        for dx, dy in ((-2, -2), (2, -2), (-2, 2), (2, 2)):
            self.canvas.draw_text(
                text_x + dx, text_y + dy, message, ERROR_FONT_SIZE, WHITE
            )
        self.canvas.draw_text(text_x, text_y, message, ERROR_FONT_SIZE, ERROR_COLOR)

    def _draw_beeper(self, x_center: float, y_center: float, count: int) -> None:
        # A thick diagonal line renders as a diamond.
        line_size = math.sqrt((BEEPER_SIZE / 2) ** 2 / 2)
        inner_size = BEEPER_SIZE - WALL_THICKNESS * 2
        inner_line_size = math.sqrt((inner_size / 2) ** 2 / 2)
        self.canvas.draw_line(
            x_center - line_size,
            y_center - line_size,
            x_center + line_size,
            y_center + line_size,
            WALL_COLOR,
            BEEPER_SIZE,
        )
        self.canvas.draw_line(
            x_center - inner_line_size,
            y_center - inner_line_size,
            x_center + inner_line_size,
            y_center + inner_line_size,
            INNER_BEEPER_COLOR,
            inner_size,
        )
        if count > 1:
            label = str(count)
            self.canvas.draw_text(
                x_center - FONT_SIZE * len(label) / 4,
                y_center - FONT_SIZE / 2,
                label,
                FONT_SIZE,
                WALL_COLOR,
            )

    def _draw_walls(self, i: int, j: int, walls: frozenset[Orientation]) -> None:
        left = i * PX_PER_CELL
        top = j * PX_PER_CELL
        right = (i + 1) * PX_PER_CELL - 1
        bottom = (j + 1) * PX_PER_CELL - 1
        segments = {
            Orientation.NORTH: (left, top, right, top),
            Orientation.SOUTH: (left, bottom, right, bottom),
            Orientation.WEST: (left, top, left, bottom),
            Orientation.EAST: (right, top, right, bottom),
        }
        for side in walls:
            self.canvas.draw_line(*segments[side], WALL_COLOR, WALL_THICKNESS)


def _internal(snapshot: WorldSnapshot, x: int, y: int) -> tuple[int, int]:
    return x - 1, snapshot.height - y
