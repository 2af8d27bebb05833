"""Minimal drawing surface used by the world painter."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import NamedTuple, Protocol

from PIL import Image, ImageDraw, ImageFont


class Color(NamedTuple):
    red: int
    green: int
    blue: int


WHITE = Color(255, 255, 255)


class Canvas(Protocol):
    width: int
    height: int

    def clear(self, color: Color = WHITE) -> None:
        """Fill the whole surface with one color."""

    def draw_rectangle(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        """Fill an axis-aligned rectangle whose top-left corner is (x, y)."""

    def draw_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        color: Color,
        thickness: int = 1,
    ) -> None:
        """Draw a straight segment."""

    def draw_circle(self, x: float, y: float, radius: float, color: Color) -> None:
        """Fill a circle centred on (x, y)."""

    def draw_text(
        self, x: float, y: float, text: str, font_size: int, color: Color
    ) -> None:
        """Draw text with its top-left corner at (x, y)."""

    def save_bmp(self, path: Path) -> None:
        """Write the surface to a BMP file."""


class ImageCanvas:
    """Pillow-backed raster canvas."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), WHITE)
        self._draw = ImageDraw.Draw(self.image)

    def clear(self, color: Color = WHITE) -> None:
        self._draw.rectangle((0, 0, self.width, self.height), fill=color)

    def draw_rectangle(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        if width <= 0 or height <= 0:
            return
        self._draw.rectangle((x, y, x + width - 1, y + height - 1), fill=color)

    def draw_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        color: Color,
        thickness: int = 1,
    ) -> None:
        self._draw.line((x0, y0, x1, y1), fill=color, width=max(1, thickness))

    def draw_circle(self, x: float, y: float, radius: float, color: Color) -> None:
        self._draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=color)

    def draw_text(
        self, x: float, y: float, text: str, font_size: int, color: Color
    ) -> None:
        self._draw.text((x, y), text, fill=color, font=_font(font_size))

    def get_color(self, x: int, y: int) -> Color:
        return Color(*self.image.getpixel((x, y))[:3])

    def save_bmp(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path, format="BMP")


@lru_cache(maxsize=8)
def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)
