"""Load Karel worlds from the declarative text format.

A world file is a whitespace-separated stream of records:

    Dimension: (8, 8)
    Karel: (3, 6) East
    BeeperBag: INFINITY
    Speed: 2
    Wall: (3, 5) north
    Beeper: (2, 2) 4

`Dimension:` must come first; the other records may appear in any order.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from karel.sim.contracts import (
    MAX_BEEPERS,
    MAX_DIMENSION,
    MIN_SPEED,
    BeeperSpec,
    Orientation,
    PositionAndOrientation,
    WallSpec,
    WorldSpec,
)
from karel.sim.world_state import RobotState, World, build_world

logger = logging.getLogger(__name__)

DIMENSION_PREFIX = "Dimension:"
BEEPER_PREFIX = "Beeper:"
WALL_PREFIX = "Wall:"
BAG_PREFIX = "BeeperBag:"
KAREL_PREFIX = "Karel:"
SPEED_PREFIX = "Speed:"

INFINITE_BAG_TOKENS = {"INFINITY", "INFINITE"}

_TOKEN_RE = re.compile(r"[(),]|[^\s(),]+")
_INT_RE = re.compile(r"-?\d+")
_COUNT_RE = re.compile(r"\d+")


class InvalidWorldFile(ValueError):
    """A world file could not be parsed; carries the 1-based line number."""

    def __init__(self, line_number: int, reason: str, *, source: str = "<string>"):
        self.line_number = line_number
        self.reason = reason
        self.source = source
        super().__init__(f"{source}:{line_number}: {reason}")


@dataclass(frozen=True)
class Token:
    text: str
    line: int


def parse_world_text(text: str, *, source: str = "<string>") -> WorldSpec:
    return _Parser(_tokenize(text), source=source).parse()


def load_world_spec(path: Path | str) -> WorldSpec:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidWorldFile(
            1, f"Error opening file: {exc}", source=str(path)
        ) from exc
    spec = parse_world_text(text, source=str(path))
    logger.info(
        "Loaded %dx%d world from %s (%d walls, %d beeper records)",
        spec.width,
        spec.height,
        path,
        len(spec.walls),
        len(spec.beepers),
    )
    return spec


def load_world(path: Path | str) -> tuple[World, RobotState]:
    return build_world(load_world_spec(path))


def _tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        tokens.extend(Token(match, line_number) for match in _TOKEN_RE.findall(line))
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token], *, source: str) -> None:
        self._tokens = tokens
        self._index = 0
        self._source = source
        self._width = 0
        self._height = 0

    def parse(self) -> WorldSpec:
        self._width, self._height = self._parse_dimension()
        karel = PositionAndOrientation(x=1, y=1, orientation=Orientation.EAST)
        bag: int | None = 0
        speed = 1.0
        walls: list[WallSpec] = []
        beepers: dict[tuple[int, int], BeeperSpec] = {}

        while not self._at_end():
            keyword = self._next("a record keyword")
            if keyword.text == WALL_PREFIX:
                x, y, side = self._parse_position_and_orientation()
                walls.append(WallSpec(x=x, y=y, side=side))
            elif keyword.text == BEEPER_PREFIX:
                x, y = self._parse_position()
                count = self._parse_count("Beeper count")
                # Last write on a cell wins.
                beepers[(x, y)] = BeeperSpec(x=x, y=y, count=count)
            elif keyword.text == BAG_PREFIX:
                bag = self._parse_bag()
            elif keyword.text == KAREL_PREFIX:
                x, y, orientation = self._parse_position_and_orientation()
                karel = PositionAndOrientation(x=x, y=y, orientation=orientation)
            elif keyword.text == SPEED_PREFIX:
                speed = self._parse_speed()
            else:
                raise self._error(keyword, f"Unexpected token in file: {keyword.text}")
            logger.debug("Parsed %s record on line %d", keyword.text, keyword.line)

        try:
            return WorldSpec(
                width=self._width,
                height=self._height,
                karel=karel,
                bag=bag,
                speed=speed,
                walls=walls,
                beepers=list(beepers.values()),
            )
        except ValidationError as exc:
            line = self._tokens[-1].line if self._tokens else 1
            raise InvalidWorldFile(line, str(exc), source=self._source) from exc

    def _parse_dimension(self) -> tuple[int, int]:
        missing = "Could not find Dimension: in first line"
        if self._at_end():
            raise InvalidWorldFile(1, missing, source=self._source)
        prefix = self._next("Dimension:")
        if prefix.text != DIMENSION_PREFIX:
            raise self._error(prefix, missing)
        self._expect("(", "Dimension")
        width = self._parse_int("Dimension width")
        self._expect(",", "Dimension")
        height = self._parse_int("Dimension height")
        self._expect(")", "Dimension")
        if width < 1 or height < 1:
            raise self._error(
                prefix,
                "Cannot load a world less than 1 cell wide or less than 1 cell tall",
            )
        if width > MAX_DIMENSION or height > MAX_DIMENSION:
            raise self._error(
                prefix,
                f"Cannot load a world more than {MAX_DIMENSION} cells wide or tall",
            )
        return width, height

    def _parse_position(self) -> tuple[int, int]:
        self._expect("(", "position")
        x = self._parse_int("position x")
        self._expect(",", "position")
        y = self._parse_int("position y")
        close = self._expect(")", "position")
        if not (1 <= x <= self._width and 1 <= y <= self._height):
            raise self._error(
                close,
                f"Position ({x}, {y}) is outside the "
                f"{self._width}x{self._height} world",
            )
        return x, y

    def _parse_position_and_orientation(self) -> tuple[int, int, Orientation]:
        x, y = self._parse_position()
        token = self._next("orientation")
        try:
            orientation = Orientation.parse(token.text)
        except ValueError:
            raise self._error(token, f"Unknown orientation {token.text}") from None
        return x, y, orientation

    def _parse_bag(self) -> int | None:
        token = self._next("BeeperBag quantity")
        if token.text in INFINITE_BAG_TOKENS:
            return None
        if not _COUNT_RE.fullmatch(token.text):
            raise self._error(token, f"Unknown BeeperBag quantity, {token.text}")
        quantity = int(token.text)
        if quantity > MAX_BEEPERS:
            raise self._error(
                token, f"BeeperBag quantity must be at most {MAX_BEEPERS}"
            )
        return quantity

    def _parse_speed(self) -> float:
        token = self._next("Speed")
        try:
            speed = float(token.text)
        except ValueError:
            raise self._error(token, f"Error reading Speed, {token.text}") from None
        if not math.isfinite(speed):
            raise self._error(token, f"Error reading Speed, {token.text}")
        if speed <= 0:
            raise self._error(token, "Speed must be greater than 0")
        return max(speed, MIN_SPEED)

    def _parse_count(self, what: str) -> int:
        token = self._next(what)
        if not _COUNT_RE.fullmatch(token.text):
            raise self._error(token, f"Error reading {what}, {token.text}")
        count = int(token.text)
        if count > MAX_BEEPERS:
            raise self._error(token, f"{what} must be at most {MAX_BEEPERS}")
        return count

    def _parse_int(self, what: str) -> int:
        token = self._next(what)
        if not _INT_RE.fullmatch(token.text):
            raise self._error(token, f"Error reading {what}, {token.text}")
        return int(token.text)

    def _expect(self, text: str, context: str) -> Token:
        token = self._next(f"'{text}'")
        if token.text != text:
            raise self._error(
                token, f"Expected '{text}' in {context} but found {token.text}"
            )
        return token

    def _next(self, expected: str) -> Token:
        if self._at_end():
            line = self._tokens[-1].line if self._tokens else 1
            raise InvalidWorldFile(
                line, f"Unexpected end of file, expected {expected}", source=self._source
            )
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _at_end(self) -> bool:
        return self._index >= len(self._tokens)

    def _error(self, token: Token, reason: str) -> InvalidWorldFile:
        return InvalidWorldFile(token.line, reason, source=self._source)
