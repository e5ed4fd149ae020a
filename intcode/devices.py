"""
devices — interactive environments driven by an Intcode machine.

A device sees every Input and Output of the machine as it happens. The
devices here read their output in fixed-size frames: a screen receives
(x, y, tile) triples, a painting robot receives (colour, turn) pairs.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from .io import InteractiveDevice


class FramedDevice(InteractiveDevice):
    """Groups consecutive outputs into tuples of frame_size values."""

    def __init__(self, frame_size: int):
        if frame_size < 1:
            raise ValueError(f"frame size must be positive, got {frame_size}")
        self.frame_size = frame_size
        self._pending: list[int] = []
        self.frames = 0

    def on_output(self, value: int):
        self._pending.append(value)
        if len(self._pending) == self.frame_size:
            frame = tuple(self._pending)
            self._pending.clear()
            self.frames += 1
            self.on_frame(frame)

    def on_frame(self, frame: tuple[int, ...]):
        """Handle one complete frame. Subclasses override."""

    def on_input(self) -> int | None:
        return None

    @property
    def partial(self) -> tuple[int, ...]:
        """Outputs received since the last complete frame."""
        return tuple(self._pending)


# ---------------------------------------------------------------------------
# Tile screen
# ---------------------------------------------------------------------------

EMPTY, WALL, BLOCK, PADDLE, BALL = range(5)

TILE_GLYPHS = {EMPTY: " ", WALL: "|", BLOCK: "#", PADDLE: "-", BALL: "*"}

SCORE_POSITION = (-1, 0)


def track_ball(display: TileDisplay) -> int:
    """Joystick that keeps the paddle under the ball."""
    if display.ball is None or display.paddle is None:
        return 0
    return int(np.sign(display.ball[0] - display.paddle[0]))


class TileDisplay(FramedDevice):
    """Screen fed with (x, y, tile) frames; (-1, 0, n) sets the score.

    Args:
        joystick: called with the display on each Input request. Returns the
            joystick position (-1, 0, 1), or None to suspend the machine.
    """

    def __init__(self, joystick: Callable[[TileDisplay], int | None] | None = None):
        super().__init__(3)
        self.tiles: dict[tuple[int, int], int] = {}
        self.score = 0
        self.ball: tuple[int, int] | None = None
        self.paddle: tuple[int, int] | None = None
        self.joystick = joystick

    def on_frame(self, frame: tuple[int, ...]):
        x, y, value = frame
        if (x, y) == SCORE_POSITION:
            self.score = value
            return
        if value not in TILE_GLYPHS:
            raise ValueError(f"invalid tile {value} at ({x}, {y})")
        self.tiles[(x, y)] = value
        if value == BALL:
            self.ball = (x, y)
        elif value == PADDLE:
            self.paddle = (x, y)

    def on_input(self) -> int | None:
        if self.joystick is None:
            return None
        return self.joystick(self)

    def count(self, tile: int) -> int:
        return sum(1 for t in self.tiles.values() if t == tile)

    def render(self) -> str:
        visible = {pos: t for pos, t in self.tiles.items() if pos[0] >= 0 and pos[1] >= 0}
        if not visible:
            return ""
        width = max(x for x, _ in visible) + 1
        height = max(y for _, y in visible) + 1
        grid = np.full((height, width), " ", dtype="<U1")
        for (x, y), tile in visible.items():
            grid[y, x] = TILE_GLYPHS[tile]
        return "\n".join("".join(row) for row in grid)


# ---------------------------------------------------------------------------
# Painting robot
# ---------------------------------------------------------------------------

BLACK, WHITE = 0, 1
TURN_LEFT, TURN_RIGHT = 0, 1


class PaintingRobot(FramedDevice):
    """Robot on an infinite grid fed with (colour, turn) frames.

    On Input it reports the colour under itself. After each frame it paints
    the current panel, turns 90 degrees and moves forward one panel. The
    grid uses screen coordinates, so "up" is -y.
    """

    def __init__(self, start_colour: int = BLACK):
        super().__init__(2)
        self.position = (0, 0)
        self.direction = (0, -1)
        self.panels: dict[tuple[int, int], int] = {self.position: start_colour}
        self.painted: set[tuple[int, int]] = set()

    def on_input(self) -> int:
        return self.panels.get(self.position, BLACK)

    def on_frame(self, frame: tuple[int, ...]):
        colour, turn = frame
        if colour not in (BLACK, WHITE):
            raise ValueError(f"invalid colour {colour}")
        self.panels[self.position] = colour
        self.painted.add(self.position)

        dx, dy = self.direction
        if turn == TURN_LEFT:
            self.direction = (dy, -dx)
        elif turn == TURN_RIGHT:
            self.direction = (-dy, dx)
        else:
            raise ValueError(f"invalid turn {turn}")
        x, y = self.position
        self.position = (x + self.direction[0], y + self.direction[1])

    def render(self, glyph: str = "#") -> str:
        white = [pos for pos, colour in self.panels.items() if colour == WHITE]
        if not white:
            return ""
        xs = np.array([x for x, _ in white])
        ys = np.array([y for _, y in white])
        grid = np.full((ys.max() - ys.min() + 1, xs.max() - xs.min() + 1), " ", dtype="<U1")
        grid[ys - ys.min(), xs - xs.min()] = glyph
        return "\n".join("".join(row) for row in grid)
