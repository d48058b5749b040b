# Pixel surface contract plus a numpy-backed in-memory implementation.
from __future__ import annotations

from collections import deque
from typing import Protocol

import numpy as np

try:
    from .game_logic import Color, Point
except ImportError:
    from game_logic import Color, Point


class Surface(Protocol):
    width: int
    height: int

    def set_color(self, point: Point, color: Color) -> None: ...

    def flush(self) -> None: ...


def fill(surface: Surface, color: Color) -> None:
    """Paint every cell of the surface with one color."""
    for y in range(surface.height):
        for x in range(surface.width):
            surface.set_color((x, y), color)


class BufferSurface:
    """
    In-memory surface that keeps its pixels in a numpy array.

    The buffer has shape (height, width, 3) and is indexed [y, x], with y = 0
    the bottom row of the grid. Every flush stores a copy of the buffer in
    `frames` (most recent last).
    """
    def __init__(self, width: int, height: int, max_frames: int = 256) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float32)
        self.frames: deque[np.ndarray] = deque(maxlen=max_frames)
        self.flush_count = 0

    def set_color(self, point: Point, color: Color) -> None:
        x, y = point
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Point {point} is outside a {self.width}x{self.height} surface")
        self.pixels[y, x] = color

    def color_at(self, point: Point) -> Color:
        x, y = point
        r, g, b = self.pixels[y, x]
        return float(r), float(g), float(b)

    def flush(self) -> None:
        self.frames.append(self.pixels.copy())
        self.flush_count += 1
