# Core Snake game state and rules, independent from rendering/input code.
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import random
from typing import Union


# Bounds used by the launcher when validating user input.
MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 60
MIN_CELL_SIZE = 12
MAX_CELL_SIZE = 96
MIN_TICK_SECONDS = 0.05
MAX_TICK_SECONDS = 5.0

TICK_DURATION = 0.5

Point = tuple[int, int]
Color = tuple[float, float, float]

COLOR_HEAD: Color = (1.0, 0.0, 0.0)
COLOR_BODY: Color = (1.0, 1.0, 1.0)
COLOR_FOOD: Color = (0.0, 1.0, 0.0)
COLOR_BACKGROUND: Color = (0.0, 0.0, 0.0)

SPAWN_POINT: Point = (0, 0)
INITIAL_DELAYED_SEGMENTS = 2
START_ANIMATION_HOLD = 3      # extra ticks of spawn-point blinking after the sweep
DEATH_ANIMATION_TICKS = 5


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# y grows upward: the spawn point (0, 0) is the bottom-left cell.
OFFSETS: dict[Direction, Point] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


def opposite_direction(direction: Direction) -> Direction:
    return OPPOSITES[direction]


def direction_offset(direction: Direction) -> Point:
    return OFFSETS[direction]


def add_offset(point: Point, offset: Point) -> Point:
    return point[0] + offset[0], point[1] + offset[1]


@dataclass(frozen=True)
class Segment:
    position: Point
    color: Color


@dataclass(frozen=True)
class Food:
    position: Point
    color: Color = COLOR_FOOD


@dataclass(frozen=True)
class StartAnimation:
    """Intro sweep followed by the spawn point blinking."""
    tick: int = 0


@dataclass(frozen=True)
class Gameplay:
    """Live snake. segments[0] is the head, the last entry is the tail."""
    segments: tuple[Segment, ...]
    food: Food | None = None
    direction: Direction = Direction.UP
    delayed_segments: int = INITIAL_DELAYED_SEGMENTS

    @property
    def head(self) -> Segment:
        return self.segments[0]

    def occupies(self, point: Point) -> bool:
        return any(segment.position == point for segment in self.segments)


@dataclass(frozen=True)
class DeathAnimation:
    """Blinking head over the frozen body of the snake that just died."""
    head: Segment
    body: tuple[Segment, ...]
    tick: int = 0


@dataclass(frozen=True)
class Exit:
    """Terminal state; also the only cross-thread cancellation signal."""


GameState = Union[StartAnimation, Gameplay, DeathAnimation, Exit]


def initial_state() -> GameState:
    return StartAnimation(-1)


@dataclass
class SnakeConfig:
    """Runtime settings shared between the rules, the loop and the frontend."""
    width: int = 4
    height: int = 10
    tick_duration: float = TICK_DURATION
    cell_size: int = 48

    def validate(self) -> None:
        for label, value in (("Width", self.width), ("Height", self.height)):
            if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
                raise ValueError(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
        if not (MIN_CELL_SIZE <= self.cell_size <= MAX_CELL_SIZE):
            raise ValueError(f"Cell size must be between {MIN_CELL_SIZE} and {MAX_CELL_SIZE}.")
        if not (MIN_TICK_SECONDS <= self.tick_duration <= MAX_TICK_SECONDS):
            raise ValueError(f"Tick must be between {MIN_TICK_SECONDS} and {MAX_TICK_SECONDS} seconds.")


class SnakeGame:
    """Pure transition rules over immutable game states (no rendering/threads)."""
    def __init__(self, config: SnakeConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random()

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_head_position(self, gameplay: Gameplay, point: Point) -> bool:
        """The head may not leave the grid or enter any pre-move segment (tail included)."""
        return self._in_bounds(*point) and not gameplay.occupies(point)

    def free_cells(self, gameplay: Gameplay) -> list[Point]:
        """Unoccupied cells in row-major order."""
        occupied = {segment.position for segment in gameplay.segments}
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in occupied
        ]

    def spawn_food(self, gameplay: Gameplay) -> Gameplay:
        """Place food on a random free cell; a full board leaves food unset."""
        if gameplay.food is not None:
            return gameplay
        candidates = self.free_cells(gameplay)
        if not candidates:
            return gameplay
        return replace(gameplay, food=Food(self.rng.choice(candidates), COLOR_FOOD))

    def update(self, state: GameState, requested_direction: Direction) -> GameState:
        """Advance one tick."""
        if isinstance(state, StartAnimation):
            if state.tick > self.height // 2 + START_ANIMATION_HOLD:
                return Gameplay((Segment(SPAWN_POINT, COLOR_HEAD),))
            return replace(state, tick=state.tick + 1)

        if isinstance(state, Gameplay):
            return self._advance_snake(state, requested_direction)

        if isinstance(state, DeathAnimation):
            if state.tick > DEATH_ANIMATION_TICKS:
                return StartAnimation(0)
            return replace(state, tick=state.tick + 1)

        return state

    def _advance_snake(self, gameplay: Gameplay, requested_direction: Direction) -> GameState:
        direction = requested_direction
        # Reversing straight into the neck is never allowed.
        if direction == opposite_direction(gameplay.direction):
            direction = gameplay.direction

        segments = gameplay.segments
        new_head = add_offset(segments[0].position, direction_offset(direction))
        if not self.is_valid_head_position(gameplay, new_head):
            return DeathAnimation(segments[0], segments[1:])

        # Checked against the pre-move body, so food is eaten one tick after
        # the head reaches it.
        food_eaten = gameplay.food is not None and gameplay.occupies(gameplay.food.position)

        moved = [replace(segments[0], position=new_head)]
        moved.extend(
            replace(segments[i], position=segments[i - 1].position)
            for i in range(1, len(segments))
        )
        if gameplay.delayed_segments > 0 or food_eaten:
            moved.append(Segment(segments[-1].position, COLOR_BODY))

        return self.spawn_food(
            Gameplay(
                tuple(moved),
                None if food_eaten else gameplay.food,
                direction,
                gameplay.delayed_segments if food_eaten else max(0, gameplay.delayed_segments - 1),
            )
        )
