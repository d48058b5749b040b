# Draws a game state onto a surface; never mutates the state.
from __future__ import annotations

try:
    from .game_logic import (
        COLOR_BACKGROUND,
        COLOR_BODY,
        COLOR_HEAD,
        SPAWN_POINT,
        DeathAnimation,
        GameState,
        Gameplay,
        StartAnimation,
    )
    from .surface import Surface, fill
except ImportError:
    from game_logic import (
        COLOR_BACKGROUND,
        COLOR_BODY,
        COLOR_HEAD,
        SPAWN_POINT,
        DeathAnimation,
        GameState,
        Gameplay,
        StartAnimation,
    )
    from surface import Surface, fill


def _draw_row(surface: Surface, y: int) -> None:
    if not (0 <= y < surface.height):
        return
    for x in range(surface.width):
        surface.set_color((x, y), COLOR_BODY)


def render(state: GameState, surface: Surface) -> None:
    """Paint one frame for `state` and flush it exactly once."""
    if isinstance(state, StartAnimation):
        fill(surface, COLOR_BACKGROUND)
        if state.tick < surface.height // 2:
            # Two rows per tick sweep up the grid.
            _draw_row(surface, state.tick * 2)
            _draw_row(surface, state.tick * 2 + 1)
        elif (state.tick - surface.height) % 2 == 0:
            surface.set_color(SPAWN_POINT, COLOR_HEAD)

    elif isinstance(state, Gameplay):
        fill(surface, COLOR_BACKGROUND)
        if state.food is not None:
            surface.set_color(state.food.position, state.food.color)
        for segment in state.segments:
            surface.set_color(segment.position, segment.color)

    elif isinstance(state, DeathAnimation):
        fill(surface, COLOR_BACKGROUND)
        if state.tick % 2 == 0:
            surface.set_color(state.head.position, state.head.color)
        for segment in state.body:
            surface.set_color(segment.position, segment.color)

    surface.flush()
