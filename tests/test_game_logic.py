import random
from unittest.mock import MagicMock

import pytest

from game_logic import (
    COLOR_BODY,
    COLOR_FOOD,
    COLOR_HEAD,
    DeathAnimation,
    Direction,
    Exit,
    Food,
    Gameplay,
    Segment,
    SnakeConfig,
    SnakeGame,
    StartAnimation,
    initial_state,
    opposite_direction,
)


def make_game(width=5, height=5, rng=None):
    return SnakeGame(SnakeConfig(width=width, height=height), rng or random.Random(0))


def snake(*positions):
    head, *body = positions
    return (Segment(head, COLOR_HEAD),) + tuple(Segment(p, COLOR_BODY) for p in body)


def positions(state):
    return [segment.position for segment in state.segments]


def test_opposite_direction_is_symmetric():
    for direction in Direction:
        assert opposite_direction(opposite_direction(direction)) == direction
        assert opposite_direction(direction) != direction


def test_start_animation_counts_up_then_spawns_snake():
    game = make_game(width=4, height=10)

    assert game.update(StartAnimation(8), Direction.UP) == StartAnimation(9)

    state = game.update(StartAnimation(9), Direction.LEFT)
    assert state == Gameplay(snake((0, 0)), None, Direction.UP, 2)


def test_initial_state_reaches_gameplay_after_sweep():
    game = make_game(width=4, height=10)
    state = initial_state()
    assert state == StartAnimation(-1)

    # -1 -> 9 takes ten ticks, the eleventh leaves the animation (9 > 10 // 2 + 3).
    for _ in range(10):
        state = game.update(state, Direction.UP)
        assert isinstance(state, StartAnimation)
    assert state.tick == 9

    state = game.update(state, Direction.UP)
    assert isinstance(state, Gameplay)
    assert positions(state) == [(0, 0)]
    assert state.direction == Direction.UP
    assert state.delayed_segments == 2
    assert state.food is None


def test_reverse_request_is_ignored():
    game = make_game()
    state = Gameplay(snake((2, 2)), Food((4, 4)), Direction.RIGHT, 0)

    nxt = game.update(state, Direction.LEFT)

    assert nxt.direction == Direction.RIGHT
    assert positions(nxt) == [(3, 2)]


def test_body_follows_the_head():
    game = make_game()
    state = Gameplay(snake((2, 2), (2, 1), (2, 0)), Food((4, 4)), Direction.UP, 0)

    nxt = game.update(state, Direction.RIGHT)

    assert positions(nxt) == [(3, 2), (2, 2), (2, 1)]
    assert [s.color for s in nxt.segments] == [COLOR_HEAD, COLOR_BODY, COLOR_BODY]
    assert nxt.direction == Direction.RIGHT
    assert nxt.food == Food((4, 4))


def test_delayed_segments_grow_then_length_holds():
    game = make_game()
    state = Gameplay(snake((0, 0)), Food((4, 4)), Direction.UP, 2)

    state = game.update(state, Direction.UP)
    assert positions(state) == [(0, 1), (0, 0)]
    assert state.delayed_segments == 1

    state = game.update(state, Direction.UP)
    assert positions(state) == [(0, 2), (0, 1), (0, 0)]
    assert state.delayed_segments == 0

    state = game.update(state, Direction.UP)
    assert positions(state) == [(0, 3), (0, 2), (0, 1)]
    assert state.delayed_segments == 0


def test_food_is_eaten_one_tick_after_the_head_arrives():
    game = make_game()
    state = Gameplay(snake((2, 2)), Food((2, 3)), Direction.UP, 0)

    state = game.update(state, Direction.UP)
    assert positions(state) == [(2, 3)]
    assert state.food == Food((2, 3))

    state = game.update(state, Direction.UP)
    assert positions(state) == [(2, 4), (2, 3)]
    assert state.segments[-1].color == COLOR_BODY
    assert state.food is not None
    assert state.food.position not in positions(state)
    assert state.food.color == COLOR_FOOD


def test_eating_keeps_pending_growth():
    game = make_game()
    state = Gameplay(snake((2, 3), (2, 2)), Food((2, 3)), Direction.UP, 2)

    nxt = game.update(state, Direction.UP)

    assert positions(nxt) == [(2, 4), (2, 3), (2, 2)]
    assert nxt.delayed_segments == 2
    assert nxt.food is not None and nxt.food.position != (2, 3)


@pytest.mark.parametrize(
    "head, direction",
    [
        ((0, 2), Direction.UP),
        ((1, 0), Direction.DOWN),
        ((0, 1), Direction.LEFT),
        ((2, 1), Direction.RIGHT),
    ],
)
def test_moving_into_a_wall_starts_death_animation(head, direction):
    game = make_game(width=3, height=3)
    state = Gameplay(snake(head), None, direction, 0)

    nxt = game.update(state, direction)

    assert nxt == DeathAnimation(Segment(head, COLOR_HEAD), ())


def test_moving_into_the_body_starts_death_animation():
    game = make_game()
    segments = snake((1, 1), (2, 1), (2, 2), (1, 2))
    state = Gameplay(segments, None, Direction.LEFT, 0)

    nxt = game.update(state, Direction.UP)

    assert isinstance(nxt, DeathAnimation)
    assert nxt.head == segments[0]
    assert nxt.body == segments[1:]
    assert nxt.tick == 0


@pytest.mark.parametrize("requested", list(Direction))
def test_single_cell_grid_always_dies(requested):
    game = make_game(width=1, height=1)
    state = Gameplay(snake((0, 0)), None, Direction.UP, 0)

    assert game.update(state, requested) == DeathAnimation(Segment((0, 0), COLOR_HEAD), ())


def test_death_animation_restarts_after_six_ticks():
    game = make_game()
    state = DeathAnimation(Segment((0, 0), COLOR_HEAD), ())

    for expected_tick in range(1, 7):
        state = game.update(state, Direction.UP)
        assert state == DeathAnimation(Segment((0, 0), COLOR_HEAD), (), expected_tick)

    assert game.update(state, Direction.UP) == StartAnimation(0)


def test_exit_is_terminal():
    game = make_game()
    state = Exit()
    assert game.update(state, Direction.LEFT) is state


def test_full_board_leaves_food_unset():
    game = make_game(width=3, height=1)
    state = Gameplay(snake((1, 0), (0, 0)), None, Direction.RIGHT, 1)

    nxt = game.update(state, Direction.RIGHT)

    assert positions(nxt) == [(2, 0), (1, 0), (0, 0)]
    assert nxt.food is None


def test_food_spawns_among_free_cells_in_row_major_order():
    rng = MagicMock()
    rng.choice.side_effect = lambda cells: cells[-1]
    game = make_game(width=2, height=2, rng=rng)
    state = Gameplay(snake((0, 0)), None, Direction.UP, 0)

    nxt = game.update(state, Direction.UP)

    rng.choice.assert_called_once_with([(0, 0), (1, 0), (1, 1)])
    assert nxt.food == Food((1, 1), COLOR_FOOD)


def test_seeded_spawns_are_reproducible():
    state = Gameplay(snake((0, 0)), None, Direction.UP, 0)
    first = make_game(rng=random.Random(42)).update(state, Direction.UP)
    second = make_game(rng=random.Random(42)).update(state, Direction.UP)
    assert first.food == second.food


def test_random_play_keeps_board_invariants():
    rng = random.Random(7)
    game = make_game(width=6, height=6, rng=random.Random(11))
    state = Gameplay(snake((0, 0)), None, Direction.UP, 2)
    seen_gameplay = 0

    for _ in range(2000):
        previous = state
        state = game.update(state, rng.choice(list(Direction)))
        if not isinstance(state, Gameplay):
            continue
        seen_gameplay += 1
        cells = positions(state)
        assert len(cells) == len(set(cells))
        assert all(0 <= x < 6 and 0 <= y < 6 for x, y in cells)
        if state.food is not None:
            # Only the head may sit on food, during the tick before it is eaten.
            assert state.food.position not in cells[1:]
            previous_food = previous.food if isinstance(previous, Gameplay) else None
            if state.food != previous_food:
                assert state.food.position not in cells
        if isinstance(previous, Gameplay):
            assert len(cells) >= len(previous.segments)
            assert state.delayed_segments <= previous.delayed_segments

    assert seen_gameplay > 0


def test_config_validation():
    SnakeConfig(width=1, height=1).validate()
    with pytest.raises(ValueError):
        SnakeConfig(width=0).validate()
    with pytest.raises(ValueError):
        SnakeConfig(tick_duration=0.0).validate()
    with pytest.raises(ValueError):
        SnakeConfig(cell_size=1).validate()
