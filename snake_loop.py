# Fixed-rate tick loop + blocking input thread sharing one lock-guarded game state.
from __future__ import annotations

import logging
import os
import threading
import time
from typing import Callable, Protocol

try:
    from .game_logic import (
        TICK_DURATION,
        Direction,
        Exit,
        GameState,
        Gameplay,
        SnakeGame,
        initial_state,
    )
    from .render import render
    from .surface import Surface
except ImportError:
    from game_logic import (
        TICK_DURATION,
        Direction,
        Exit,
        GameState,
        Gameplay,
        SnakeGame,
        initial_state,
    )
    from render import render
    from surface import Surface


logger = logging.getLogger(__name__)

# Key names are matched case-insensitively (Tk keysyms: "Up", "w", "W", ...).
KEY_BINDINGS = {
    "up": Direction.UP,
    "w": Direction.UP,
    "down": Direction.DOWN,
    "s": Direction.DOWN,
    "left": Direction.LEFT,
    "a": Direction.LEFT,
    "right": Direction.RIGHT,
    "d": Direction.RIGHT,
}
EXIT_KEYS = frozenset({"escape"})


class KeySource(Protocol):
    def read_key(self) -> str: ...


def key_to_direction(key: str) -> Direction | None:
    return KEY_BINDINGS.get(key.lower())


def is_exit_key(key: str) -> bool:
    return key.lower() in EXIT_KEYS


class SnakeRunner:
    """
    Owns the shared game state and drives it from two threads.

    The tick loop (caller's thread, see `start`) snapshots the state and the
    latest requested direction, computes the next state outside the lock,
    publishes it unless an exit was requested meanwhile, and then renders it.
    The input thread (`run_input`) only ever writes the requested direction or
    the `Exit` state. Both fields live behind a single lock.
    """
    def __init__(
        self,
        game: SnakeGame,
        surface: Surface,
        key_source: KeySource,
        tick_duration: float | None = None,
        join_timeout: float = 0.5,
        grace_timeout: float = 5.0,
        terminate: Callable[[int], None] = os._exit,
        initial: GameState | None = None,
    ) -> None:
        self.game = game
        self.surface = surface
        self.key_source = key_source
        self.tick_duration = TICK_DURATION if tick_duration is None else tick_duration
        self.join_timeout = join_timeout
        self.grace_timeout = grace_timeout
        self.terminate = terminate

        # Shared with the input thread.
        self._lock = threading.Lock()
        self._state: GameState = initial_state() if initial is None else initial
        self._requested_direction = Direction.UP

        self.ticks = 0  # published transitions
        self.input_thread: threading.Thread | None = None

    @property
    def state(self) -> GameState:
        with self._lock:
            return self._state

    @property
    def requested_direction(self) -> Direction:
        with self._lock:
            return self._requested_direction

    def snapshot(self) -> tuple[GameState, Direction]:
        """Read state and requested direction together."""
        with self._lock:
            return self._state, self._requested_direction

    def request_direction(self, direction: Direction) -> None:
        with self._lock:
            self._requested_direction = direction

    def request_exit(self) -> None:
        with self._lock:
            self._state = Exit()

    def is_exiting(self) -> bool:
        with self._lock:
            return isinstance(self._state, Exit)

    def tick(self) -> bool:
        """Run one transition + render. Returns False once the loop must stop."""
        state, direction = self.snapshot()
        if isinstance(state, Exit):
            return False

        next_state = self.game.update(state, direction)

        with self._lock:
            if isinstance(self._state, Exit):
                return False
            self._state = next_state
            # Drop requests the rules rejected (e.g. a reversal) so they cannot
            # apply on a later tick.
            if isinstance(next_state, Gameplay):
                self._requested_direction = next_state.direction
            self.ticks += 1

        render(next_state, self.surface)
        return True

    def run_input(self) -> None:
        """Input thread body: block on keys until Escape, a fault, or an exit elsewhere."""
        try:
            while not self.is_exiting():
                key = self.key_source.read_key()
                if is_exit_key(key):
                    self.request_exit()
                    break
                direction = key_to_direction(key)
                if direction is not None:
                    self.request_direction(direction)
        except Exception:
            logger.exception("Input thread crashed")
        finally:
            self.request_exit()

    def start(self) -> None:
        """Run the tick loop on the calling thread until the game exits."""
        self.input_thread = threading.Thread(target=self.run_input, name="snake-input", daemon=True)
        self.input_thread.start()
        logger.info(
            "Snake started on a %dx%d surface (tick %.2fs)",
            self.surface.width,
            self.surface.height,
            self.tick_duration,
        )
        try:
            while not self.is_exiting():
                time.sleep(self.tick_duration)
                if not self.tick():
                    break
        finally:
            self.request_exit()
            self._join_input_thread()
            logger.info("Snake stopped after %d ticks", self.ticks)

    def _join_input_thread(self) -> None:
        thread = self.input_thread
        if thread is None:
            return

        # A blocked key read cannot be interrupted, so wait for one more key
        # and then give up on the process.
        thread.join(timeout=self.join_timeout)
        if not thread.is_alive():
            return
        logger.warning("Press any key to exit")
        thread.join(timeout=self.grace_timeout)
        if thread.is_alive():
            logger.error("Input thread did not stop within %.1fs; terminating", self.grace_timeout)
            self.terminate(1)
