# Tkinter frontend: window-backed surface + keyboard key source for the snake loop.
from __future__ import annotations

import argparse
import logging
import queue
import random
import threading

import numpy as np
import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .game_logic import SnakeConfig, SnakeGame
    from .snake_loop import SnakeRunner
    from .surface import BufferSurface
except ImportError:
    from game_logic import SnakeConfig, SnakeGame
    from snake_loop import SnakeRunner
    from surface import BufferSurface


logger = logging.getLogger(__name__)

POLL_MS = 40


class QueueKeySource:
    """Key source fed by Tk events; `read_key` blocks the input thread."""
    def __init__(self) -> None:
        self.keys: queue.Queue[str] = queue.Queue()

    def push(self, key: str) -> None:
        self.keys.put(key)

    def read_key(self) -> str:
        return self.keys.get()


class TkScreen(BufferSurface):
    """
    Surface written by the tick thread and shown by the Tk thread.

    Tk widgets may only be touched from the main loop, so each flush posts a
    copy of the buffer to `frame_queue`; `SnakeApp` drains it with `after`.
    """
    def __init__(self, width: int, height: int) -> None:
        super().__init__(width, height, max_frames=1)
        self.frame_queue: queue.Queue[np.ndarray] = queue.Queue()

    def flush(self) -> None:
        super().flush()
        self.frame_queue.put(self.pixels.copy())


def to_hex(rgb: np.ndarray) -> str:
    r, g, b = (int(c) for c in np.rint(np.clip(rgb, 0.0, 1.0) * 255))
    return f"#{r:02x}{g:02x}{b:02x}"


class SnakeApp:
    """Tkinter presentation layer for SnakeRunner."""
    BG = "#101418"
    GRID_COLOR = "#293340"
    TEXT_MUTED = "#95a4b8"

    def __init__(self, root: tk.Tk, config: SnakeConfig, rng: random.Random | None = None) -> None:
        self.root = root
        self.root.title("RGB Snake")
        self.root.configure(bg=self.BG)
        self.root.resizable(False, False)

        self.config = config
        self.screen = TkScreen(config.width, config.height)
        self.keys = QueueKeySource()
        self.runner = SnakeRunner(
            SnakeGame(config, rng),
            self.screen,
            self.keys,
            tick_duration=config.tick_duration,
        )
        self.worker: threading.Thread | None = None
        self.error: Exception | None = None

        self._build_layout()
        self._bind_keys()
        self._draw_frame(self.screen.pixels)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.root.after(POLL_MS, self._poll_frames)

    def _build_layout(self) -> None:
        cell = self.config.cell_size
        self.canvas = tk.Canvas(
            self.root,
            width=self.config.width * cell,
            height=self.config.height * cell,
            bg=self.BG,
            highlightthickness=0,
            bd=0,
        )
        self.canvas.pack(padx=16, pady=(16, 8))

        tk.Label(
            self.root,
            text="Move: Arrow keys / WASD    Exit: Esc",
            fg=self.TEXT_MUTED,
            bg=self.BG,
            font=("Helvetica", 10),
        ).pack(pady=(0, 12))

    def _bind_keys(self) -> None:
        """Forward every key press; the input thread decides what it means."""
        self.root.bind("<KeyPress>", lambda e: self.keys.push(e.keysym))

    def start(self) -> None:
        self.worker = threading.Thread(target=self._run_game, name="snake-ticks", daemon=True)
        self.worker.start()

    def _run_game(self) -> None:
        try:
            self.runner.start()
        except Exception as exc:
            logger.exception("Game crashed")
            self.error = exc

    def _draw_frame(self, pixels: np.ndarray) -> None:
        """Paint one flushed frame; grid row y = 0 is the bottom of the canvas."""
        self.canvas.delete("all")
        cell = self.config.cell_size
        height = self.config.height
        for y in range(height):
            row = (height - 1 - y) * cell
            for x in range(self.config.width):
                self.canvas.create_rectangle(
                    x * cell,
                    row,
                    (x + 1) * cell,
                    row + cell,
                    fill=to_hex(pixels[y, x]),
                    outline=self.GRID_COLOR,
                )

    def _poll_frames(self) -> None:
        latest: np.ndarray | None = None
        try:
            while True:
                latest = self.screen.frame_queue.get_nowait()
        except queue.Empty:
            pass

        if latest is not None:
            self._draw_frame(latest)

        if self.worker is not None and not self.worker.is_alive():
            if self.error is not None:
                messagebox.showerror("Game crashed", str(self.error))
            self.root.destroy()
            return

        self.root.after(POLL_MS, self._poll_frames)

    def _on_close(self) -> None:
        if self.worker is None:
            self.root.destroy()
            return
        self.keys.push("Escape")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = SnakeConfig()

    parser = argparse.ArgumentParser(description="RGB Snake")
    parser.add_argument("--width", type=int, default=defaults.width, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=defaults.height, help="Grid height in cells")
    parser.add_argument("--tick", type=float, default=defaults.tick_duration, help="Seconds per tick")
    parser.add_argument("--cell-size", type=int, default=defaults.cell_size, help="Pixels per cell")
    parser.add_argument("--seed", type=int, default=None, help="Seed for food placement")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> SnakeConfig:
    config = SnakeConfig(
        width=args.width,
        height=args.height,
        tick_duration=args.tick,
        cell_size=args.cell_size,
    )
    try:
        config.validate()
    except ValueError as exc:
        raise SystemExit(f"Invalid setting: {exc}")
    return config


def run_player_gui(argv: list[str] | None = None) -> None:
    """Launch the Snake window."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = config_from_args(args)
    rng = random.Random(args.seed) if args.seed is not None else None

    print("Starting RGB Snake...")
    print()
    try:
        root = tk.Tk()
        app = SnakeApp(root, config, rng)
        print("Started!")
        print("Press the Escape (Esc) key to exit")
        print()
        app.start()
        root.mainloop()
    except Exception:
        logger.exception("Game crashed")
    finally:
        print()
        print("Exiting...")


if __name__ == "__main__":
    run_player_gui()
