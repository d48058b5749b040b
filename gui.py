# Script launcher for the Snake window; forwards command-line arguments.
from __future__ import annotations

import sys

try:
    from .snake_gui import run_player_gui
except ImportError:
    from snake_gui import run_player_gui


def main() -> None:
    run_player_gui(sys.argv[1:])


if __name__ == "__main__":
    main()
