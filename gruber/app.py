"""Command that opens the dashboard window."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from gruber.config import DEFAULT_PATH, Config, ConfigError

logger = logging.getLogger(__name__)

TITLE = "Gruber"
DEFAULT_TEXT_SIZE = 24
#: Milliseconds between checks for stale data
CHECK_INTERVAL_MS = 1000
#: Milliseconds between checks for finished fetches
POLL_INTERVAL_MS = 100


def window_geometry(config: Config) -> str:
    """A Tk geometry string for the configured window size and position."""
    width, height = config.window_size
    geometry = f"{round(width)}x{round(height)}"
    if config.window_position is not None:
        x, y = config.window_position
        geometry += f"+{round(x)}+{round(y)}"
    return geometry


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="gruber", description="Touchscreen dashboard")
    parser.add_argument("--config", default=DEFAULT_PATH, help="path of the JSON config file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        config = Config.load(args.config)
    except (OSError, ConfigError) as exc:
        print(f"gruber: {exc}", file=sys.stderr)
        return 1

    import tkinter as tk
    from tkinter import font

    from gruber.state import State
    from gruber.view import DashboardView

    root = tk.Tk()
    root.title(TITLE)
    root.geometry(window_geometry(config))
    root.resizable(False, False)
    font.nametofont("TkDefaultFont").configure(size=DEFAULT_TEXT_SIZE)

    state = State(config)
    view = DashboardView(root, state)

    def check() -> None:
        state.check_data()
        view.refresh()
        root.after(CHECK_INTERVAL_MS, check)

    def poll() -> None:
        if state.apply_results():
            view.refresh()
        root.after(POLL_INTERVAL_MS, poll)

    check()
    poll()
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())