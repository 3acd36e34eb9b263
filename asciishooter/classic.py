"""The first shooter: a ray-cast maze read from a map file."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .engine import ConsoleGameEngine, EngineError
from .raycaster import (
    MAP_HEIGHT,
    MAP_WIDTH,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Player,
    World,
    apply_controls,
    load_map,
    render_frame,
)

_CONTROL_KEYS = "ADWS"


class _ClassicGame(ConsoleGameEngine):
    def __init__(self, world: World, width: int, height: int) -> None:
        super().__init__("Shooter")
        self.world = world
        self.player = Player()
        self.construct_console(width, height)

    def on_user_create(self) -> bool:
        return True

    def on_user_update(self, elapsed: float) -> bool:
        held = {k for k in _CONTROL_KEYS if self.key(ord(k)).held}
        apply_controls(self.world, self.player, held, elapsed)
        self.screen = render_frame(
            self.world, self.player, self.width, self.height, elapsed
        )
        return True


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line."""
    parser = argparse.ArgumentParser(description="Walk a maze drawn in text.")
    parser.add_argument("map", nargs="?", default="Location1.txt", help="map file")
    parser.add_argument("--width", type=int, default=SCREEN_WIDTH)
    parser.add_argument("--height", type=int, default=SCREEN_HEIGHT)
    parser.add_argument("--map-width", type=int, default=MAP_WIDTH)
    parser.add_argument("--map-height", type=int, default=MAP_HEIGHT)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game until interrupted; return the exit status."""
    args = parse_args(argv)
    try:
        world = load_map(args.map, args.map_width, args.map_height)
    except (OSError, ValueError) as exc:
        print(f"error: cannot load map {args.map}: {exc}", file=sys.stderr)
        return 1
    try:
        game = _ClassicGame(world, args.width, args.height)
        game.start()
    except EngineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())