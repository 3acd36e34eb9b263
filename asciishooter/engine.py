"""A frame loop for character-cell games running in a terminal."""

from __future__ import annotations

import abc
import itertools
import time
from collections.abc import Iterable
from dataclasses import dataclass, replace

from .audio import Mixer
from .canvas import Canvas

_KEY_COUNT = 256
_HOLD_SECONDS = 0.12
_DEFAULT_WIDTH = 80
_DEFAULT_HEIGHT = 30

_NAMED_KEYS = {
    "KEY_LEFT": 0x25,
    "KEY_UP": 0x26,
    "KEY_RIGHT": 0x27,
    "KEY_DOWN": 0x28,
    "KEY_ESCAPE": 0x1B,
    "KEY_ENTER": 0x0D,
    "KEY_TAB": 0x09,
    "KEY_BACKSPACE": 0x08,
}


class EngineError(RuntimeError):
    """Raised when the console cannot be set up as requested."""


@dataclass
class KeyState:
    """Whether a key went down or up this frame, and whether it is held."""

    pressed: bool = False
    released: bool = False
    held: bool = False


def _ansi(console_colour: int) -> int:
    """Map a 4-bit console colour (blue=1, red=4) to the ANSI order (red=1, blue=4)."""
    return (
        ((console_colour & 1) << 2)
        | (console_colour & 2)
        | ((console_colour & 4) >> 2)
        | (console_colour & 8)
    )


class ConsoleGameEngine(abc.ABC):
    """Base class for games: subclasses draw on self.screen in on_user_update."""

    def __init__(self, app_name: str = "Default") -> None:
        self.app_name = app_name
        self.screen = Canvas(_DEFAULT_WIDTH, _DEFAULT_HEIGHT)
        self.sound_enabled = False
        self.mixer: Mixer | None = None
        self._keys = [KeyState() for _ in range(_KEY_COUNT)]
        self._old_keys = [False] * _KEY_COUNT
        self._last_seen: dict[int, float] = {}
        self._active = False

    @property
    def width(self) -> int:
        return self.screen.width

    @property
    def height(self) -> int:
        return self.screen.height

    def construct_console(self, width: int, height: int) -> None:
        """Set the size of the character screen and clear it."""
        if width <= 0 or height <= 0:
            raise EngineError(f"screen size must be positive, got {width}x{height}")
        self.screen = Canvas(width, height)

    def enable_sound(self) -> None:
        """Turn on the sound mixer."""
        self.sound_enabled = True
        if self.mixer is None:
            self.mixer = Mixer()

    def update_keys(self, pressed: Iterable[int]) -> None:
        """Feed the set of key ids held down this frame and update key states."""
        down = {k for k in pressed if 0 <= k < _KEY_COUNT}
        for key_id, state in enumerate(self._keys):
            new = key_id in down
            state.pressed = False
            state.released = False
            if new != self._old_keys[key_id]:
                if new:
                    state.pressed = not state.held
                    state.held = True
                else:
                    state.released = True
                    state.held = False
            self._old_keys[key_id] = new

    def key(self, key_id: int) -> KeyState:
        """State of a key: upper-case character code or virtual key code."""
        return replace(self._keys[key_id])

    @abc.abstractmethod
    def on_user_create(self) -> bool:
        """Set up the game; return False to stop before the first frame."""

    @abc.abstractmethod
    def on_user_update(self, elapsed: float) -> bool:
        """Advance and draw one frame; return False to stop."""

    def on_user_destroy(self) -> bool:
        """Clean up on exit; return False to keep running."""
        return True

    def step(self, elapsed: float) -> bool:
        """Run one frame update and report whether the game goes on."""
        keep_going = bool(self.on_user_update(elapsed))
        if not keep_going:
            self._active = False
        return keep_going

    def title(self, elapsed: float) -> str:
        """Window title showing the application name and frame rate."""
        fps = 1.0 / elapsed if elapsed else float("inf")
        return f"Console Game Engine - {self.app_name} - FPS: {fps:3.2f}"

    def render(self) -> str:
        """The screen as plain text, one line per row."""
        return "\n".join(self.screen.rows())

    def _poll_keys(self, term, now: float) -> set[int]:
        while True:
            keystroke = term.inkey(timeout=0)
            if not keystroke:
                break
            if keystroke.is_sequence:
                key_id = _NAMED_KEYS.get(keystroke.name or "")
            else:
                code = ord(str(keystroke).upper()[0])
                key_id = code if code < _KEY_COUNT else None
            if key_id is not None:
                self._last_seen[key_id] = now
        return {k for k, seen in self._last_seen.items() if now - seen <= _HOLD_SECONDS}

    def _paint(self, term) -> str:
        parts = []
        for y in range(self.screen.height):
            parts.append(term.move_xy(0, y))
            cells = (
                (self.screen.glyph(x, y), self.screen.colour(x, y))
                for x in range(self.screen.width)
            )
            for colour, group in itertools.groupby(cells, key=lambda cell: cell[1]):
                text = "".join(chr(g) if g else " " for g, _ in group)
                fg = _ansi(colour & 0x0F)
                bg = _ansi((colour >> 4) & 0x0F)
                parts.append(term.color(fg) + term.on_color(bg) + text + term.normal)
        return "".join(parts)

    def _present(self, term, elapsed: float) -> None:
        stream = term.stream
        stream.write(f"\x1b]0;{self.title(elapsed)}\x07")
        stream.write(self._paint(term))
        stream.flush()

    def start(self) -> None:
        """Run the game in the terminal until it stops or Ctrl-C is pressed."""
        from blessed import Terminal

        term = Terminal()
        if self.screen.height > term.height:
            raise EngineError("Screen Height Too Big")
        if self.screen.width > term.width:
            raise EngineError("Screen Width Too Big")

        self._active = bool(self.on_user_create())
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            last = time.perf_counter()
            while True:
                try:
                    while self._active:
                        now = time.perf_counter()
                        elapsed, last = now - last, now
                        self.update_keys(self._poll_keys(term, now))
                        if not self.step(elapsed):
                            break
                        self._present(term, elapsed)
                except KeyboardInterrupt:
                    self._active = False
                if self.on_user_destroy():
                    break
                self._active = True