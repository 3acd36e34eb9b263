"""Sprites: grids of glyphs and colours, with a simple binary file format."""

from __future__ import annotations

import os
import struct
from typing import Union

from .colours import Colour

_SPACE = ord(" ")
_HEADER = struct.Struct("<ii")
_FALLBACK_SIZE = 8

Glyph = Union[int, str]


def _code(c: Glyph) -> int:
    """Return the 16-bit code of a glyph given as an int or one-character str."""
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError(f"glyph must be a single character, got {c!r}")
        c = ord(c)
    return int(c) & 0xFFFF


class Sprite:
    """A width x height grid of glyph codes and colour attributes."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"sprite size must not be negative: {width}x{height}")
        self.width = width
        self.height = height
        self._glyphs = [_SPACE] * (width * height)
        self._colours = [int(Colour.FG_BLACK)] * (width * height)

    def __repr__(self) -> str:
        return f"Sprite(width={self.width}, height={self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sprite):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self._glyphs == other._glyphs
            and self._colours == other._colours
        )

    def _index(self, x: int, y: int) -> int | None:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def set_glyph(self, x: int, y: int, c: Glyph) -> None:
        """Set the glyph at (x, y); positions outside the sprite are ignored."""
        index = self._index(x, y)
        if index is not None:
            self._glyphs[index] = _code(c)

    def set_colour(self, x: int, y: int, c: int) -> None:
        """Set the colour at (x, y); positions outside the sprite are ignored."""
        index = self._index(x, y)
        if index is not None:
            self._colours[index] = int(c) & 0xFFFF

    def glyph(self, x: int, y: int) -> int:
        """Glyph code at (x, y), or a space outside the sprite."""
        index = self._index(x, y)
        return _SPACE if index is None else self._glyphs[index]

    def colour(self, x: int, y: int) -> int:
        """Colour at (x, y), or black outside the sprite."""
        index = self._index(x, y)
        return int(Colour.FG_BLACK) if index is None else self._colours[index]

    def _sample_index(self, x: float, y: float) -> int | None:
        sx = int(x * float(self.width))
        sy = int(y * float(self.height) - 1.0)
        return self._index(sx, sy)

    def sample_glyph(self, x: float, y: float) -> int:
        """Glyph at normalised coordinates, or a space outside the sprite."""
        index = self._sample_index(x, y)
        return _SPACE if index is None else self._glyphs[index]

    def sample_colour(self, x: float, y: float) -> int:
        """Colour at normalised coordinates, or black outside the sprite."""
        index = self._sample_index(x, y)
        return int(Colour.FG_BLACK) if index is None else self._colours[index]

    def to_bytes(self) -> bytes:
        """Serialise: width, height, then all colours, then all glyphs."""
        cells = self.width * self.height
        body = struct.pack(f"<{cells}H{cells}H", *self._colours, *self._glyphs)
        return _HEADER.pack(self.width, self.height) + body

    @classmethod
    def from_bytes(cls, data: bytes) -> Sprite:
        """Build a sprite from its serialised form."""
        if len(data) < _HEADER.size:
            raise ValueError("sprite data too short for header")
        width, height = _HEADER.unpack_from(data)
        sprite = cls(width, height)
        cells = width * height
        expected = _HEADER.size + 4 * cells
        if len(data) < expected:
            raise ValueError(
                f"sprite data truncated: expected {expected} bytes, got {len(data)}"
            )
        values = struct.unpack_from(f"<{cells}H{cells}H", data, _HEADER.size)
        sprite._colours = list(values[:cells])
        sprite._glyphs = list(values[cells:])
        return sprite

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the sprite to a file."""
        with open(path, "wb") as handle:
            handle.write(self.to_bytes())


def read_sprite(path: str | os.PathLike[str]) -> Sprite:
    """Read a sprite file, raising OSError or ValueError on failure."""
    with open(path, "rb") as handle:
        return Sprite.from_bytes(handle.read())


def load_sprite(path: str | os.PathLike[str]) -> Sprite:
    """Read a sprite file, falling back to a blank 8x8 sprite if it cannot be read."""
    try:
        return read_sprite(path)
    except (OSError, ValueError):
        return Sprite(_FALLBACK_SIZE, _FALLBACK_SIZE)