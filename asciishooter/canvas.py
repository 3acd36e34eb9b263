"""An off-screen character buffer with drawing primitives."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .colours import Colour, Pixel
from .sprite import Glyph, Sprite

_SPACE = ord(" ")
_WHITE = int(Colour.FG_WHITE)
_SOLID = int(Pixel.SOLID)


def _glyph_value(c: Glyph) -> int:
    """Turn a one-character string or an integer-like glyph into its code point."""
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError(f"a glyph must be a single character, got {c!r}")
        return ord(c)
    return int(c)


class Canvas:
    """A width x height grid of glyph codes and colours, initially all zero."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"canvas size must not be negative: {width}x{height}")
        self.width = width
        self.height = height
        self._glyphs = [0] * (width * height)
        self._colours = [0] * (width * height)

    def __repr__(self) -> str:
        return f"Canvas(width={self.width}, height={self.height})"

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) is outside the canvas")
        return y * self.width + x

    def draw(self, x: int, y: int, c: Glyph = _SOLID, col: int = _WHITE) -> None:
        """Set one cell; positions outside the canvas are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            index = y * self.width + x
            self._glyphs[index] = _glyph_value(c)
            self._colours[index] = int(col)

    def glyph(self, x: int, y: int) -> int:
        """Glyph code at (x, y)."""
        return self._glyphs[self._index(x, y)]

    def colour(self, x: int, y: int) -> int:
        """Colour attribute at (x, y)."""
        return self._colours[self._index(x, y)]

    def clip(self, x: int, y: int) -> tuple[int, int]:
        """Clamp a point to the range 0..width, 0..height (inclusive)."""
        return min(max(x, 0), self.width), min(max(y, 0), self.height)

    def fill(
        self, x1: int, y1: int, x2: int, y2: int, c: Glyph = _SOLID, col: int = _WHITE
    ) -> None:
        """Fill the half-open rectangle [x1, x2) x [y1, y2)."""
        x1, y1 = self.clip(x1, y1)
        x2, y2 = self.clip(x2, y2)
        value = _glyph_value(c)
        for x in range(x1, x2):
            for y in range(y1, y2):
                self.draw(x, y, value, col)

    def _write_text(self, x: int, y: int, text: str, col: int, skip_spaces: bool) -> None:
        start = y * self.width + x
        size = len(self._glyphs)
        for offset, ch in enumerate(text):
            if skip_spaces and ch == " ":
                continue
            index = start + offset
            if 0 <= index < size:
                self._glyphs[index] = ord(ch)
                self._colours[index] = int(col)

    def draw_string(self, x: int, y: int, text: str, col: int = _WHITE) -> None:
        """Write text starting at (x, y), running on into following rows."""
        self._write_text(x, y, text, col, skip_spaces=False)

    def draw_string_alpha(self, x: int, y: int, text: str, col: int = _WHITE) -> None:
        """Write text like draw_string, leaving cells under spaces untouched."""
        self._write_text(x, y, text, col, skip_spaces=True)

    def draw_line(
        self, x1: int, y1: int, x2: int, y2: int, c: Glyph = _SOLID, col: int = _WHITE
    ) -> None:
        """Draw a line between two points with Bresenham's algorithm."""
        value = _glyph_value(c)
        dx, dy = x2 - x1, y2 - y1
        dx1, dy1 = abs(dx), abs(dy)
        px, py = 2 * dy1 - dx1, 2 * dx1 - dy1
        step = 1 if (dx < 0 and dy < 0) or (dx > 0 and dy > 0) else -1
        if dy1 <= dx1:
            x, y, xe = (x1, y1, x2) if dx >= 0 else (x2, y2, x1)
            self.draw(x, y, value, col)
            while x < xe:
                x += 1
                if px < 0:
                    px += 2 * dy1
                else:
                    y += step
                    px += 2 * (dy1 - dx1)
                self.draw(x, y, value, col)
        else:
            x, y, ye = (x1, y1, y2) if dy >= 0 else (x2, y2, y1)
            self.draw(x, y, value, col)
            while y < ye:
                y += 1
                if py <= 0:
                    py += 2 * dx1
                else:
                    x += step
                    py += 2 * (dx1 - dy1)
                self.draw(x, y, value, col)

    def draw_triangle(
        self,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        x3: int,
        y3: int,
        c: Glyph = _SOLID,
        col: int = _WHITE,
    ) -> None:
        """Draw the outline of a triangle."""
        self.draw_line(x1, y1, x2, y2, c, col)
        self.draw_line(x2, y2, x3, y3, c, col)
        self.draw_line(x3, y3, x1, y1, c, col)

    def fill_triangle(
        self,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        x3: int,
        y3: int,
        c: Glyph = _SOLID,
        col: int = _WHITE,
    ) -> None:
        """Fill a triangle with horizontal scan lines."""
        value = _glyph_value(c)

        def scan(sx: int, ex: int, ny: int) -> None:
            for i in range(sx, ex + 1):
                self.draw(i, ny, value, col)

        if y1 > y2:
            x1, y1, x2, y2 = x2, y2, x1, y1
        if y1 > y3:
            x1, y1, x3, y3 = x3, y3, x1, y1
        if y2 > y3:
            x2, y2, x3, y3 = x3, y3, x2, y2

        t1x = t2x = x1
        y = y1
        dx1 = x2 - x1
        signx1 = -1 if dx1 < 0 else 1
        dx1 = abs(dx1)
        dy1 = y2 - y1
        dx2 = x3 - x1
        signx2 = -1 if dx2 < 0 else 1
        dx2 = abs(dx2)
        dy2 = y3 - y1

        changed1 = changed2 = False
        if dy1 > dx1:
            dx1, dy1 = dy1, dx1
            changed1 = True
        if dy2 > dx2:
            dx2, dy2 = dy2, dx2
            changed2 = True

        e2 = dx2 >> 1

        if y1 != y2:
            e1 = dx1 >> 1
            i = 0
            while i < dx1:
                t1xp = t2xp = 0
                minx, maxx = (t1x, t2x) if t1x < t2x else (t2x, t1x)
                while i < dx1:
                    i += 1
                    e1 += dy1
                    stepped = False
                    while e1 >= dx1:
                        e1 -= dx1
                        if changed1:
                            t1xp = signx1
                        else:
                            stepped = True
                            break
                    if stepped or changed1:
                        break
                    t1x += signx1
                while True:
                    e2 += dy2
                    stepped = False
                    while e2 >= dx2:
                        e2 -= dx2
                        if changed2:
                            t2xp = signx2
                        else:
                            stepped = True
                            break
                    if stepped or changed2:
                        break
                    t2x += signx2
                minx = min(minx, t1x, t2x)
                maxx = max(maxx, t1x, t2x)
                scan(minx, maxx, y)
                if not changed1:
                    t1x += signx1
                t1x += t1xp
                if not changed2:
                    t2x += signx2
                t2x += t2xp
                y += 1
                if y == y2:
                    break

        dx1 = x3 - x2
        signx1 = -1 if dx1 < 0 else 1
        dx1 = abs(dx1)
        dy1 = y3 - y2
        t1x = x2
        if dy1 > dx1:
            dx1, dy1 = dy1, dx1
            changed1 = True
        else:
            changed1 = False
        e1 = dx1 >> 1

        i = 0
        while i <= dx1:
            t1xp = t2xp = 0
            minx, maxx = (t1x, t2x) if t1x < t2x else (t2x, t1x)
            while i < dx1:
                e1 += dy1
                stepped = False
                while e1 >= dx1:
                    e1 -= dx1
                    if changed1:
                        t1xp = signx1
                    else:
                        stepped = True
                    break
                if stepped or changed1:
                    break
                t1x += signx1
                if i < dx1:
                    i += 1
            while t2x != x3:
                e2 += dy2
                stepped = False
                while e2 >= dx2:
                    e2 -= dx2
                    if changed2:
                        t2xp = signx2
                    else:
                        stepped = True
                        break
                if stepped or changed2:
                    break
                t2x += signx2
            minx = min(minx, t1x, t2x)
            maxx = max(maxx, t1x, t2x)
            scan(minx, maxx, y)
            if not changed1:
                t1x += signx1
            t1x += t1xp
            if not changed2:
                t2x += signx2
            t2x += t2xp
            y += 1
            if y > y3:
                return
            i += 1

    def draw_circle(
        self, xc: int, yc: int, r: int, c: Glyph = _SOLID, col: int = _WHITE
    ) -> None:
        """Draw the outline of a circle with the midpoint algorithm."""
        if not r:
            return
        value = _glyph_value(c)
        x, y, p = 0, r, 3 - 2 * r
        while y >= x:
            for px, py in (
                (xc - x, yc - y),
                (xc - y, yc - x),
                (xc + y, yc - x),
                (xc + x, yc - y),
                (xc - x, yc + y),
                (xc - y, yc + x),
                (xc + y, yc + x),
                (xc + x, yc + y),
            ):
                self.draw(px, py, value, col)
            if p < 0:
                p += 4 * x + 6
            else:
                p += 4 * (x - y) + 10
                y -= 1
            x += 1

    def fill_circle(
        self, xc: int, yc: int, r: int, c: Glyph = _SOLID, col: int = _WHITE
    ) -> None:
        """Fill a circle with horizontal scan lines."""
        if not r:
            return
        value = _glyph_value(c)

        def scan(sx: int, ex: int, ny: int) -> None:
            for i in range(sx, ex + 1):
                self.draw(i, ny, value, col)

        x, y, p = 0, r, 3 - 2 * r
        while y >= x:
            scan(xc - x, xc + x, yc - y)
            scan(xc - y, xc + y, yc - x)
            scan(xc - x, xc + x, yc + y)
            scan(xc - y, xc + y, yc + x)
            if p < 0:
                p += 4 * x + 6
            else:
                p += 4 * (x - y) + 10
                y -= 1
            x += 1

    def draw_sprite(self, x: int, y: int, sprite: Sprite) -> None:
        """Draw a whole sprite at (x, y); space glyphs are transparent."""
        self.draw_partial_sprite(x, y, sprite, 0, 0, sprite.width, sprite.height)

    def draw_partial_sprite(
        self, x: int, y: int, sprite: Sprite, ox: int, oy: int, w: int, h: int
    ) -> None:
        """Draw the w x h region of a sprite starting at (ox, oy) to (x, y)."""
        for i in range(w):
            for j in range(h):
                glyph = sprite.glyph(i + ox, j + oy)
                if glyph != _SPACE:
                    self.draw(x + i, y + j, glyph, sprite.colour(i + ox, j + oy))

    def draw_wireframe_model(
        self,
        coordinates: Sequence[tuple[float, float]],
        x: float,
        y: float,
        r: float = 0.0,
        s: float = 1.0,
        col: int = _WHITE,
        c: Glyph = _SOLID,
    ) -> None:
        """Rotate by r, scale by s, translate to (x, y) and draw as a closed polygon."""
        if not coordinates:
            return
        cos_r, sin_r = math.cos(r), math.sin(r)
        points = [
            ((px * cos_r - py * sin_r) * s + x, (px * sin_r + py * cos_r) * s + y)
            for px, py in coordinates
        ]
        count = len(points)
        for i in range(count + 1):
            ax, ay = points[i % count]
            bx, by = points[(i + 1) % count]
            self.draw_line(int(ax), int(ay), int(bx), int(by), c, col)

    def rows(self) -> list[str]:
        """The canvas as text, one string per row; empty cells become spaces."""
        if not self.width:
            return [""] * self.height
        text = "".join(chr(g) if g else " " for g in self._glyphs)
        return [text[start : start + self.width] for start in range(0, len(text), self.width)]