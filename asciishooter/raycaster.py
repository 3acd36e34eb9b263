"""A grid-map ray caster that renders a first-person view as text."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable
from dataclasses import dataclass

from .canvas import Canvas
from .colours import Pixel

SCREEN_WIDTH = 120
SCREEN_HEIGHT = 40
MAP_WIDTH = 16
MAP_HEIGHT = 16
FOV = 3.14159 / 4.0
DEPTH = 16.0
SPEED = 5.0
TURN_RATE = 1.0

_RAY_STEP = 0.1
_BOUND = 0.005
_MAP_MARKER = "MAP"
_WALL = "#"
_STATUS_LIMIT = 39


@dataclass(frozen=True)
class World:
    """A rectangular map of cells where '#' is a wall."""

    cells: str
    width: int = MAP_WIDTH
    height: int = MAP_HEIGHT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"map size must be positive, got {self.width}x{self.height}")
        needed = self.width * self.height
        if len(self.cells) < needed:
            raise ValueError(
                f"map holds {len(self.cells)} cells, {needed} needed for "
                f"{self.width}x{self.height}"
            )

    def cell(self, x: int, y: int) -> str:
        """The character of the cell at (x, y)."""
        return self.cells[y * self.width + x]

    def is_wall(self, x: int, y: int) -> bool:
        """Whether (x, y) is a wall; cells outside the map count as walls."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return True
        return self.cell(x, y) == _WALL


@dataclass
class Player:
    """Position on the map and viewing angle in radians."""

    x: float = 8.0
    y: float = 8.0
    a: float = 0.0


@dataclass(frozen=True)
class RayHit:
    """Result of casting one ray."""

    distance: float
    hit_wall: bool
    boundary: bool = False


def parse_map(
    lines: Iterable[str], width: int = MAP_WIDTH, height: int = MAP_HEIGHT
) -> World:
    """Build a world from map rows, skipping any line that reads 'MAP'."""
    return World("".join(line for line in lines if line != _MAP_MARKER), width, height)


def load_map(
    path: str | os.PathLike[str], width: int = MAP_WIDTH, height: int = MAP_HEIGHT
) -> World:
    """Read a map file."""
    with open(path, encoding="utf-8") as handle:
        return parse_map((line.rstrip("\r\n") for line in handle), width, height)


def _try_move(world: World, player: Player, dx: float, dy: float) -> None:
    player.x += dx
    player.y += dy
    if world.is_wall(int(player.x), int(player.y)):
        player.x -= dx
        player.y -= dy


def apply_controls(
    world: World, player: Player, keys: Iterable[str], elapsed: float
) -> None:
    """Turn with A/D and walk with W/S, refusing to step into walls."""
    held = {k.upper() for k in keys}
    if "A" in held:
        player.a -= TURN_RATE * elapsed
    if "D" in held:
        player.a += TURN_RATE * elapsed
    if "W" in held:
        _try_move(
            world,
            player,
            math.sin(player.a) * SPEED * elapsed,
            math.cos(player.a) * SPEED * elapsed,
        )
    if "S" in held:
        _try_move(
            world,
            player,
            -math.sin(player.a) * SPEED * elapsed,
            -math.cos(player.a) * SPEED * elapsed,
        )


def _is_boundary(
    player: Player, cell_x: int, cell_y: int, eye_x: float, eye_y: float
) -> bool:
    corners = []
    for tx in (0, 1):
        for ty in (0, 1):
            vy = cell_y + ty - player.y
            vx = cell_x + tx - player.x
            d = math.hypot(vx, vy)
            dot = (eye_x * vx / d + eye_y * vy / d) if d else 0.0
            corners.append((d, dot))
    corners.sort(key=lambda corner: corner[0])
    return any(
        math.acos(max(-1.0, min(1.0, dot))) < _BOUND for _, dot in corners[:3]
    )


def cast_ray(
    world: World,
    player: Player,
    column: int,
    screen_width: int = SCREEN_WIDTH,
    fov: float = FOV,
    depth: float = DEPTH,
) -> RayHit:
    """March a ray for one screen column until it meets a wall or leaves the map."""
    angle = (player.a - fov / 2.0) + (column / screen_width) * fov
    eye_x, eye_y = math.sin(angle), math.cos(angle)
    distance = 0.0
    while distance < depth:
        distance += _RAY_STEP
        px = int(player.x + eye_x * distance)
        py = int(player.y + eye_y * distance)
        if not (0 <= px < world.width and 0 <= py < world.height):
            return RayHit(depth, True, False)
        if world.cell(px, py) == _WALL:
            return RayHit(distance, True, _is_boundary(player, px, py, eye_x, eye_y))
    return RayHit(distance, False, False)


def _wall_shade(distance: float, depth: float) -> int:
    if distance <= depth / 4.0:
        return int(Pixel.SOLID)
    if distance < depth / 3.0:
        return int(Pixel.THREEQUARTERS)
    if distance < depth / 2.0:
        return int(Pixel.HALF)
    if distance < depth:
        return int(Pixel.QUARTER)
    return ord(" ")


def _floor_shade(y: int, height: int) -> str:
    b = 1.0 - ((y - height / 2.0) / (height / 2.0))
    if b < 0.25:
        return "#"
    if b < 0.5:
        return "x"
    if b < 0.75:
        return "."
    if b < 0.9:
        return "-"
    return " "


def draw_column(screen: Canvas, hit: RayHit, column: int, depth: float = DEPTH) -> None:
    """Draw ceiling, wall and floor for one screen column."""
    height = screen.height
    ceiling = int(height / 2.0 - height / hit.distance)
    floor = height - ceiling
    shade = ord(" ") if hit.boundary else _wall_shade(hit.distance, depth)
    for y in range(height):
        if y <= ceiling:
            screen.draw(column, y, " ")
        elif y <= floor:
            screen.draw(column, y, shade)
        else:
            screen.draw(column, y, _floor_shade(y, height))


def draw_map(screen: Canvas, world: World, player: Player, elapsed: float) -> None:
    """Draw the status line, the map below it and the player's marker."""
    fps = 1.0 / elapsed if elapsed else math.inf
    status = f"X={player.x:3.2f}, Y={player.y:3.2f}, A={player.a:3.2f} FPS={fps:3.2f} "
    screen.draw_string(0, 0, status[:_STATUS_LIMIT])
    for ny in range(world.height):
        for nx in range(world.width):
            screen.draw(nx, ny + 1, world.cell(nx, ny))
    screen.draw(int(player.x), int(player.y) + 1, "P")


def render_frame(
    world: World,
    player: Player,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    elapsed: float = 0.0,
) -> Canvas:
    """Render a whole frame: the 3D view with the map drawn over it."""
    screen = Canvas(width, height)
    for column in range(width):
        hit = cast_ray(world, player, column, width)
        draw_column(screen, hit, column)
    draw_map(screen, world, player, elapsed)
    screen.draw(width - 1, height - 1, 0)
    return screen