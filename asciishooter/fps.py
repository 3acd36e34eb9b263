"""The textured shooter: walls, lamps and fireballs on a fixed map."""

from __future__ import annotations

import argparse
import math
import os
import random
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .colours import Colour, Pixel
from .engine import ConsoleGameEngine, EngineError
from .sprite import Sprite, load_sprite

_PI = 3.14159
_RAY_STEP = 0.01
_PROJECTILE_SPEED = 8.0
_NEAR_LIMIT = 0.5
_SPACE = ord(" ")

_MAP_ROWS = (
    "#########.......#########.......",
    "#...............#...............",
    "#.......#########.......########",
    "#..............##..............#",
    "#......##......##......##......#",
    "#......##..............##......#",
    "#..............##..............#",
    "###............####............#",
    "##.............###.............#",
    "#............####............###",
    "#..............................#",
    "#..............##..............#",
    "#..............##..............#",
    "#...........#####...........####",
    "#..............................#",
    "###..####....########....#######",
    "####.####.......######..........",
    "#...............#...............",
    "#.......#########.......##..####",
    "#..............##..............#",
    "#......##......##.......#......#",
    "#......##......##......##......#",
    "#..............##..............#",
    "###............####............#",
    "##.............###.............#",
    "#............####............###",
    "#..............................#",
    "#..............................#",
    "#..............##..............#",
    "#...........##..............####",
    "#..............##..............#",
    "################################",
)


@dataclass
class GameObject:
    """A sprite placed in the world, moving with velocity (vx, vy)."""

    x: float
    y: float
    vx: float
    vy: float
    sprite: Sprite
    remove: bool = False


class FpsGame(ConsoleGameEngine):
    """A first-person shooter with textured walls and billboard sprites."""

    def __init__(self, sprite_dir: str | os.PathLike[str] = ".") -> None:
        super().__init__("FPS")
        self.sprite_dir = Path(sprite_dir)
        self.map_width = 32
        self.map_height = 32
        self.map = ""
        self.player_x = 14.7
        self.player_y = 8.0
        self.player_a = 0.0
        self.fov = _PI / 4.0
        self.depth = 16.0
        self.speed = 5.0
        self.sprite_wall = Sprite()
        self.sprite_lamp = Sprite()
        self.sprite_fireball = Sprite()
        self.depth_buffer: list[float] = []
        self.objects: list[GameObject] = []

    def _is_wall(self, x: int, y: int) -> bool:
        if not (0 <= x < self.map_width and 0 <= y < self.map_height):
            return True
        return self.map[y * self.map_width + x] == "#"

    def on_user_create(self) -> bool:
        self.map = "".join(_MAP_ROWS)
        self.sprite_wall = load_sprite(self.sprite_dir / "fps_wall1.spr")
        self.sprite_lamp = load_sprite(self.sprite_dir / "fps_lamp1.spr")
        self.sprite_fireball = load_sprite(self.sprite_dir / "fps_fireball1.spr")
        self.depth_buffer = [0.0] * self.width
        self.objects = [
            GameObject(8.5, 8.5, 0.0, 0.0, self.sprite_lamp),
            GameObject(7.5, 7.5, 0.0, 0.0, self.sprite_lamp),
            GameObject(10.5, 10.5, 0.0, 0.0, self.sprite_lamp),
        ]
        return True

    def _try_move(self, dx: float, dy: float) -> None:
        self.player_x += dx
        self.player_y += dy
        if self._is_wall(int(self.player_x), int(self.player_y)):
            self.player_x -= dx
            self.player_y -= dy

    def move_player(self, elapsed: float) -> None:
        """Turn with A/D, walk with W/S and strafe with Q/E."""
        if self.key(ord("A")).held:
            self.player_a -= elapsed
        if self.key(ord("D")).held:
            self.player_a += elapsed
        step = self.speed * elapsed
        sin_a, cos_a = math.sin(self.player_a), math.cos(self.player_a)
        if self.key(ord("W")).held:
            self._try_move(sin_a * step, cos_a * step)
        if self.key(ord("S")).held:
            self._try_move(-sin_a * step, -cos_a * step)
        if self.key(ord("Q")).held:
            self._try_move(-cos_a * step, sin_a * step)
        if self.key(ord("E")).held:
            self._try_move(cos_a * step, -sin_a * step)

    def fire(self, noise: float | None = None) -> GameObject:
        """Launch a fireball from the player, with a small random spread by default."""
        if noise is None:
            noise = (random.random() - 0.5) * 0.1
        angle = self.player_a + noise
        fireball = GameObject(
            self.player_x,
            self.player_y,
            math.sin(angle) * _PROJECTILE_SPEED,
            math.cos(angle) * _PROJECTILE_SPEED,
            self.sprite_fireball,
        )
        self.objects.append(fireball)
        return fireball

    def cast_column(self, x: int) -> float:
        """Ray-cast and draw one screen column; return the distance to the wall."""
        if len(self.depth_buffer) != self.width:
            self.depth_buffer = [0.0] * self.width
        width, height = self.width, self.height
        angle = (self.player_a - self.fov / 2.0) + (x / width) * self.fov
        eye_x, eye_y = math.sin(angle), math.cos(angle)
        distance = 0.0
        hit = False
        sample_x = 0.0
        quarter = _PI * 0.25
        while not hit and distance < self.depth:
            distance += _RAY_STEP
            test_x = self.player_x + eye_x * distance
            test_y = self.player_y + eye_y * distance
            nx, ny = int(test_x), int(test_y)
            if not (0 <= nx < self.map_width and 0 <= ny < self.map_height):
                hit = True
                distance = self.depth
            elif self.map[ny * self.map_width + nx] == "#":
                hit = True
                test_angle = math.atan2(test_y - (ny + 0.5), test_x - (nx + 0.5))
                if quarter <= test_angle < 3 * quarter or -3 * quarter <= test_angle < -quarter:
                    sample_x = test_x - nx
                else:
                    sample_x = test_y - ny

        ceiling = int(height / 2.0 - height / distance)
        floor = height - ceiling
        self.depth_buffer[x] = distance

        for y in range(height):
            if y <= ceiling:
                self.screen.draw(x, y, " ")
            elif y <= floor:
                if distance < self.depth:
                    sample_y = (y - ceiling) / (floor - ceiling)
                    self.screen.draw(
                        x,
                        y,
                        self.sprite_wall.sample_glyph(sample_x, sample_y),
                        self.sprite_wall.sample_colour(sample_x, sample_y),
                    )
                else:
                    self.screen.draw(x, y, Pixel.SOLID, 0)
            else:
                self.screen.draw(x, y, Pixel.SOLID, Colour.FG_DARK_BLUE)
        return distance

    def _draw_object(self, obj: GameObject, angle: float, distance: float) -> None:
        sprite = obj.sprite
        if not sprite.width or not sprite.height:
            return
        height = self.height
        ceiling = height / 2.0 - height / distance
        floor = height - ceiling
        obj_height = floor - ceiling
        obj_width = obj_height / (sprite.height / sprite.width)
        middle = (0.5 * (angle / (self.fov / 2.0)) + 0.5) * self.width
        for lx in range(math.ceil(max(obj_width, 0.0))):
            column = int(middle + lx - obj_width / 2.0)
            if not 0 <= column < self.width:
                continue
            sample_x = lx / obj_width
            for ly in range(math.ceil(max(obj_height, 0.0))):
                sample_y = ly / obj_height
                glyph = sprite.sample_glyph(sample_x, sample_y)
                if glyph != _SPACE and self.depth_buffer[column] >= distance:
                    self.screen.draw(
                        column,
                        int(ceiling + ly),
                        glyph,
                        sprite.sample_colour(sample_x, sample_y),
                    )
                    self.depth_buffer[column] = distance

    def draw_objects(self, elapsed: float) -> None:
        """Move every object, draw those in view and drop those that hit a wall."""
        if len(self.depth_buffer) != self.width:
            self.depth_buffer = [self.depth] * self.width
        eye_x, eye_y = math.sin(self.player_a), math.cos(self.player_a)
        for obj in self.objects:
            obj.x += obj.vx * elapsed
            obj.y += obj.vy * elapsed
            # Objects look up their cell with the map coordinates swapped.
            if self._is_wall(int(obj.y), int(obj.x)):
                obj.remove = True
            vec_x = obj.x - self.player_x
            vec_y = obj.y - self.player_y
            distance = math.hypot(vec_x, vec_y)
            angle = math.atan2(eye_y, eye_x) - math.atan2(vec_y, vec_x)
            if angle < -_PI:
                angle += 2.0 * _PI
            if angle > _PI:
                angle -= 2.0 * _PI
            in_view = abs(angle) < self.fov / 2.0
            if in_view and _NEAR_LIMIT <= distance < self.depth:
                self._draw_object(obj, angle, distance)
        self.objects = [obj for obj in self.objects if not obj.remove]

    def on_user_update(self, elapsed: float) -> bool:
        self.move_player(elapsed)
        if self.key(_SPACE).released:
            self.fire()
        for x in range(self.width):
            self.cast_column(x)
        self.draw_objects(elapsed)
        for ny in range(self.map_height):
            for nx in range(self.map_width):
                self.screen.draw(nx + 1, ny + 2, self.map[ny * self.map_width + nx])
        self.screen.draw(1 + int(self.player_y), 1 + int(self.player_x), "P")
        return True


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game until interrupted; return the exit status."""
    parser = argparse.ArgumentParser(description="A textured first-person shooter.")
    parser.add_argument("--sprites", default=".", help="directory of sprite files")
    parser.add_argument("--width", type=int, default=320)
    parser.add_argument("--height", type=int, default=240)
    args = parser.parse_args(argv)
    game = FpsGame(args.sprites)
    try:
        game.construct_console(args.width, args.height)
        game.start()
    except EngineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())