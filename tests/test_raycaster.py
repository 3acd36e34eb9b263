import pytest

from asciishooter.canvas import Canvas
from asciishooter.colours import Pixel
from asciishooter.raycaster import (
    DEPTH,
    SPEED,
    Player,
    RayHit,
    World,
    apply_controls,
    cast_ray,
    draw_column,
    draw_map,
    load_map,
    parse_map,
    render_frame,
)


def _boxed_rows(size=16):
    rows = ["#" * size]
    rows += ["#" + "." * (size - 2) + "#" for _ in range(size - 2)]
    rows.append("#" * size)
    return rows


@pytest.fixture
def world():
    return parse_map(_boxed_rows())


def test_parse_map_skips_marker_lines():
    rows = _boxed_rows()
    assert parse_map(["MAP", *rows]).cells == "".join(rows)


def test_parse_map_too_short_raises():
    with pytest.raises(ValueError):
        parse_map(["#" * 16])


def test_load_map_reads_file(tmp_path):
    rows = _boxed_rows()
    path = tmp_path / "level.txt"
    path.write_text("MAP\n" + "\n".join(rows) + "\n", encoding="utf-8")
    assert load_map(path).cells == "".join(rows)


def test_load_map_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_map(tmp_path / "absent.txt")


def test_is_wall(world):
    assert world.is_wall(0, 0)
    assert not world.is_wall(5, 5)
    assert world.is_wall(-1, 5)
    assert world.is_wall(5, world.height)


def test_walk_forward(world):
    player = Player()
    apply_controls(world, player, {"W"}, 0.1)
    assert player.y == pytest.approx(8.0 + SPEED * 0.1)
    assert player.x == pytest.approx(8.0)


def test_walk_back_lowercase(world):
    player = Player()
    apply_controls(world, player, ["s"], 0.1)
    assert player.y == pytest.approx(8.0 - SPEED * 0.1)


def test_wall_blocks_movement(world):
    player = Player(8.0, 14.9, 0.0)
    apply_controls(world, player, {"W"}, 0.1)
    assert player.y == pytest.approx(14.9)


def test_turning(world):
    player = Player()
    apply_controls(world, player, {"A"}, 0.25)
    assert player.a == pytest.approx(-0.25)
    apply_controls(world, player, {"D"}, 0.5)
    assert player.a == pytest.approx(0.25)


def test_cast_ray_reaches_wall_row(world):
    player = Player()
    hit = cast_ray(world, player, 60)
    assert hit.hit_wall
    assert int(player.y + hit.distance) == world.height - 1
    assert hit.distance < DEPTH


def test_cast_ray_leaves_open_map():
    open_world = World("." * 256)
    hit = cast_ray(open_world, Player(), 60)
    assert hit == RayHit(DEPTH, True, False)


def test_draw_column_close_wall_is_solid():
    screen = Canvas(4, 40)
    draw_column(screen, RayHit(1.0, True), 2)
    assert {screen.glyph(2, y) for y in range(40)} == {int(Pixel.SOLID)}


def test_draw_column_far_wall_shows_ceiling_and_floor():
    screen = Canvas(4, 40)
    draw_column(screen, RayHit(DEPTH, True), 1)
    glyphs = {chr(screen.glyph(1, y)) for y in range(40)}
    assert glyphs <= {" ", "#", "x", ".", "-"}
    assert chr(screen.glyph(1, 0)) == " "
    assert chr(screen.glyph(1, 39)) == "#"


def test_draw_column_boundary_is_blank():
    screen = Canvas(4, 40)
    draw_column(screen, RayHit(1.0, True, True), 0)
    assert {chr(screen.glyph(0, y)) for y in range(40)} == {" "}


def test_draw_map_places_player(world):
    screen = Canvas(40, 20)
    player = Player(3.5, 4.5, 0.0)
    draw_map(screen, world, player, 1.0)
    assert chr(screen.glyph(3, 5)) == "P"
    assert chr(screen.glyph(0, 1)) == "#"


def test_render_frame(world):
    canvas = render_frame(world, Player(), elapsed=1.0)
    rows = canvas.rows()
    assert rows[0].startswith("X=8.00, Y=8.00, A=0.00 FPS=1.00")
    assert chr(canvas.glyph(8, 9)) == "P"
    assert canvas.glyph(canvas.width - 1, canvas.height - 1) == 0
    assert len(rows) == canvas.height