import struct

import pytest

from asciishooter.colours import Colour
from asciishooter.sprite import Sprite, load_sprite, read_sprite


def _patterned(width, height):
    sprite = Sprite(width, height)
    for x in range(width):
        for y in range(height):
            sprite.set_glyph(x, y, ord("a") + (x + y * width) % 26)
            sprite.set_colour(x, y, (x * 3 + y) % 16)
    return sprite


def test_new_sprite_is_blank():
    sprite = Sprite(3, 2)
    assert (sprite.width, sprite.height) == (3, 2)
    assert all(sprite.glyph(x, y) == ord(" ") for x in range(3) for y in range(2))
    assert all(
        sprite.colour(x, y) == Colour.FG_BLACK for x in range(3) for y in range(2)
    )


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Sprite(-1, 4)


def test_set_and_get_round_trip():
    sprite = Sprite(4, 4)
    sprite.set_glyph(1, 2, "#")
    sprite.set_colour(1, 2, Colour.FG_RED)
    assert sprite.glyph(1, 2) == ord("#")
    assert sprite.colour(1, 2) == Colour.FG_RED
    assert sprite.glyph(2, 1) == ord(" ")


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_out_of_bounds_reads_default(x, y):
    sprite = _patterned(4, 4)
    assert sprite.glyph(x, y) == ord(" ")
    assert sprite.colour(x, y) == Colour.FG_BLACK


def test_out_of_bounds_writes_ignored():
    sprite = _patterned(4, 4)
    before = sprite.to_bytes()
    sprite.set_glyph(4, 0, "X")
    sprite.set_colour(-1, 2, Colour.FG_WHITE)
    assert sprite.to_bytes() == before


def test_sample_matches_cells():
    sprite = _patterned(4, 4)
    for i in range(4):
        for j in range(4):
            sx, sy = i / 4, (j + 1) / 4
            assert sprite.sample_glyph(sx, sy) == sprite.glyph(i, j)
            assert sprite.sample_colour(sx, sy) == sprite.colour(i, j)


def test_sample_top_edge_is_outside():
    sprite = _patterned(4, 4)
    assert sprite.sample_glyph(0.5, 0.0) == ord(" ")
    assert sprite.sample_colour(0.5, 0.0) == Colour.FG_BLACK


def test_save_layout(tmp_path):
    sprite = _patterned(3, 2)
    path = tmp_path / "s.spr"
    sprite.save(path)
    data = path.read_bytes()
    assert data[:8] == struct.pack("<ii", 3, 2)
    assert len(data) == 8 + 4 * 3 * 2
    colours = struct.unpack_from("<6H", data, 8)
    assert colours[0] == sprite.colour(0, 0)


def test_save_read_round_trip(tmp_path):
    sprite = _patterned(5, 7)
    path = tmp_path / "wall.spr"
    sprite.save(path)
    assert read_sprite(path) == sprite


def test_read_truncated_raises(tmp_path):
    path = tmp_path / "bad.spr"
    path.write_bytes(_patterned(4, 4).to_bytes()[:-3])
    with pytest.raises(ValueError):
        read_sprite(path)


def test_read_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sprite(tmp_path / "missing.spr")


def test_load_missing_falls_back_to_blank(tmp_path):
    sprite = load_sprite(tmp_path / "missing.spr")
    assert (sprite.width, sprite.height) == (8, 8)
    assert sprite == Sprite(8, 8)


def test_load_existing(tmp_path):
    sprite = _patterned(2, 3)
    path = tmp_path / "lamp.spr"
    sprite.save(path)
    assert load_sprite(path) == sprite