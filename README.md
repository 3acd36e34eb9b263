# asciishooter

A first person shooter that runs in your terminal. The view is drawn by ray
casting onto a grid of characters, with walls shaded by distance or textured
from sprites, lamps drawn as billboard sprites, and fireballs you can throw.

Two games come with the package:

* `asciishooter-classic` – a compact ray caster that loads a map from a text
  file (16×16 by default), shades walls with block glyphs by distance, draws
  the floor as an ASCII gradient, and shows a status line with position,
  angle and frame rate above a mini-map with your position marked `P`.
* `asciishooter` – a fixed 32×32 level with textured walls, three lamps, a
  depth buffer, fireballs, and a mini-map.

## Installing

    pip install .

Terminal drawing and keyboard input use `blessed`. Tests run with
`pip install .[test]` and `pytest`.

## Playing

    asciishooter-classic [MAP] [--width N] [--height N] [--map-width N] [--map-height N]
    asciishooter [--sprites DIR] [--width N] [--height N]

`asciishooter-classic` reads `Location1.txt` from the current directory when
no map is given; the screen defaults to 120×40 characters. `asciishooter`
defaults to a 320×240 screen and looks for `fps_wall1.spr`, `fps_lamp1.spr`
and `fps_fireball1.spr` in the directory given by `--sprites` (the current
directory by default). Both commands stop with an error if the requested
screen is larger than the terminal, or (classic) if the map cannot be read
or holds too few cells. Press Ctrl-C to quit.

Controls:

| Key   | Action                                    |
|-------|-------------------------------------------|
| W / S | walk forward / backward                   |
| A / D | turn left / right                         |
| Q / E | strafe (`asciishooter` only)              |
| Space | throw a fireball on release (`asciishooter` only) |

Walls block movement: a step that would end inside a `#` cell, or outside
the map, is undone. A terminal reports key presses rather than held keys, so
a key counts as held for a short moment after each keystroke it sends.

## Maps

A map for the classic game is a plain UTF-8 text file. Rows are made of `#`
for walls and `.` for open floor; a line reading exactly `MAP` is skipped and
the other lines are joined in order to form the grid, which must hold at
least width × height cells. `asciishooter.raycaster.parse_map` and
`load_map` build a `World` from rows or from a file, and `render_frame`
renders a whole frame to a `Canvas`.

## Sprites

Sprites are stored in a small binary format: width and height as
little-endian 32-bit integers, followed by the colour of every cell and then
the glyph of every cell as 16-bit values. `asciishooter.sprite.read_sprite`
reads such a file, `load_sprite` does the same but falls back to a blank 8×8
sprite when the file is missing or malformed, and `Sprite.save` writes one.
Without sprite files `asciishooter` still runs, but walls and lamps are then
blank.

## Using the engine

`asciishooter.engine.ConsoleGameEngine` can be subclassed to write other
games: override `on_user_create()` and `on_user_update(elapsed)` (and
optionally `on_user_destroy()`), set the screen size with
`construct_console(width, height)`, read keys with `key(key_id)` (upper-case
character codes, or virtual codes for the arrow keys, Escape, Enter, Tab and
Backspace), and call `start()`. Draw into `self.screen`, an
`asciishooter.canvas.Canvas` with `draw`, `fill`, `draw_string`,
`draw_string_alpha`, `draw_line`, `draw_triangle`, `fill_triangle`,
`draw_circle`, `fill_circle`, `draw_sprite`, `draw_partial_sprite` and
`draw_wireframe_model`. Colours and block glyphs are in
`asciishooter.colours` (`Colour`, `Pixel`).

## Sound

`asciishooter.audio` loads 16-bit, 44100 Hz WAVE files (`load_wav`) and
mixes them with `Mixer`: `add_sample` or `load_sample` register a sample,
`play` and `stop` control it, and `render_block` produces blocks of signed
16-bit values, with optional `generator` and `sound_filter` callables.
`ConsoleGameEngine.enable_sound()` attaches a `Mixer` to the engine.

## What it does not do

The package does not play sound: the mixer computes audio samples, but
nothing sends them to a sound device. Neither game uses sound, and no sprite
or map files are included.