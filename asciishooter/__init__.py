"""Terminal ray-casting shooters, with a console game engine, canvas, sprites and a sound mixer."""

__version__ = "0.1.0"