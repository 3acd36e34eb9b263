import pytest

from asciishooter.audio import Mixer
from asciishooter.engine import ConsoleGameEngine, EngineError, KeyState


class _Game(ConsoleGameEngine):
    def __init__(self, keep_running=True):
        super().__init__("Test")
        self.keep_running = keep_running
        self.updates = []

    def on_user_create(self):
        return True

    def on_user_update(self, elapsed):
        self.updates.append(elapsed)
        return self.keep_running


class _Plain(ConsoleGameEngine):
    def on_user_create(self):
        return True

    def on_user_update(self, elapsed):
        return True


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        ConsoleGameEngine()


def test_defaults():
    game = _Plain()
    assert game.app_name == "Default"
    assert (game.width, game.height) == (80, 30)
    assert game.sound_enabled is False
    assert ConsoleGameEngine.key(game, ord("A")) == KeyState()


def test_construct_console_sets_size():
    game = _Game()
    ConsoleGameEngine.construct_console(game, 320, 240)
    assert (game.screen.width, game.screen.height) == (320, 240)
    assert (game.width, game.height) == (320, 240)


@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
def test_construct_console_rejects_bad_size(size):
    game = _Game()
    with pytest.raises(EngineError):
        ConsoleGameEngine.construct_console(game, *size)


def test_key_press_hold_release_cycle():
    game = _Game()
    a = ord("A")
    ConsoleGameEngine.update_keys(game, {a})
    assert ConsoleGameEngine.key(game, a) == KeyState(pressed=True, released=False, held=True)
    ConsoleGameEngine.update_keys(game, {a})
    assert ConsoleGameEngine.key(game, a) == KeyState(pressed=False, released=False, held=True)
    ConsoleGameEngine.update_keys(game, set())
    assert ConsoleGameEngine.key(game, a) == KeyState(pressed=False, released=True, held=False)
    ConsoleGameEngine.update_keys(game, set())
    assert ConsoleGameEngine.key(game, a) == KeyState()


def test_key_returns_a_copy():
    game = _Game()
    state = ConsoleGameEngine.key(game, ord("W"))
    state.held = True
    assert ConsoleGameEngine.key(game, ord("W")) == KeyState()


def test_update_keys_ignores_out_of_range_ids():
    game = _Game()
    ConsoleGameEngine.update_keys(game, {300, -1, ord(" ")})
    assert ConsoleGameEngine.key(game, ord(" ")) == KeyState(
        pressed=True, released=False, held=True
    )
    assert ConsoleGameEngine.key(game, 255) == KeyState()


def test_key_out_of_range_raises():
    game = _Game()
    with pytest.raises(IndexError):
        ConsoleGameEngine.key(game, 256)


def test_step_passes_elapsed_and_reports_continue():
    game = _Game()
    assert ConsoleGameEngine.step(game, 0.25) is True
    assert game.updates == [0.25]


def test_step_reports_stop():
    game = _Game(keep_running=False)
    assert ConsoleGameEngine.step(game, 0.1) is False
    assert game.updates == [0.1]


def test_title_shows_name_and_rate():
    title = ConsoleGameEngine.title(_Game(), 0.5)
    assert "Test" in title
    assert title.endswith("FPS: 2.00")


def test_title_with_zero_elapsed():
    assert ConsoleGameEngine.title(_Game(), 0.0).endswith("inf")


def test_render_reflects_screen():
    game = _Game()
    ConsoleGameEngine.construct_console(game, 4, 3)
    game.screen.draw(0, 0, "X")
    game.screen.draw(3, 2, "Y")
    lines = ConsoleGameEngine.render(game).split("\n")
    assert len(lines) == 3
    assert lines[0] == "X   "
    assert lines[2] == "   Y"


def test_enable_sound_creates_mixer():
    game = _Game()
    ConsoleGameEngine.enable_sound(game)
    assert game.sound_enabled is True
    assert isinstance(game.mixer, Mixer)
    assert game.mixer.sample_rate == 44100


def test_on_user_destroy_defaults_to_true():
    assert ConsoleGameEngine.on_user_destroy(_Game()) is True