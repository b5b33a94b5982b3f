from types import SimpleNamespace

import pygame
import pytest

# pylint: disable=no-name-in-module
from mini_arcade_pygame_backend import PygameBackend

# pylint: enable=no-name-in-module

from star_invaders.entities import Direction, Shot
from star_invaders.exceptions import AssetError
from star_invaders.scenes import star_invaders as scene_module

from .conftest import frame, make_scene


class Recorder:
    """Stands in for a backend port, logging every call."""

    def __init__(self, log, port, measure=(40, 20)):
        self._log = log
        self._port = port
        self._measure = measure

    def measure(self, text, font_size=None, font_name=None):
        return self._measure

    def __getattr__(self, name):
        def call(*args, **kwargs):
            self._log.append((self._port, name, args, kwargs))

        return call


@pytest.fixture
def recorder():
    log = []
    backend = SimpleNamespace(render=Recorder(log, "render"), text=Recorder(log, "text"))
    return backend, log


def render(scene, backend):
    packet = scene.tick(frame(), 0.0)
    for op in packet.ops:
        op(backend)
    return packet


def texts(log):
    return {args[2]: args[:2] for port, name, args, _ in log if name == "draw"}


def test_render_system_builds_draw_calls(scene):
    packet = scene.tick(frame(), 0.0)
    names = [type(op.drawable).__name__ for op in packet.ops]
    assert names == [
        "DrawShip",
        "DrawShots",
        "DrawEnemies",
        "DrawScore",
        "DrawLives",
        "DrawEndScreen",
    ]


def test_shots_are_short_vertical_lines(scene, recorder):
    backend, log = recorder
    scene.world.enemies = []
    scene.world.shots = [Shot(300, 600, Direction.UP)]
    render(scene, backend)
    lines = [args for port, name, args, _ in log if name == "draw_line"]
    assert (300, 598, 300, 602, scene.world.settings.renderer.shot_color) in lines


def test_hud_text_sits_on_the_bottom_edge(scene, recorder):
    backend, log = recorder
    scene.world.score = 150
    render(scene, backend)
    drawn = texts(log)
    # measured text is 40x20, the bottom edge sits 4 px above the canvas bottom
    assert drawn["SCORE: 150"] == (4, 776)
    assert drawn["LIVES: "] == (1200 - 16 - 4 * 36 - 40, 776)
    assert "GAME OVER" not in drawn


def test_end_screen_text_positions(scene, recorder):
    backend, log = recorder
    scene.world.finished = True
    scene.world.score = 700
    render(scene, backend)
    drawn = texts(log)
    assert drawn["GAME OVER"] == (580, 332)
    assert drawn["Final score: 700"] == (680, 380)
    assert drawn["To play again press 'S'"] == (580, 580)

    overlay = [args for port, name, args, kw in log if name == "draw_rect" and args[:4] == (0, 0, 1200, 800)]
    assert overlay


def test_sprites_use_textures_when_loaded(scene, recorder):
    backend, log = recorder
    scene.world.textures = {"x-wing": 7}
    scene.world.enemies = []
    render(scene, backend)
    textures = [args for port, name, args, _ in log if name == "draw_texture"]
    # the ship and one half-size icon per life
    assert textures[0] == (7, 536, 686, 64, 64)
    assert len(textures) == 1 + scene.world.lives
    assert all(t[3:] == (32, 32) for t in textures[1:])


def test_lives_icons_follow_remaining_lives(scene, recorder):
    backend, log = recorder
    scene.world.textures = {"x-wing": 7}
    scene.world.enemies = []
    scene.world.lives = 1
    render(scene, backend)
    icons = [args for port, name, args, _ in log if name == "draw_texture"][1:]
    assert icons == [(7, 1200 - 4 - 32 - 16, 800 - 32, 32, 32)]


class TestPygameBackend:
    """Draws a frame through the real pygame backend on SDL's dummy driver."""

    @pytest.fixture
    def backend(self, settings):
        backend = PygameBackend(settings=settings.backend_settings())
        backend.init()
        yield backend
        pygame.quit()

    def draw(self, scene, backend):
        backend.render.begin_frame()
        render(scene, backend)
        return backend.window.screen

    def test_draws_ship_enemies_and_shots(self, scene, backend):
        background = tuple(scene.world.settings.renderer.background_color)
        scene.world.shots = [Shot(300, 600, Direction.UP)]
        screen = self.draw(scene, backend)

        assert tuple(screen.get_at((568, 718)))[:3] != background
        enemy = scene.world.enemies[0]
        assert tuple(screen.get_at((int(enemy.left), int(enemy.top))))[:3] != background
        assert tuple(screen.get_at((300, 600)))[:3] == scene.world.settings.renderer.shot_color

    def test_end_screen_dims_the_playfield(self, scene, backend):
        background = tuple(scene.world.settings.renderer.background_color)
        screen = self.draw(scene, backend)
        assert tuple(screen.get_at((5, 5)))[:3] == background

        scene.world.finished = True
        screen = self.draw(scene, backend)
        assert tuple(screen.get_at((5, 5)))[:3] != background


class TextureLoader:
    def __init__(self, broken=()):
        self.loaded = []
        self.broken = broken

    def load_texture(self, path):
        if path.endswith(self.broken):
            raise OSError(f"cannot identify image file {path!r}")
        self.loaded.append(path)
        return len(self.loaded)


def test_sprites_load_from_the_assets_directory(settings, tmp_path, monkeypatch):
    (tmp_path / "img").mkdir()
    for name in ("x-wing", "fighter"):
        (tmp_path / "img" / f"{name}.png").write_bytes(b"png")
    monkeypatch.setattr(scene_module, "assets_root", lambda: tmp_path)

    loader = TextureLoader()
    scene = make_scene(settings, render=loader)
    assert scene.world.textures == {"x-wing": 1, "fighter": 2}
    assert loader.loaded == [
        str(tmp_path / "img" / "x-wing.png"),
        str(tmp_path / "img" / "fighter.png"),
    ]


def test_unreadable_sprite_raises_asset_error(settings, tmp_path, monkeypatch):
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "asteroid.png").write_bytes(b"not an image")
    monkeypatch.setattr(scene_module, "assets_root", lambda: tmp_path)

    with pytest.raises(AssetError):
        make_scene(settings, render=TextureLoader(broken="asteroid.png"))
