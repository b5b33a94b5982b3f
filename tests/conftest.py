import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from mini_arcade_core.engine.commands import CommandQueue  # noqa: E402
from mini_arcade_core.engine.gameplay_settings import GamePlaySettings  # noqa: E402
from mini_arcade_core.runtime.context import RuntimeContext  # noqa: E402
from mini_arcade_core.runtime.input_frame import InputFrame  # noqa: E402

from star_invaders.config import SCENE_ID, GameSettings  # noqa: E402
from star_invaders.scenes import star_invaders as scene_module  # noqa: E402
from star_invaders.scenes.star_invaders import (  # noqa: E402
    StarInvadersScene,
    StarInvadersTickContext,
)


class StubRandom:
    """Replays a fixed sequence of draws, cycling when exhausted."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def frame(keys_down=(), keys_pressed=(), index=0, dt=0.0):
    return InputFrame(
        frame_index=index,
        dt=dt,
        keys_down=frozenset(keys_down),
        keys_pressed=frozenset(keys_pressed),
    )


def make_scene(settings, max_frames=None, render=None):
    context = RuntimeContext(
        services=SimpleNamespace(capture=None, render=render),
        config=settings.engine_config(),
        settings=GamePlaySettings.from_dict(settings.gameplay_config(max_frames)),
        command_queue=CommandQueue(),
    )
    scene = StarInvadersScene(context)
    scene.scene_id = SCENE_ID
    scene.on_enter()
    return scene


@pytest.fixture(autouse=True)
def no_assets(monkeypatch):
    """Sprites come from placeholders unless a test provides images."""
    monkeypatch.setattr(scene_module, "assets_root", lambda: None)


@pytest.fixture
def settings():
    return GameSettings(seed=1234)


@pytest.fixture
def scene(settings):
    return make_scene(settings)


@pytest.fixture
def world(scene):
    return scene.world


@pytest.fixture
def make_ctx(scene):
    def _make(dt=0.0, intent=None, input_frame=None):
        return StarInvadersTickContext(
            input_frame=input_frame or frame(),
            dt=dt,
            world=scene.world,
            commands=scene.context.command_queue,
            intent=intent,
        )

    return _make
