"""
Game settings.

Settings are plain dataclasses built from a nested dictionary, so the same
shape can come from defaults, a JSON file or command line overrides::

    {
        "window": {"title": "...", "width": 1200, "height": 800},
        "renderer": {"background_color": (8, 8, 24), "shot_color": ...},
        "fonts": [{"name": "hud", "size": 24, "path": None}],
        "game": {"fps": 60, "seed": None},
        "logging": {"level": "INFO"},
    }

The window and font sections reuse the mini-arcade backend dataclasses; the
settings turn into the payloads :func:`mini_arcade_core.run_game` expects.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from mini_arcade_core.backend.config import FontSettings, WindowSettings
from mini_arcade_core.engine.engine_config import EngineConfig

# pylint: disable=no-name-in-module
from mini_arcade_pygame_backend import PygameBackendSettings

# pylint: enable=no-name-in-module
from star_invaders.constants import (
    BACKGROUND_COLOR,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    END_SCREEN_OVERLAY,
    END_SCREEN_TEXT_COLOR,
    FPS,
    SHOT_COLOR,
    TEXT_COLOR,
)
from star_invaders.exceptions import ConfigError

Color = tuple[int, ...]

SCENE_ID = "star_invaders"
SECTIONS = ("window", "renderer", "fonts", "game", "logging")

DEFAULT_WINDOW = WindowSettings(
    title="Star Invaders", width=CANVAS_WIDTH, height=CANVAS_HEIGHT
)


def _section(data: dict[str, Any], name: str, default: Any) -> Any:
    value = data.get(name, default)
    expected = list if isinstance(default, list) else dict
    if not isinstance(value, expected):
        kind = "a list" if expected is list else "a mapping"
        raise ConfigError(f"{name} must be {kind}, got {type(value).__name__}")
    return value


def _int(value: Any, section: str, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{section}.{key} must be an integer") from exc


def _color(value: Any, section: str, key: str) -> Color:
    try:
        color = tuple(int(c) for c in value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{section}.{key} must be a list of integers") from exc
    if len(color) not in (3, 4) or any(c < 0 or c > 255 for c in color):
        raise ConfigError(f"{section}.{key} must be RGB or RGBA in 0..255")
    return color


def _window(data: dict[str, Any]) -> WindowSettings:
    defaults = DEFAULT_WINDOW
    width = _int(data.get("width", defaults.width), "window", "width")
    height = _int(data.get("height", defaults.height), "window", "height")
    if width <= 0 or height <= 0:
        raise ConfigError("window.width and window.height must be positive")
    return WindowSettings(
        width=width,
        height=height,
        title=str(data.get("title", defaults.title)),
        resizable=bool(data.get("resizable", defaults.resizable)),
        high_dpi=bool(data.get("high_dpi", defaults.high_dpi)),
    )


def _font(data: Any) -> FontSettings:
    if not isinstance(data, dict):
        raise ConfigError(f"every font must be a mapping, got {type(data).__name__}")
    if "name" not in data:
        raise ConfigError("every font needs a name")
    size = _int(data.get("size", 24), "fonts", "size")
    if size <= 0:
        raise ConfigError(f"font {data['name']!r} size must be positive")
    path = data.get("path")
    return FontSettings(
        name=str(data["name"]),
        path=None if path is None else str(path),
        size=size,
    )


@dataclass(frozen=True)
class RendererSettings:
    """
    Colours of the playfield. Only ``background_color`` goes to the backend,
    the rest are used by the scene's drawables.
    """

    background_color: Color = BACKGROUND_COLOR
    shot_color: Color = SHOT_COLOR
    text_color: Color = TEXT_COLOR
    overlay_color: Color = END_SCREEN_OVERLAY
    end_text_color: Color = END_SCREEN_TEXT_COLOR

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RendererSettings:
        defaults = cls()
        return cls(
            **{
                key: _color(data.get(key, getattr(defaults, key)), "renderer", key)
                for key in (
                    "background_color",
                    "shot_color",
                    "text_color",
                    "overlay_color",
                    "end_text_color",
                )
            }
        )


DEFAULT_FONTS = (
    FontSettings(name="hud", size=24),
    FontSettings(name="title", size=48),
    FontSettings(name="subtitle", size=28),
)


@dataclass(frozen=True)
class GameSettings:
    """
    Everything the app needs to build the backend, the engine and the scene.
    """

    window: WindowSettings = DEFAULT_WINDOW
    renderer: RendererSettings = field(default_factory=RendererSettings)
    fonts: tuple[FontSettings, ...] = DEFAULT_FONTS
    fps: int = FPS
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameSettings:
        """
        Build settings from a nested dictionary; missing keys keep defaults.

        :raise ConfigError: On unknown sections or invalid values
        """
        if not isinstance(data, dict):
            raise ConfigError("settings must be a mapping")

        unknown = set(data) - set(SECTIONS)
        if unknown:
            raise ConfigError(f"unknown settings sections: {sorted(unknown)}")

        game = _section(data, "game", {})
        fps = _int(game.get("fps", FPS), "game", "fps")
        if fps <= 0:
            raise ConfigError("game.fps must be positive")
        seed = game.get("seed")

        level = str(_section(data, "logging", {}).get("level", "INFO")).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"unknown log level {level!r}")

        fonts = {f.name: f for f in DEFAULT_FONTS}
        for font_data in _section(data, "fonts", []):
            font = _font(font_data)
            fonts[font.name] = font

        return cls(
            window=_window(_section(data, "window", {})),
            renderer=RendererSettings.from_dict(_section(data, "renderer", {})),
            fonts=tuple(fonts.values()),
            fps=fps,
            seed=None if seed is None else _int(seed, "game", "seed"),
            log_level=level,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "window": asdict(self.window),
            "renderer": asdict(self.renderer),
            "fonts": [asdict(f) for f in self.fonts],
            "game": {"fps": self.fps, "seed": self.seed},
            "logging": {"level": self.log_level},
        }

    def font(self, name: str) -> FontSettings:
        for font in self.fonts:
            if font.name == name:
                return font
        raise KeyError(name)

    def merge(self, **overrides: Any) -> GameSettings:
        """
        Apply overrides (``fps``, ``seed``, ``log_level``, ``title``),
        ignoring the ones set to ``None``.
        """
        title = overrides.pop("title", None)
        values = {k: v for k, v in overrides.items() if v is not None}
        settings = replace(self, **values)
        if title is not None:
            settings = replace(settings, window=replace(settings.window, title=title))
        return settings

    def backend_settings(self) -> PygameBackendSettings:
        """
        Settings of the pygame backend: window, clear colour and fonts.
        """
        return PygameBackendSettings.from_dict(
            {
                "window": asdict(self.window),
                "renderer": {"background_color": self.renderer.background_color},
                "fonts": [asdict(f) for f in self.fonts],
                "audio": {"enable": False},
            }
        )

    def engine_config(self) -> EngineConfig:
        """
        The scene always draws on a 1200x800 virtual canvas; the engine fits it
        into whatever window size is configured.
        """
        return EngineConfig(fps=self.fps, virtual_resolution=(CANVAS_WIDTH, CANVAS_HEIGHT))

    def gameplay_config(self, max_frames: int | None = None) -> dict[str, Any]:
        """
        Per-scene payload for the engine. ESC quits; the scene rebuilds these
        settings from ``settings`` and stops itself after ``max_frames``.
        """
        return {
            "scenes": {
                SCENE_ID: {
                    "escape": {"command": "quit"},
                    "settings": self.to_dict(),
                    "max_frames": max_frames,
                }
            }
        }


def load_settings(path: str | Path) -> GameSettings:
    """
    Read settings from a JSON file.

    :raise ConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read settings file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    return GameSettings.from_dict(data)
