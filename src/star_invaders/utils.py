"""
Star Invaders utils
"""

from __future__ import annotations

import logging
from pathlib import Path

from mini_arcade_core.utils import find_assets_root
from mini_arcade_core.utils.logging import configure_logging


def assets_root() -> Path | None:
    """Return the path to the `assets` directory, if the game ships one.

    Works in:
    - dev: repo/assets (when running from source tree)
    - pip install: site-packages/assets
    - PyInstaller onefile: _MEIPASS/assets (if bundled with --add-data)

    Without it every sprite is drawn from plain shapes.
    """
    try:
        return find_assets_root(__file__)
    except FileNotFoundError:
        return None


def set_log_level(level: str | int) -> None:
    """
    Apply a level name (``"DEBUG"``) or number to the mini-arcade console
    logging.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    configure_logging(level)
