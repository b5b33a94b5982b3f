"""
Main application for Star Invaders using mini-arcade-core and the pygame backend.
"""

from __future__ import annotations

import argparse
import os
import sys

from mini_arcade_core import run_game  # pyright: ignore[reportMissingImports]
from mini_arcade_core.utils import logger

# Justification: in editable installs, this module is provided by the package.
# pylint: disable=no-name-in-module
from mini_arcade_pygame_backend import (  # pyright: ignore[reportMissingImports]
    PygameBackend,
)

# pylint: enable=no-name-in-module
from star_invaders import __version__
from star_invaders.config import SCENE_ID, GameSettings, load_settings
from star_invaders.exceptions import StarInvadersError
from star_invaders.utils import set_log_level

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="star-invaders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=(
            "Hold the line against descending rows of enemies.\n\n"
            "controls:\n"
            "  LEFT / A     move left\n"
            "  RIGHT / D    move right\n"
            "  SPACE        fire\n"
            "  S            play again after a game over\n"
            "  ESC          quit"
        ),
    )
    parser.add_argument("--config", metavar="PATH", help="JSON settings file")
    parser.add_argument("--seed", type=int, help="seed for enemy spawns and fire")
    parser.add_argument("--fps", type=int, help="frames per second")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="logging level"
    )
    parser.add_argument("--title", help="window title")
    parser.add_argument(
        "--frames", type=int, metavar="N", help="stop after N frames"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="use SDL's dummy video and audio drivers (requires --frames)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> GameSettings:
    """
    Defaults, then the settings file, then command line flags.
    """
    settings = load_settings(args.config) if args.config else GameSettings()
    if args.fps is not None and args.fps <= 0:
        raise StarInvadersError("--fps must be positive")
    if args.frames is not None and args.frames <= 0:
        raise StarInvadersError("--frames must be positive")
    if args.headless and args.frames is None:
        # a dummy window can't be closed and gets no ESC
        raise StarInvadersError("--headless needs --frames")
    return settings.merge(
        fps=args.fps, seed=args.seed, log_level=args.log_level, title=args.title
    )


def run(argv: list[str] | None = None) -> int:
    """
    Main entry point for Star Invaders.

    - Resolves settings from defaults, an optional JSON file and flags.
    - Configures the pygame backend with the window and fonts from settings.
    - Auto-discovers scenes from the `star_invaders.scenes` package.
    - Runs the game with the initial scene set to "star_invaders".
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except StarInvadersError as exc:
        parser.error(str(exc))

    set_log_level(settings.log_level)

    if args.headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        os.environ["SDL_AUDIODRIVER"] = "dummy"

    backend_settings = settings.backend_settings()
    backend = PygameBackend(settings=backend_settings)

    logger.info("Starting Star Invaders...")
    logger.info(backend_settings.to_dict())
    run_game(
        engine_config=settings.engine_config(),
        backend=backend,
        scene_config={
            "initial_scene": SCENE_ID,
            "discover_packages": ["star_invaders.scenes", "mini_arcade_core.scenes"],
        },
        gameplay_config=settings.gameplay_config(max_frames=args.frames),
    )
    logger.info("Star Invaders closed")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
