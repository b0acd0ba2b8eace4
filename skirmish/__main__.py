"""Entry point for ``python -m skirmish``.

Loads the YAML config and its level, builds a game session and opens a
Pygame window to play it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from skirmish.game.config import GameConfig
from skirmish.game.session import GameSession
from skirmish.ui.pygame_client import PygameRenderer
from skirmish.world.level import load_level

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create the session, launch the renderer."""
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Skirmish - turn-based tactics on a terrain grid",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=pathlib.Path,
        default=None,
        help="Path to YAML level file (default: the config's level)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=50,
        help="Pixel size per grid cell (default: 50)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    level_path = args.level or config.level
    if level_path is None:
        parser.error("no level given and the config names none")
    session = GameSession(config=config, level=load_level(level_path))

    renderer = PygameRenderer(session=session, cell_size=args.cell_size)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
