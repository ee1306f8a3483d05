"""Entry point for ``python -m gridfarm``.

Loads the YAML config and its scenario, builds a session backed by
on-disk save slots, and opens a Pygame window to play.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from gridfarm.persistence.store import DirectorySaveStore, SaveSlots
from gridfarm.simulation.config import GameConfig
from gridfarm.simulation.session import Session
from gridfarm.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)
_DEFAULT_SAVE_DIR = pathlib.Path("~/.gridfarm/saves")


def main() -> None:
    """Parse CLI args, create session, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="gridfarm",
        description="gridfarm - turn-based grid farming game",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--save-dir",
        type=pathlib.Path,
        default=_DEFAULT_SAVE_DIR,
        help="Directory for save slots (default: ~/.gridfarm/saves)",
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Continue from the autosave if one exists",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    session = Session(config=config, scenario=config.load_scenario())
    slots = SaveSlots(DirectorySaveStore(args.save_dir))
    if args.resume:
        slots.load_autosave(session)

    renderer = PygameRenderer(
        session=session,
        slots=slots,
        cell_size=config.cell_size,
        autosave_seconds=config.autosave_seconds,
        step_ms=config.continuous_step_ms,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
