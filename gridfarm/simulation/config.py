"""Config — load game parameters from YAML files.

Tunable constants (viewport, cell size, water draw, history depth,
movement mode, autosave period) live in YAML and are parsed into a typed
dataclass here.  The scenario table is referenced by path and loaded
separately so scenarios can be swapped without touching game settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from gridfarm.history.action_log import MAX_HISTORY
from gridfarm.scenario.scenario import Scenario
from gridfarm.world.resources import DEFAULT_WATER_BASE_MAX


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        viewport_width: Shell viewport width in display units.
        viewport_height: Shell viewport height in display units.
        cell_size: Width/height of one grid cell in display units.
        water_base_max: Exclusive upper bound of the raw per-turn water
            draw before the scenario multiplier.
        max_history: Number of planting actions kept for undo.
        continuous_movement: Start in continuous (held-key) movement mode.
        continuous_step_ms: Interval between steps while a movement key
            is held in continuous mode.
        autosave_seconds: Shell autosave period; 0 disables autosave.
        locale: UI locale code.
        scenario: Scenario file, resolved relative to the config file.
        base_dir: Directory relative paths are resolved against.
    """

    seed: int = 42
    viewport_width: int = 800
    viewport_height: int = 600
    cell_size: int = 32
    water_base_max: int = DEFAULT_WATER_BASE_MAX
    max_history: int = MAX_HISTORY
    continuous_movement: bool = False
    continuous_step_ms: int = 150
    autosave_seconds: float = 30.0
    locale: str = "en"
    scenario: str | None = None
    base_dir: Path = field(default_factory=Path.cwd, repr=False)

    @property
    def rows(self) -> int:
        """Grid rows covering the viewport."""
        return self.viewport_height // self.cell_size

    @property
    def cols(self) -> int:
        """Grid columns covering the viewport."""
        return self.viewport_width // self.cell_size

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            viewport_width=data.get("viewport_width", cls.viewport_width),
            viewport_height=data.get("viewport_height", cls.viewport_height),
            cell_size=data.get("cell_size", cls.cell_size),
            water_base_max=data.get("water_base_max", cls.water_base_max),
            max_history=data.get("max_history", cls.max_history),
            continuous_movement=data.get(
                "continuous_movement",
                cls.continuous_movement,
            ),
            continuous_step_ms=data.get(
                "continuous_step_ms",
                cls.continuous_step_ms,
            ),
            autosave_seconds=data.get("autosave_seconds", cls.autosave_seconds),
            locale=data.get("locale", cls.locale),
            scenario=data.get("scenario"),
            base_dir=path.resolve().parent,
        )

    def load_scenario(self) -> Scenario:
        """Load the configured scenario, or the built-in one if none is set.

        Raises:
            FileNotFoundError: If the scenario file does not exist.
            InvalidScenario: If the scenario is malformed.
        """
        if not self.scenario:
            return Scenario.basic_farming()
        path = Path(self.scenario)
        if not path.is_absolute():
            path = self.base_dir / path
        return Scenario.from_yaml(path)
