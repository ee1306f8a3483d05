"""ResourceEngine — per-turn sun and water generation.

Sun is *regenerated* every turn: the previous value is discarded and a
fresh draw is scaled by the active sun multiplier.  Water *accumulates*:
each turn adds a small scaled draw to whatever the tile already holds,
until a growth event empties it.  Both results are floored and clamped
to 0-100, so negative multipliers drain water rather than add it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.random import Generator

    from gridfarm.scenario.scenario import ScenarioCondition
    from gridfarm.world.grid import TileGrid
    from gridfarm.world.tile import TileDelta

from gridfarm.world.tile import RESOURCE_MAX, RESOURCE_MIN, clamp_resource

logger = logging.getLogger(__name__)

SUN_BASE_MAX = 100.0
DEFAULT_WATER_BASE_MAX = 10


@dataclass
class ResourceEngine:
    """Regenerates sun and accumulates water across the whole grid.

    Attributes:
        rng: Seeded random generator.
        water_base_max: Exclusive upper bound of the raw water draw.
    """

    rng: Generator
    water_base_max: int = DEFAULT_WATER_BASE_MAX

    def advance_turn(
        self,
        grid: TileGrid,
        condition: ScenarioCondition | None = None,
    ) -> list[TileDelta]:
        """Apply one turn of sun and water to every tile.

        Args:
            grid: The grid to mutate in place.
            condition: Active scenario condition; None means both
                multipliers are 1.

        Returns:
            One change-set entry per tile, row-major.
        """
        sun_mult = 1.0 if condition is None else condition.sun_multiplier
        water_mult = 1.0 if condition is None else condition.water_multiplier

        shape = (grid.rows, grid.cols)
        sun_draw = self.rng.uniform(0.0, SUN_BASE_MAX, size=shape)
        water_draw = self.rng.uniform(0.0, float(self.water_base_max), size=shape)

        sun = np.clip(np.floor(sun_draw * sun_mult), RESOURCE_MIN, RESOURCE_MAX)
        water_gain = np.floor(water_draw * water_mult)

        deltas: list[TileDelta] = []
        for tile in grid:
            r, c = tile.row, tile.col
            tile.sun = int(sun[r, c])
            tile.water = clamp_resource(tile.water + int(water_gain[r, c]))
            deltas.append(tile.delta())

        logger.debug(
            "resources advanced: sun x%s, water x%s, mean sun %.1f",
            sun_mult,
            water_mult,
            float(sun.mean()),
        )
        return deltas
