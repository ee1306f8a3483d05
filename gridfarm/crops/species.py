"""Species — per-crop growth requirements.

Each species favours a different strategy: garlic wants full sun,
cucumber wants shade and plenty of water, tomato only grows when planted
next to another tomato.
"""

from __future__ import annotations

from dataclasses import dataclass

from gridfarm.world.tile import CropType

CROWDING_THRESHOLD = 3


@dataclass(frozen=True)
class GrowthRule:
    """Conditions a tile must meet for its crop to grow one stage.

    Attributes:
        min_sun: Inclusive lower sun bound.
        max_sun: Inclusive upper sun bound.
        min_water: Inclusive lower water bound.
        needs_adjacent_same: Requires a 4-connected neighbour of the
            same species.
    """

    min_sun: int = 0
    max_sun: int = 100
    min_water: int = 0
    needs_adjacent_same: bool = False

    def resources_met(self, sun: int, water: int) -> bool:
        """Return True if sun and water satisfy this rule."""
        return self.min_sun <= sun <= self.max_sun and water >= self.min_water


RULES: dict[CropType, GrowthRule] = {
    CropType.GARLIC: GrowthRule(min_sun=95, min_water=10),
    CropType.CUCUMBER: GrowthRule(max_sun=20, min_water=80),
    CropType.TOMATO: GrowthRule(min_sun=30, min_water=30, needs_adjacent_same=True),
}
