"""Tile — a single cell in the farm grid.

Each tile holds its sun and water levels and, once sown, the crop
species and growth stage.  Crop and stage are set and cleared together
so a tile is either bare or fully planted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

RESOURCE_MIN = 0
RESOURCE_MAX = 100


class CropType(Enum):
    """Plantable species."""

    GARLIC = "garlic"
    CUCUMBER = "cucumber"
    TOMATO = "tomato"


class GrowthStage(IntEnum):
    """Growth stages; MATURE is terminal."""

    SPROUT = 0
    GROWING = 1
    MATURE = 2


@dataclass(frozen=True)
class PlantingState:
    """Copy of a tile's planting fields.

    Attributes:
        crop: Species planted, or None for a bare tile.
        growth_stage: Stage of the crop, or None for a bare tile.
    """

    crop: CropType | None = None
    growth_stage: GrowthStage | None = None


@dataclass(frozen=True)
class TileDelta:
    """Post-change view of one tile, emitted for the presentation layer."""

    row: int
    col: int
    sun: int
    water: int
    growth_stage: GrowthStage | None
    overcrowded: bool


@dataclass
class Tile:
    """A single cell of the farm.

    Attributes:
        row: Row position.
        col: Column position.
        sun: Sunlight this turn (0-100), regenerated every turn.
        water: Stored water (0-100), accumulated across turns.
        crop: Species planted here, if any.
        growth_stage: Stage of the planted crop, if any.
        overcrowded: Display-only flag set when crowding blocked growth
            on the last evaluation.
    """

    row: int
    col: int
    sun: int = 0
    water: int = 0
    crop: CropType | None = None
    growth_stage: GrowthStage | None = None
    overcrowded: bool = False

    @property
    def is_planted(self) -> bool:
        """Return True if a crop occupies this tile."""
        return self.crop is not None

    def planting_state(self) -> PlantingState:
        """Return a detached copy of the crop and stage."""
        return PlantingState(crop=self.crop, growth_stage=self.growth_stage)

    def delta(self) -> TileDelta:
        """Return the current state as a change-set entry."""
        return TileDelta(
            row=self.row,
            col=self.col,
            sun=self.sun,
            water=self.water,
            growth_stage=self.growth_stage,
            overcrowded=self.overcrowded,
        )


def clamp_resource(value: int) -> int:
    """Clamp a sun/water value to the 0-100 range."""
    return max(RESOURCE_MIN, min(RESOURCE_MAX, value))
