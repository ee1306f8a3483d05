"""GrowthEngine — the crop growth-stage state machine.

Evaluation order for a planted tile:

1. Crowding: if ``crowding_threshold`` or more of the 8 surrounding
   tiles are planted, the tile is flagged overcrowded and nothing else
   happens this turn.  The crop itself is kept.
2. Species rule: sun/water bounds, plus 4-connected adjacency to the
   same species where the rule asks for it.
3. Growth: when the rule holds the stage advances (capped at MATURE)
   and the tile's water is used up, even for a crop already mature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gridfarm.crops.species import CROWDING_THRESHOLD, RULES, GrowthRule
from gridfarm.world.tile import GrowthStage

if TYPE_CHECKING:
    from gridfarm.world.grid import TileGrid
    from gridfarm.world.tile import CropType, Tile, TileDelta

logger = logging.getLogger(__name__)


@dataclass
class GrowthEngine:
    """Applies species rules and the crowding penalty to planted tiles.

    Attributes:
        rules: Growth rule per species.
        crowding_threshold: Planted-neighbour count that blocks growth.
    """

    rules: dict[CropType, GrowthRule] = field(default_factory=lambda: dict(RULES))
    crowding_threshold: int = CROWDING_THRESHOLD

    def is_overcrowded(self, grid: TileGrid, row: int, col: int) -> bool:
        """Return True if the tile has too many planted neighbours."""
        return grid.planted_neighbour_count(row, col) >= self.crowding_threshold

    def has_adjacent_same(self, grid: TileGrid, tile: Tile) -> bool:
        """Return True if a 4-connected neighbour holds the same species."""
        return any(
            n.crop is tile.crop
            for n in grid.neighbours(tile.row, tile.col, include_diagonals=False)
        )

    def should_grow(self, grid: TileGrid, tile: Tile) -> bool:
        """Evaluate the species rule for a planted tile.

        Args:
            grid: The grid the tile belongs to.
            tile: A planted tile.

        Returns:
            True if the crop's growth conditions hold this turn.
        """
        if tile.crop is None:
            return False
        rule = self.rules[tile.crop]
        if rule.needs_adjacent_same and not self.has_adjacent_same(grid, tile):
            return False
        return rule.resources_met(tile.sun, tile.water)

    def evaluate(self, grid: TileGrid, row: int, col: int) -> TileDelta | None:
        """Run one growth evaluation for the tile at ``(row, col)``.

        Args:
            grid: The grid to mutate.
            row: Row index.
            col: Column index.

        Returns:
            The tile's post-evaluation state, or None for a bare tile.

        Raises:
            OutOfBounds: If coordinates are outside the grid.
        """
        tile = grid.tile_at(row, col)
        if not tile.is_planted:
            return None

        if self.is_overcrowded(grid, row, col):
            tile.overcrowded = True
            return tile.delta()
        tile.overcrowded = False

        if self.should_grow(grid, tile):
            if tile.growth_stage is not None and tile.growth_stage < GrowthStage.MATURE:
                tile.growth_stage = GrowthStage(tile.growth_stage + 1)
                logger.debug(
                    "%s at (%d, %d) grew to %s",
                    tile.crop.name,
                    row,
                    col,
                    tile.growth_stage.name,
                )
            tile.water = 0
        return tile.delta()

    def sweep(self, grid: TileGrid) -> list[TileDelta]:
        """Evaluate every tile once, row-major.

        Returns:
            Change-set entries for planted tiles.
        """
        deltas: list[TileDelta] = []
        for tile in grid:
            delta = self.evaluate(grid, tile.row, tile.col)
            if delta is not None:
                deltas.append(delta)
        return deltas

    def refresh_crowding(self, grid: TileGrid, row: int, col: int) -> None:
        """Recompute overcrowded flags around a tile without growing anything.

        Used after undo/redo, which change neighbour counts outside a turn.
        """
        tiles = [grid.tile_at(row, col), *grid.neighbours(row, col)]
        for tile in tiles:
            tile.overcrowded = tile.is_planted and self.is_overcrowded(
                grid,
                tile.row,
                tile.col,
            )
