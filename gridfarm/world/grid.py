"""TileGrid — the fixed-size 2D farm.

The grid exclusively owns every Tile.  Mutators validate bounds only;
clamping resource values is left to the engines that compute them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from gridfarm.errors import OutOfBounds
from gridfarm.world.tile import CropType, GrowthStage, Tile

_CARDINAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))


@dataclass
class TileGrid:
    """A ``rows`` x ``cols`` array of tiles.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        tiles: 2D list of Tile objects indexed as ``tiles[row][col]``.
    """

    rows: int
    cols: int
    tiles: list[list[Tile]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with bare tiles."""
        if self.rows <= 0 or self.cols <= 0:
            msg = f"grid must be at least 1x1, got {self.rows}x{self.cols}"
            raise ValueError(msg)
        self.tiles = [
            [Tile(row=r, col=c) for c in range(self.cols)] for r in range(self.rows)
        ]

    @classmethod
    def from_viewport(cls, width: int, height: int, cell_size: int) -> TileGrid:
        """Build a grid that covers a viewport with square cells.

        Args:
            width: Viewport width in display units.
            height: Viewport height in display units.
            cell_size: Width/height of one cell in display units.

        Returns:
            A grid of ``height // cell_size`` rows and
            ``width // cell_size`` columns.
        """
        return cls(rows=height // cell_size, cols=width // cell_size)

    def __iter__(self) -> Iterator[Tile]:
        for row in self.tiles:
            yield from row

    def in_bounds(self, row: int, col: int) -> bool:
        """Return True if ``(row, col)`` lies inside the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def tile_at(self, row: int, col: int) -> Tile:
        """Return the tile at ``(row, col)``.

        Raises:
            OutOfBounds: If coordinates are outside the grid.
        """
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.rows, self.cols)
        return self.tiles[row][col]

    def reset(self) -> None:
        """Return every tile to a bare, dry, unlit state."""
        for tile in self:
            tile.sun = 0
            tile.water = 0
            tile.crop = None
            tile.growth_stage = None
            tile.overcrowded = False

    def set_resources(self, row: int, col: int, sun: int, water: int) -> None:
        """Overwrite the sun and water of one tile."""
        tile = self.tile_at(row, col)
        tile.sun = sun
        tile.water = water

    def set_crop(
        self,
        row: int,
        col: int,
        crop: CropType,
        growth_stage: GrowthStage = GrowthStage.SPROUT,
    ) -> None:
        """Place ``crop`` at ``growth_stage`` on one tile."""
        tile = self.tile_at(row, col)
        tile.crop = crop
        tile.growth_stage = GrowthStage(growth_stage)

    def clear_crop(self, row: int, col: int) -> None:
        """Remove any crop from one tile."""
        tile = self.tile_at(row, col)
        tile.crop = None
        tile.growth_stage = None
        tile.overcrowded = False

    def neighbours(
        self,
        row: int,
        col: int,
        *,
        include_diagonals: bool = True,
    ) -> list[Tile]:
        """Return adjacent tiles for the given position.

        Args:
            row: Row index.
            col: Column index.
            include_diagonals: If True, return up to 8 neighbours; otherwise 4.

        Returns:
            List of neighbouring tiles (excludes out-of-bounds).
        """
        self.tile_at(row, col)
        offsets = _CARDINAL + _DIAGONAL if include_diagonals else _CARDINAL
        result: list[Tile] = []
        for dr, dc in offsets:
            nr, nc = row + dr, col + dc
            if self.in_bounds(nr, nc):
                result.append(self.tiles[nr][nc])
        return result

    def planted_neighbour_count(self, row: int, col: int) -> int:
        """Count the 8-connected neighbours that hold any crop."""
        return sum(1 for t in self.neighbours(row, col) if t.is_planted)
