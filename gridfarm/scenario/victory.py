"""Victory evaluation — pure counting over the grid."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridfarm.scenario.scenario import VictoryCondition
    from gridfarm.world.grid import TileGrid
    from gridfarm.world.tile import CropType, GrowthStage


def count_at_stage(grid: TileGrid, crop: CropType, stage: GrowthStage) -> int:
    """Count tiles of ``crop`` at ``stage`` or later."""
    return sum(
        1
        for tile in grid
        if tile.crop is crop
        and tile.growth_stage is not None
        and tile.growth_stage >= stage
    )


def victory_progress(
    grid: TileGrid,
    conditions: Iterable[VictoryCondition],
) -> list[tuple[VictoryCondition, int]]:
    """Pair each victory condition with its current count.

    Args:
        grid: The grid to inspect.
        conditions: Victory targets.

    Returns:
        ``(condition, count)`` pairs in the order given.
    """
    return [
        (cond, count_at_stage(grid, cond.crop, cond.required_stage))
        for cond in conditions
    ]


def check_victory(grid: TileGrid, conditions: Iterable[VictoryCondition]) -> bool:
    """Return True if every victory condition's count target is met.

    Reads the grid only; an empty condition list is trivially met.
    """
    return all(
        count >= cond.required_count
        for cond, count in victory_progress(grid, conditions)
    )
