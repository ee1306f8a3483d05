"""Error taxonomy shared by the simulation core and its collaborators.

Undo/redo on an empty stack is deliberately absent: it returns ``None``
rather than raising.
"""

from __future__ import annotations


class GridFarmError(Exception):
    """Base class for all gridfarm errors."""


class OutOfBounds(GridFarmError, IndexError):
    """Cell coordinates fall outside the grid extents."""

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        super().__init__(f"({row}, {col}) out of bounds for {rows}x{cols}")
        self.row = row
        self.col = col


class InvalidScenario(GridFarmError, ValueError):
    """Scenario data is structurally malformed."""


class PersistenceUnavailable(GridFarmError):
    """The save backend could not read or write."""


class SnapshotError(GridFarmError, ValueError):
    """A snapshot is malformed or does not fit the session."""
