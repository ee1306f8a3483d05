"""ActionLog — bounded undo/redo history of planting actions.

Only planting is tracked.  ``history`` is a bounded deque used as a
stack: pushes beyond capacity silently evict the oldest entry.  The
redo buffer is cleared by recording a new action, never by undo.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from gridfarm.world.tile import CropType, GrowthStage, PlantingState

MAX_HISTORY = 10


@dataclass(frozen=True)
class Action:
    """One planting, with the tile's planting state from before it.

    Attributes:
        crop: Species planted.
        row: Row of the planted tile.
        col: Column of the planted tile.
        previous: Copy of the tile's crop/stage before planting.
    """

    crop: CropType
    row: int
    col: int
    previous: PlantingState = field(default_factory=PlantingState)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        prev = self.previous
        return {
            "crop": self.crop.value,
            "row": self.row,
            "col": self.col,
            "previous": {
                "crop": None if prev.crop is None else prev.crop.value,
                "growth_stage": (
                    None if prev.growth_stage is None else int(prev.growth_stage)
                ),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        """Rebuild an action from :meth:`to_dict` output.

        Raises:
            KeyError, TypeError, ValueError: If the data is malformed.
        """
        prev = data.get("previous") or {}
        prev_crop = prev.get("crop")
        prev_stage = prev.get("growth_stage")
        return cls(
            crop=CropType(data["crop"]),
            row=int(data["row"]),
            col=int(data["col"]),
            previous=PlantingState(
                crop=None if prev_crop is None else CropType(prev_crop),
                growth_stage=None if prev_stage is None else GrowthStage(prev_stage),
            ),
        )


class ActionLog:
    """Undo/redo stacks over planting actions.

    Attributes:
        max_history: Capacity of the undo history.
    """

    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        """Create an empty log.

        Args:
            max_history: Number of actions kept for undo.
        """
        if max_history < 1:
            msg = f"max_history must be >= 1, got {max_history}"
            raise ValueError(msg)
        self.max_history = max_history
        self._history: deque[Action] = deque(maxlen=max_history)
        self._redo: list[Action] = []

    @property
    def history(self) -> tuple[Action, ...]:
        """Undoable actions, oldest first."""
        return tuple(self._history)

    @property
    def redo_buffer(self) -> tuple[Action, ...]:
        """Redoable actions, most recently undone last."""
        return tuple(self._redo)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(self, action: Action) -> None:
        """Push a new action, evicting the oldest on overflow.

        Clears the redo buffer.
        """
        self._history.append(action)
        self._redo.clear()

    def undo(self) -> Action | None:
        """Move the newest action to the redo buffer and return it.

        Returns:
            The action to revert, or None if there is nothing to undo.
        """
        if not self._history:
            return None
        action = self._history.pop()
        self._redo.append(action)
        return action

    def redo(self) -> Action | None:
        """Move the most recently undone action back onto history.

        Returns:
            The action to re-apply, or None if there is nothing to redo.
        """
        if not self._redo:
            return None
        action = self._redo.pop()
        self._history.append(action)
        return action

    def clear(self) -> None:
        """Drop both stacks."""
        self._history.clear()
        self._redo.clear()

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Return both stacks in a JSON-friendly form."""
        return {
            "history": [a.to_dict() for a in self._history],
            "redo": [a.to_dict() for a in self._redo],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        max_history: int = MAX_HISTORY,
    ) -> ActionLog:
        """Rebuild a log from :meth:`to_dict` output.

        History beyond ``max_history`` keeps only the newest entries.
        """
        log = cls(max_history=max_history)
        for raw in data.get("history") or []:
            log._history.append(Action.from_dict(raw))
        log._redo = [Action.from_dict(raw) for raw in data.get("redo") or []]
        return log
