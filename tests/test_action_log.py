"""Tests for gridfarm.history.action_log."""

import pytest

from gridfarm.history.action_log import Action, ActionLog
from gridfarm.world.tile import CropType, GrowthStage, PlantingState


def _action(i: int) -> Action:
    return Action(crop=CropType.GARLIC, row=i, col=0)


class TestActionLog:
    """Tests for the bounded undo/redo stacks."""

    def test_empty_undo_redo_are_noops(self) -> None:
        log = ActionLog()
        assert log.undo() is None
        assert log.redo() is None
        assert not log.can_undo
        assert not log.can_redo

    def test_undo_then_redo(self) -> None:
        log = ActionLog()
        action = _action(1)
        log.record(action)
        assert log.undo() is action
        assert log.redo_buffer == (action,)
        assert log.redo() is action
        assert log.history == (action,)
        assert log.redo_buffer == ()

    def test_stack_order(self) -> None:
        log = ActionLog()
        for i in range(3):
            log.record(_action(i))
        assert [log.undo().row for _ in range(3)] == [2, 1, 0]
        assert [log.redo().row for _ in range(3)] == [0, 1, 2]

    def test_history_bound(self) -> None:
        log = ActionLog(max_history=10)
        for i in range(15):
            log.record(_action(i))
        assert len(log.history) == 10
        assert [a.row for a in log.history] == list(range(5, 15))
        undone = [log.undo() for _ in range(11)]
        assert undone[-1] is None
        assert undone[-2].row == 5

    def test_record_clears_redo(self) -> None:
        log = ActionLog()
        log.record(_action(0))
        log.record(_action(1))
        log.undo()
        log.record(_action(2))
        assert log.redo() is None

    def test_undo_does_not_clear_redo(self) -> None:
        log = ActionLog()
        log.record(_action(0))
        log.record(_action(1))
        log.undo()
        log.undo()
        assert len(log.redo_buffer) == 2

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError):
            ActionLog(max_history=0)

    def test_dict_round_trip_keeps_previous_state(self) -> None:
        log = ActionLog(max_history=4)
        log.record(
            Action(
                crop=CropType.TOMATO,
                row=2,
                col=3,
                previous=PlantingState(CropType.GARLIC, GrowthStage.GROWING),
            ),
        )
        log.record(_action(5))
        log.undo()
        restored = ActionLog.from_dict(log.to_dict(), max_history=4)
        assert restored.history == log.history
        assert restored.redo_buffer == log.redo_buffer
