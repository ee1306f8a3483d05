"""Tests for gridfarm.simulation — config loading and the session turn loop."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gridfarm.errors import OutOfBounds, SnapshotError
from gridfarm.scenario.scenario import Scenario, ScenarioCondition, VictoryCondition
from gridfarm.simulation.config import GameConfig
from gridfarm.simulation.session import Direction, Session, TurnPhase
from gridfarm.world.grid import TileGrid
from gridfarm.world.tile import CropType, GrowthStage, TileDelta

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class SunnyResources:
    """Resource engine stand-in: full sun and +50 water every turn."""

    def __init__(self) -> None:
        self.conditions: list[ScenarioCondition | None] = []

    def advance_turn(
        self,
        grid: TileGrid,
        condition: ScenarioCondition | None = None,
    ) -> list[TileDelta]:
        self.conditions.append(condition)
        for tile in grid:
            tile.sun = 100
            tile.water = min(100, tile.water + 50)
        return [tile.delta() for tile in grid]


def _shuffle(session: Session, turns: int) -> None:
    """Step right and left alternately for ``turns`` turns."""
    for i in range(turns):
        report = session.request_move(Direction.RIGHT if i % 2 == 0 else Direction.LEFT)
        assert report is not None


class TestGameConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = GameConfig()
        assert cfg.seed == 42
        assert cfg.rows == 18
        assert cfg.cols == 25
        assert cfg.water_base_max == 10
        assert cfg.max_history == 10

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("seed: 99\nviewport_width: 320\ncell_size: 16\n")
        cfg = GameConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.cols == 20
        assert cfg.rows == 600 // 16
        assert cfg.base_dir == tmp_path.resolve()

    def test_shipped_config_loads_scenario(self) -> None:
        cfg = GameConfig.from_yaml(CONFIG_DIR / "default.yaml")
        scenario = cfg.load_scenario()
        assert scenario.name == "Basic Farming"
        assert len(scenario.conditions) == 3

    def test_no_scenario_uses_builtin(self) -> None:
        assert GameConfig().load_scenario() == Scenario.basic_farming()


class TestTurnLoop:
    """Tests for request_move and the turn phases."""

    def test_initial_state(self, session: Session) -> None:
        assert session.turn == 0
        assert session.player == (0, 0)
        assert session.phase is TurnPhase.IDLE
        assert (session.grid.rows, session.grid.cols) == (8, 8)

    def test_move_advances_turn(self, session: Session) -> None:
        report = session.request_move(Direction.DOWN)
        assert report is not None
        assert report.turn == 1
        assert session.turn == 1
        assert session.player == (1, 0)
        assert session.phase is TurnPhase.IDLE
        assert len(report.deltas) == 64

    def test_out_of_bounds_move_rejected(self, session: Session) -> None:
        assert session.request_move(Direction.UP) is None
        assert session.request_move(Direction.LEFT) is None
        assert session.turn == 0
        assert session.player == (0, 0)

    def test_move_in_flight_rejected(self, session: Session) -> None:
        session.phase = TurnPhase.MOVE_PENDING
        assert session.request_move(Direction.DOWN) is None
        assert session.turn == 0

    def test_resources_stay_in_range(self, session: Session) -> None:
        _shuffle(session, 50)
        for tile in session.grid:
            assert 0 <= tile.sun <= 100
            assert 0 <= tile.water <= 100

    def test_condition_resolved_per_turn(self, small_config: GameConfig) -> None:
        sunny = SunnyResources()
        session = Session(config=small_config, resources=sunny)
        _shuffle(session, 25)
        labels = [c.label for c in sunny.conditions]
        assert labels[0] == "normal"
        assert labels[19] == "normal"  # turn 20
        assert labels[20] == "harsh"  # turn 21
        assert labels[24] == "harsh"

    def test_same_seed_same_game(self, small_config: GameConfig) -> None:
        a = Session(config=small_config)
        b = Session(config=small_config)
        for s in (a, b):
            s.plant_at(3, 3, CropType.GARLIC)
            _shuffle(s, 12)
        assert a.serialize() == b.serialize()

    def test_toggle_continuous(self, session: Session) -> None:
        assert session.continuous is False
        assert session.toggle_continuous() is True
        assert session.continuous is True


class TestPlanting:
    """Tests for plant_at, undo and redo through the session."""

    def test_plant_does_not_advance_turn(self, session: Session) -> None:
        delta = session.plant_at(2, 2, CropType.CUCUMBER)
        assert delta is not None
        assert delta.growth_stage is GrowthStage.SPROUT
        assert session.turn == 0
        assert len(session.log.history) == 1

    def test_plant_on_occupied_tile_rejected(self, session: Session) -> None:
        session.plant_at(2, 2, CropType.CUCUMBER)
        assert session.plant_at(2, 2, CropType.GARLIC) is None
        assert session.grid.tile_at(2, 2).crop is CropType.CUCUMBER
        assert len(session.log.history) == 1

    def test_plant_out_of_bounds(self, session: Session) -> None:
        with pytest.raises(OutOfBounds):
            session.plant_at(8, 0, CropType.GARLIC)

    def test_plant_here_uses_player_position(self, session: Session) -> None:
        session.request_move(Direction.RIGHT)
        session.plant_here(CropType.TOMATO)
        assert session.grid.tile_at(0, 1).crop is CropType.TOMATO

    def test_undo_redo_round_trip(self, session: Session) -> None:
        session.plant_at(1, 1, CropType.GARLIC)
        session.undo()
        tile = session.grid.tile_at(1, 1)
        assert tile.crop is None
        assert tile.growth_stage is None

        session.redo()
        assert tile.crop is CropType.GARLIC
        assert tile.growth_stage is GrowthStage.SPROUT

    def test_undo_on_empty_history(self, session: Session) -> None:
        assert session.undo() is None
        assert session.redo() is None

    def test_history_bound_through_session(self, session: Session) -> None:
        cells = [(r, c) for r in range(0, 8, 2) for c in range(0, 8, 2)][:15]
        for r, c in cells:
            session.plant_at(r, c, CropType.GARLIC)
        assert len(session.log.history) == 10
        while session.undo() is not None:
            pass
        planted = {(t.row, t.col) for t in session.grid if t.is_planted}
        assert planted == set(cells[:5])

    def test_crowding_kill_switch(self, session: Session) -> None:
        session.plant_at(2, 2, CropType.GARLIC)
        for r, c in [(1, 1), (1, 3), (3, 2)]:
            session.plant_at(r, c, CropType.CUCUMBER)
        session.grid.set_resources(2, 2, 100, 100)
        session.growth.evaluate(session.grid, 2, 2)
        tile = session.grid.tile_at(2, 2)
        assert tile.growth_stage is GrowthStage.SPROUT
        assert tile.overcrowded

    def test_undo_clears_crowding_flags(self, session: Session) -> None:
        for r, c in [(2, 2), (1, 1), (1, 3), (3, 2)]:
            session.plant_at(r, c, CropType.CUCUMBER)
        assert session.grid.tile_at(2, 2).overcrowded
        session.undo()
        assert not session.grid.tile_at(2, 2).overcrowded


class TestVictoryFlow:
    """End-to-end play through to a win."""

    def _garlic_session(self, small_config: GameConfig) -> Session:
        scenario = Scenario(
            name="garlic only",
            conditions=(ScenarioCondition(0, None),),
            victory_conditions=(VictoryCondition(CropType.GARLIC, 5),),
        )
        return Session(config=small_config, scenario=scenario, resources=SunnyResources())

    def test_five_mature_garlic_wins(self, small_config: GameConfig) -> None:
        session = self._garlic_session(small_config)
        wins: list[Session] = []
        session.add_victory_listener(wins.append)
        for r, c in [(0, 4), (2, 2), (4, 4), (6, 6), (7, 0)]:
            session.plant_at(r, c, CropType.GARLIC)

        first = session.request_move(Direction.RIGHT)
        assert first is not None and not first.victory
        second = session.request_move(Direction.LEFT)
        assert second is not None and second.victory

        assert session.victory
        assert session.phase is TurnPhase.FINISHED
        assert wins == [session]
        mature = [t for t in session.grid if t.growth_stage is GrowthStage.MATURE]
        assert len(mature) == 5

    def test_finished_session_rejects_input(self, small_config: GameConfig) -> None:
        session = self._garlic_session(small_config)
        for r, c in [(0, 4), (2, 2), (4, 4), (6, 6), (7, 0)]:
            session.plant_at(r, c, CropType.GARLIC)
        _shuffle(session, 2)

        assert session.request_move(Direction.DOWN) is None
        assert session.plant_at(5, 1, CropType.GARLIC) is None
        assert session.undo() is None
        assert session.turn == 2

    def test_new_game_resets(self, small_config: GameConfig) -> None:
        session = self._garlic_session(small_config)
        for r, c in [(0, 4), (2, 2), (4, 4), (6, 6), (7, 0)]:
            session.plant_at(r, c, CropType.GARLIC)
        _shuffle(session, 2)
        session.new_game()
        assert session.is_active
        assert session.turn == 0
        assert not any(t.is_planted for t in session.grid)
        assert not session.log.can_undo


class TestSnapshot:
    """Tests for serialize / deserialize."""

    def test_round_trip_through_json(self, session: Session, small_config: GameConfig) -> None:
        session.plant_at(3, 3, CropType.TOMATO)
        session.plant_at(3, 4, CropType.TOMATO)
        session.undo()
        _shuffle(session, 4)
        session.toggle_continuous()

        restored = Session(config=small_config)
        restored.deserialize(json.loads(json.dumps(session.serialize())))

        assert restored.serialize() == session.serialize()
        assert restored.turn == 4
        assert restored.continuous is True
        assert restored.log.can_redo

    def test_size_mismatch_leaves_state_untouched(self, session: Session) -> None:
        session.plant_at(1, 1, CropType.GARLIC)
        before = session.serialize()
        other = Session(config=GameConfig(viewport_width=128, viewport_height=128))
        with pytest.raises(SnapshotError):
            session.deserialize(other.serialize())
        assert session.serialize() == before

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda s: s.update(version=99),
            lambda s: s.update(player=[8, 8]),
            lambda s: s.update(turn=-1),
            lambda s: s["grid"][0][0].update(sun=101),
            lambda s: s["grid"][0][0].update(crop="garlic"),
            lambda s: s["grid"][0][0].update(crop="turnip", growth_stage=0),
            lambda s: s.pop("grid"),
            lambda s: s["log"]["history"].append(
                {"crop": "garlic", "row": 99, "col": 1, "previous": {}},
            ),
            lambda s: s["log"]["redo"].append(
                {"crop": "tomato", "row": 0, "col": -1, "previous": {}},
            ),
        ],
    )
    def test_malformed_snapshot_rejected(self, session: Session, mutate) -> None:
        snapshot = session.serialize()
        mutate(snapshot)
        before = session.serialize()
        with pytest.raises(SnapshotError):
            session.deserialize(snapshot)
        assert session.serialize() == before

    def test_off_grid_logged_action_keeps_undo_working(self, session: Session) -> None:
        session.plant_at(1, 1, CropType.GARLIC)
        snapshot = session.serialize()
        snapshot["log"]["history"][0]["row"] = 99
        with pytest.raises(SnapshotError):
            session.deserialize(snapshot)
        action = session.undo()
        assert action is not None
        assert (action.row, action.col) == (1, 1)
        assert not session.grid.tile_at(1, 1).is_planted

    def test_victory_survives_reload(self, small_config: GameConfig) -> None:
        session = TestVictoryFlow()._garlic_session(small_config)
        for r, c in [(0, 4), (2, 2), (4, 4), (6, 6), (7, 0)]:
            session.plant_at(r, c, CropType.GARLIC)
        _shuffle(session, 2)

        restored = Session(config=small_config)
        restored.deserialize(session.serialize())
        assert restored.phase is TurnPhase.FINISHED
        assert restored.request_move(Direction.DOWN) is None
