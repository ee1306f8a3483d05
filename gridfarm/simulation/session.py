"""Session — owns one game's state and drives the turn loop.

A session holds the tile grid, the planting history, the turn counter,
the avatar position and the scenario.  It is the only writer of the
grid.  Each accepted move walks the turn phases in order:

1. MOVE_PENDING: the avatar steps into the target cell
2. RESOURCES_ADVANCING: sun/water for the new turn's scenario condition
3. GROWTH_EVALUATING: growth rules for every tile
4. VICTORY_CHECKING: the scenario's targets; a win ends the session

Planting, undo and redo sit outside the turn loop: they change one tile
immediately and never advance the turn.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

import numpy as np
from numpy.random import Generator

from gridfarm.crops.growth import GrowthEngine
from gridfarm.errors import SnapshotError
from gridfarm.history.action_log import Action, ActionLog
from gridfarm.scenario.scenario import Scenario, ScenarioCondition
from gridfarm.scenario.victory import check_victory
from gridfarm.simulation.config import GameConfig
from gridfarm.world.grid import TileGrid
from gridfarm.world.resources import ResourceEngine
from gridfarm.world.tile import (
    RESOURCE_MAX,
    RESOURCE_MIN,
    CropType,
    GrowthStage,
    TileDelta,
)

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class TurnPhase(Enum):
    """Where the session is in its turn cycle."""

    IDLE = auto()
    MOVE_PENDING = auto()
    RESOURCES_ADVANCING = auto()
    GROWTH_EVALUATING = auto()
    VICTORY_CHECKING = auto()
    FINISHED = auto()


class Direction(Enum):
    """Avatar step directions as ``(d_row, d_col)``."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


@dataclass(frozen=True)
class TurnReport:
    """Result of one accepted move.

    Attributes:
        turn: The turn that was just simulated.
        deltas: Final state of every tile touched this turn.
        victory: True if this turn won the game.
    """

    turn: int
    deltas: list[TileDelta]
    victory: bool


VictoryListener = Callable[["Session"], None]


@dataclass
class Session:
    """One game in progress.

    Attributes:
        config: Loaded game configuration.
        scenario: Weather table and victory targets for this game.
        rng: Seeded random generator; built from ``config.seed`` if omitted.
        resources: Sun/water engine.
        growth: Growth-stage engine.
        grid: The farm.
        log: Undo/redo history of plantings.
        turn: Number of turns simulated so far.
        player: Avatar position as ``(row, col)``.
        continuous: Whether continuous movement mode is active.
        phase: Current turn phase.
        victory: True once the scenario's targets have been met.
    """

    config: GameConfig = field(default_factory=GameConfig)
    scenario: Scenario = field(default_factory=Scenario.basic_farming)
    rng: Generator | None = None
    resources: ResourceEngine | None = None
    growth: GrowthEngine = field(default_factory=GrowthEngine)
    grid: TileGrid = field(init=False)
    log: ActionLog = field(init=False)
    turn: int = field(init=False, default=0)
    player: tuple[int, int] = field(init=False, default=(0, 0))
    continuous: bool = field(init=False, default=False)
    phase: TurnPhase = field(init=False, default=TurnPhase.IDLE)
    victory: bool = field(init=False, default=False)
    _listeners: list[VictoryListener] = field(
        init=False,
        default_factory=list,
        repr=False,
    )

    def __post_init__(self) -> None:
        """Build grid, history and engines from config."""
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)
        if self.resources is None:
            self.resources = ResourceEngine(
                rng=self.rng,
                water_base_max=self.config.water_base_max,
            )
        self.grid = TileGrid(rows=self.config.rows, cols=self.config.cols)
        self.log = ActionLog(max_history=self.config.max_history)
        self.continuous = self.config.continuous_movement

    # -- Queries -------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        """Return True while the session accepts input."""
        return self.phase is not TurnPhase.FINISHED

    @property
    def current_condition(self) -> ScenarioCondition | None:
        """Scenario condition for the most recent turn."""
        return self.scenario.condition_for_turn(self.turn)

    def add_victory_listener(self, listener: VictoryListener) -> None:
        """Register a callback invoked once when the game is won."""
        self._listeners.append(listener)

    # -- Turn loop -----------------------------------------------------------

    def request_move(self, direction: Direction) -> TurnReport | None:
        """Step the avatar one cell and simulate one turn.

        Args:
            direction: Where to step.

        Returns:
            The turn's report, or None if the move was rejected (game
            over, a move already in flight, or target off the grid).
        """
        if self.phase is not TurnPhase.IDLE:
            return None
        d_row, d_col = direction.value
        target = (self.player[0] + d_row, self.player[1] + d_col)
        if not self.grid.in_bounds(*target):
            return None

        self.phase = TurnPhase.MOVE_PENDING
        self.player = target
        self.turn += 1

        self.phase = TurnPhase.RESOURCES_ADVANCING
        changed = {
            (d.row, d.col): d
            for d in self.resources.advance_turn(self.grid, self.current_condition)
        }

        self.phase = TurnPhase.GROWTH_EVALUATING
        for delta in self.growth.sweep(self.grid):
            changed[(delta.row, delta.col)] = delta

        self.phase = TurnPhase.VICTORY_CHECKING
        won = self._check_victory()
        if not won:
            self.phase = TurnPhase.IDLE

        logger.debug("turn %d done, player at %s", self.turn, self.player)
        return TurnReport(turn=self.turn, deltas=list(changed.values()), victory=won)

    def toggle_continuous(self) -> bool:
        """Flip continuous movement mode and return the new setting."""
        self.continuous = not self.continuous
        return self.continuous

    # -- Planting and history ------------------------------------------------

    def plant_at(self, row: int, col: int, crop: CropType) -> TileDelta | None:
        """Sow ``crop`` on an empty tile.

        The new sprout is evaluated once so it renders consistently, and
        the planting is recorded for undo.  The turn does not advance.

        Args:
            row: Row index.
            col: Column index.
            crop: Species to sow.

        Returns:
            The tile's new state, or None if the game is over, a move is
            in flight, or the tile is already occupied.

        Raises:
            OutOfBounds: If coordinates are outside the grid.
        """
        if self.phase is not TurnPhase.IDLE:
            return None
        tile = self.grid.tile_at(row, col)
        if tile.is_planted:
            return None

        action = Action(crop=crop, row=row, col=col, previous=tile.planting_state())
        self.grid.set_crop(row, col, crop, GrowthStage.SPROUT)
        self.log.record(action)
        delta = self.growth.evaluate(self.grid, row, col)
        self.growth.refresh_crowding(self.grid, row, col)
        self._check_victory()
        return delta

    def plant_here(self, crop: CropType) -> TileDelta | None:
        """Sow ``crop`` under the avatar."""
        return self.plant_at(*self.player, crop)

    def undo(self) -> Action | None:
        """Revert the most recent planting.

        Returns:
            The reverted action, or None if there was nothing to undo.
        """
        if self.phase is not TurnPhase.IDLE:
            return None
        action = self.log.undo()
        if action is None:
            return None
        prev = action.previous
        if prev.crop is None or prev.growth_stage is None:
            self.grid.clear_crop(action.row, action.col)
        else:
            self.grid.set_crop(action.row, action.col, prev.crop, prev.growth_stage)
        self.growth.refresh_crowding(self.grid, action.row, action.col)
        return action

    def redo(self) -> Action | None:
        """Re-apply the most recently undone planting as a fresh sprout.

        Returns:
            The re-applied action, or None if there was nothing to redo.
        """
        if self.phase is not TurnPhase.IDLE:
            return None
        action = self.log.redo()
        if action is None:
            return None
        self.grid.set_crop(action.row, action.col, action.crop, GrowthStage.SPROUT)
        self.growth.refresh_crowding(self.grid, action.row, action.col)
        return action

    def new_game(self) -> None:
        """Clear the farm and history and start again from turn 0."""
        self.grid.reset()
        self.log.clear()
        self.turn = 0
        self.player = (0, 0)
        self.victory = False
        self.phase = TurnPhase.IDLE
        logger.info("new game started (%s)", self.scenario.name)

    # -- Persistence boundary ------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        """Return a JSON-friendly snapshot of the whole session state."""
        return {
            "version": SNAPSHOT_VERSION,
            "rows": self.grid.rows,
            "cols": self.grid.cols,
            "grid": [
                [
                    {
                        "sun": t.sun,
                        "water": t.water,
                        "crop": None if t.crop is None else t.crop.value,
                        "growth_stage": (
                            None if t.growth_stage is None else int(t.growth_stage)
                        ),
                        "overcrowded": t.overcrowded,
                    }
                    for t in row
                ]
                for row in self.grid.tiles
            ],
            "player": list(self.player),
            "turn": self.turn,
            "continuous": self.continuous,
            "victory": self.victory,
            "log": self.log.to_dict(),
        }

    def deserialize(self, snapshot: dict[str, Any]) -> None:
        """Replace the session state with a snapshot.

        The snapshot is validated in full before anything is swapped in,
        so a rejected snapshot leaves the session untouched.

        Raises:
            SnapshotError: If the snapshot is malformed or sized for a
                different grid.
        """
        try:
            grid, log, player, turn, continuous, victory = self._parse_snapshot(
                snapshot,
            )
        except SnapshotError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            msg = f"malformed snapshot: {exc}"
            raise SnapshotError(msg) from exc

        self.grid = grid
        self.log = log
        self.player = player
        self.turn = turn
        self.continuous = continuous
        self.victory = victory
        self.phase = TurnPhase.FINISHED if victory else TurnPhase.IDLE

    # -- Internals -----------------------------------------------------------

    def _check_victory(self) -> bool:
        if self.victory:
            return True
        if not check_victory(self.grid, self.scenario.victory_conditions):
            return False
        self.victory = True
        self.phase = TurnPhase.FINISHED
        logger.info("victory on turn %d", self.turn)
        for listener in self._listeners:
            listener(self)
        return True

    def _parse_snapshot(
        self,
        snapshot: dict[str, Any],
    ) -> tuple[TileGrid, ActionLog, tuple[int, int], int, bool, bool]:
        if snapshot.get("version") != SNAPSHOT_VERSION:
            msg = f"unsupported snapshot version {snapshot.get('version')!r}"
            raise SnapshotError(msg)
        rows, cols = int(snapshot["rows"]), int(snapshot["cols"])
        if (rows, cols) != (self.grid.rows, self.grid.cols):
            msg = (
                f"snapshot grid {rows}x{cols} does not match "
                f"{self.grid.rows}x{self.grid.cols}"
            )
            raise SnapshotError(msg)

        grid = TileGrid(rows=rows, cols=cols)
        raw_rows = snapshot["grid"]
        if len(raw_rows) != rows or any(len(r) != cols for r in raw_rows):
            msg = "snapshot grid data does not match its declared size"
            raise SnapshotError(msg)
        for r, raw_row in enumerate(raw_rows):
            for c, raw in enumerate(raw_row):
                tile = grid.tiles[r][c]
                tile.sun = _resource(raw["sun"])
                tile.water = _resource(raw["water"])
                crop, stage = raw.get("crop"), raw.get("growth_stage")
                if (crop is None) != (stage is None):
                    msg = f"tile ({r}, {c}) has crop without stage or vice versa"
                    raise SnapshotError(msg)
                if crop is not None:
                    tile.crop = CropType(crop)
                    tile.growth_stage = GrowthStage(stage)
                    tile.overcrowded = bool(raw.get("overcrowded", False))

        log = ActionLog.from_dict(snapshot.get("log") or {}, self.config.max_history)
        for action in (*log.history, *log.redo_buffer):
            if not grid.in_bounds(action.row, action.col):
                msg = f"logged action at ({action.row}, {action.col}) is off the grid"
                raise SnapshotError(msg)
        p_row, p_col = (int(v) for v in snapshot["player"])
        if not grid.in_bounds(p_row, p_col):
            msg = f"player position ({p_row}, {p_col}) is off the grid"
            raise SnapshotError(msg)
        turn = int(snapshot["turn"])
        if turn < 0:
            msg = f"turn must be >= 0, got {turn}"
            raise SnapshotError(msg)
        return (
            grid,
            log,
            (p_row, p_col),
            turn,
            bool(snapshot.get("continuous", False)),
            bool(snapshot.get("victory", False)),
        )


def _resource(value: Any) -> int:
    level = int(value)
    if not RESOURCE_MIN <= level <= RESOURCE_MAX:
        msg = f"resource level {level} outside {RESOURCE_MIN}-{RESOURCE_MAX}"
        raise SnapshotError(msg)
    return level
