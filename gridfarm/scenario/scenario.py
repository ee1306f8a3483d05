"""Scenario — turn-ranged weather multipliers and victory targets.

A scenario is loaded once at session start and never changes.  Its
conditions are checked in declaration order and the first one whose
turn range contains the current turn wins; turns no condition covers
fall back to neutral multipliers rather than stopping the game.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gridfarm.errors import InvalidScenario
from gridfarm.world.tile import CropType, GrowthStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioCondition:
    """Multipliers active over an inclusive range of turns.

    Attributes:
        turn_start: First turn the condition applies to.
        turn_end: Last turn it applies to, or None for open-ended.
        sun_multiplier: Factor applied to each sun draw.
        water_multiplier: Factor applied to each water draw.
        label: Short identifier for display (e.g. ``"harsh"``).
    """

    turn_start: int
    turn_end: int | None = None
    sun_multiplier: float = 1.0
    water_multiplier: float = 1.0
    label: str = ""

    def contains(self, turn: int) -> bool:
        """Return True if ``turn`` falls inside this condition's range."""
        if turn < self.turn_start:
            return False
        return self.turn_end is None or turn <= self.turn_end


@dataclass(frozen=True)
class VictoryCondition:
    """A required number of plants of one species at a minimum stage."""

    crop: CropType
    required_count: int
    required_stage: GrowthStage = GrowthStage.MATURE


@dataclass(frozen=True)
class Scenario:
    """An immutable scenario table.

    Attributes:
        name: Display name.
        description: One-line description.
        conditions: Ordered, expected non-overlapping turn ranges.
        victory_conditions: Targets that must all be met to win.
    """

    name: str
    description: str = ""
    conditions: tuple[ScenarioCondition, ...] = ()
    victory_conditions: tuple[VictoryCondition, ...] = ()

    def condition_for_turn(self, turn: int) -> ScenarioCondition | None:
        """Return the first condition covering ``turn``, or None."""
        for condition in self.conditions:
            if condition.contains(turn):
                return condition
        return None

    def coverage_gaps(self, horizon: int) -> list[int]:
        """List turns in ``[0, horizon]`` that no condition covers."""
        return [t for t in range(horizon + 1) if self.condition_for_turn(t) is None]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scenario:
        """Build a scenario from parsed YAML/JSON data.

        Args:
            data: Mapping with ``name``, optional ``description``,
                ``conditions`` and ``victory`` lists.

        Returns:
            A validated Scenario.

        Raises:
            InvalidScenario: If a field is missing or out of range.
        """
        if not isinstance(data, dict) or "name" not in data:
            msg = "scenario must be a mapping with a 'name'"
            raise InvalidScenario(msg)

        raw_conditions = data.get("conditions") or []
        raw_victory = data.get("victory") or []
        if not isinstance(raw_conditions, list) or not isinstance(raw_victory, list):
            msg = "scenario 'conditions' and 'victory' must be lists"
            raise InvalidScenario(msg)

        conditions = tuple(_parse_condition(c) for c in raw_conditions)
        victory = tuple(_parse_victory(v) for v in raw_victory)
        scenario = cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            conditions=conditions,
            victory_conditions=victory,
        )
        scenario._warn_on_layout()
        return scenario

    @classmethod
    def from_yaml(cls, path: str | Path) -> Scenario:
        """Load a scenario from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            InvalidScenario: If the contents are malformed.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def basic_farming(cls) -> Scenario:
        """The shipped scenario: a harsh-sun spell between two calm periods."""
        return cls(
            name="Basic Farming",
            description="A standard farming scenario with occasional harsh sunlight",
            conditions=(
                ScenarioCondition(0, 20, 1.0, 1.0, label="normal"),
                ScenarioCondition(21, 40, 20.0, -0.5, label="harsh"),
                ScenarioCondition(41, None, 1.0, 1.0, label="return"),
            ),
            victory_conditions=tuple(
                VictoryCondition(crop=crop, required_count=5) for crop in CropType
            ),
        )

    def _warn_on_layout(self) -> None:
        ordered = sorted(self.conditions, key=lambda c: c.turn_start)
        expected = 0
        for cond in ordered:
            if cond.turn_start > expected:
                logger.warning(
                    "scenario %r leaves turns %d-%d uncovered; multiplier defaults to 1",
                    self.name,
                    expected,
                    cond.turn_start - 1,
                )
            elif cond.turn_start < expected:
                logger.warning(
                    "scenario %r: conditions overlap at turn %d; first match wins",
                    self.name,
                    cond.turn_start,
                )
            if cond.turn_end is None:
                return
            expected = max(expected, cond.turn_end + 1)
        if self.conditions:
            logger.warning(
                "scenario %r: no open-ended condition; turn %d on uses multiplier 1",
                self.name,
                expected,
            )


def _parse_condition(raw: Any) -> ScenarioCondition:
    if not isinstance(raw, dict) or "turn_start" not in raw:
        msg = f"condition needs a 'turn_start': {raw!r}"
        raise InvalidScenario(msg)
    try:
        start = int(raw["turn_start"])
        end = raw.get("turn_end")
        end = None if end is None else int(end)
        sun = float(raw.get("sun_multiplier", 1.0))
        water = float(raw.get("water_multiplier", 1.0))
    except (TypeError, ValueError) as exc:
        msg = f"non-numeric condition field in {raw!r}"
        raise InvalidScenario(msg) from exc
    if start < 0 or (end is not None and end < start):
        msg = f"bad turn range {start}..{end}"
        raise InvalidScenario(msg)
    return ScenarioCondition(
        turn_start=start,
        turn_end=end,
        sun_multiplier=sun,
        water_multiplier=water,
        label=str(raw.get("label", "")),
    )


def _parse_victory(raw: Any) -> VictoryCondition:
    if not isinstance(raw, dict) or "crop" not in raw or "count" not in raw:
        msg = f"victory entry needs 'crop' and 'count': {raw!r}"
        raise InvalidScenario(msg)
    try:
        crop = CropType(str(raw["crop"]).lower())
        count = int(raw["count"])
        stage = GrowthStage(int(raw.get("stage", GrowthStage.MATURE)))
    except (TypeError, ValueError) as exc:
        msg = f"bad victory entry {raw!r}"
        raise InvalidScenario(msg) from exc
    if count < 0:
        msg = f"victory count must be >= 0, got {count}"
        raise InvalidScenario(msg)
    return VictoryCondition(crop=crop, required_count=count, required_stage=stage)
