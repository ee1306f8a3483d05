"""Messages — the closed set of UI strings and their translations.

Templates use ``{0}``-style positional placeholders.  Placeholders with
no matching argument are left in place so a missing value is visible
rather than silently dropped.
"""

from __future__ import annotations

import re
from enum import Enum

DEFAULT_LOCALE = "en"

_PLACEHOLDER = re.compile(r"\{(\d+)\}")


class MessageKey(Enum):
    """Every string the shell may display."""

    HEADER_CONTROLS = "ui.headers.gameControls"
    HEADER_GROWTH = "ui.headers.growthConditions"
    HEADER_SCENARIO = "ui.headers.currentScenario"
    SAVE_LOAD_TITLE = "ui.controls.saveLoad.title"
    SAVE = "ui.controls.saveLoad.save"
    LOAD = "ui.controls.saveLoad.load"
    SLOT = "ui.controls.saveLoad.slot"
    MOVEMENT_TITLE = "ui.controls.movement.title"
    MOVE_GRID = "ui.controls.movement.grid"
    MOVE_CONTINUOUS = "ui.controls.movement.continuous"
    UNDO = "ui.controls.movement.undo"
    REDO = "ui.controls.movement.redo"
    NEW_GAME = "ui.controls.newGame"
    PLANTING_TITLE = "ui.controls.planting.title"
    PLANT_GARLIC = "ui.controls.planting.garlic"
    PLANT_CUCUMBER = "ui.controls.planting.cucumber"
    PLANT_TOMATO = "ui.controls.planting.tomato"
    GARLIC = "ui.plants.garlic"
    CUCUMBER = "ui.plants.cucumber"
    TOMATO = "ui.plants.tomato"
    REQ_WATER = "ui.plants.requirements.water"
    REQ_SUN = "ui.plants.requirements.sun"
    REQ_ADJACENT = "ui.plants.requirements.needsAdjacent"
    TURN = "ui.status.turn"
    CONDITION_NORMAL = "ui.scenario.conditions.normal"
    CONDITION_HARSH = "ui.scenario.conditions.harsh"
    CONDITION_RETURN = "ui.scenario.conditions.return"
    VICTORY_REQUIREMENTS = "ui.scenario.victory.title"
    VICTORY_PROGRESS = "ui.scenario.victory.progress"
    WARNING_TITLE = "ui.warning.title"
    WARNING_OVERCROWDING = "ui.warning.overcrowding"
    VICTORY_TITLE = "ui.victory.title"
    VICTORY_MESSAGE = "ui.victory.message"
    VICTORY_SUB = "ui.victory.subMessage"
    SAVED = "ui.notice.saved"
    LOADED = "ui.notice.loaded"
    SAVE_FAILED = "ui.notice.saveFailed"
    LOAD_FAILED = "ui.notice.loadFailed"


TRANSLATIONS: dict[str, dict[MessageKey, str]] = {
    "en": {
        MessageKey.HEADER_CONTROLS: "GAME CONTROLS",
        MessageKey.HEADER_GROWTH: "GROWTH CONDITIONS",
        MessageKey.HEADER_SCENARIO: "CURRENT SCENARIO",
        MessageKey.SAVE_LOAD_TITLE: "SAVE/LOAD",
        MessageKey.SAVE: "Save Game",
        MessageKey.LOAD: "Load Game",
        MessageKey.SLOT: "Slot {0}",
        MessageKey.MOVEMENT_TITLE: "MOVEMENT",
        MessageKey.MOVE_GRID: "Grid Movement",
        MessageKey.MOVE_CONTINUOUS: "Toggle Continuous",
        MessageKey.UNDO: "Undo Planting",
        MessageKey.REDO: "Redo Planting",
        MessageKey.NEW_GAME: "New Game",
        MessageKey.PLANTING_TITLE: "PLANTING",
        MessageKey.PLANT_GARLIC: "Plant Garlic",
        MessageKey.PLANT_CUCUMBER: "Plant Cucumber",
        MessageKey.PLANT_TOMATO: "Plant Tomato",
        MessageKey.GARLIC: "GARLIC",
        MessageKey.CUCUMBER: "CUCUMBER",
        MessageKey.TOMATO: "TOMATO",
        MessageKey.REQ_WATER: "Water ≥ {0}",
        MessageKey.REQ_SUN: "Sun {0} {1}",
        MessageKey.REQ_ADJACENT: "Needs adjacent tomato",
        MessageKey.TURN: "Turn: {0}",
        MessageKey.CONDITION_NORMAL: "Normal weather conditions",
        MessageKey.CONDITION_HARSH: "Harsh sunlight period",
        MessageKey.CONDITION_RETURN: "Return to normal conditions",
        MessageKey.VICTORY_REQUIREMENTS: "VICTORY REQUIREMENTS",
        MessageKey.VICTORY_PROGRESS: "{0}: {1}/{2}",
        MessageKey.WARNING_TITLE: "WARNING",
        MessageKey.WARNING_OVERCROWDING: "Plants die with 3+ neighbors",
        MessageKey.VICTORY_TITLE: "Congratulations!",
        MessageKey.VICTORY_MESSAGE: "All farming goals achieved!",
        MessageKey.VICTORY_SUB: "Your farm is flourishing!",
        MessageKey.SAVED: "Saved to slot {0}",
        MessageKey.LOADED: "Loaded slot {0}",
        MessageKey.SAVE_FAILED: "Could not save to slot {0}",
        MessageKey.LOAD_FAILED: "Could not load slot {0}",
    },
}


def translate(key: MessageKey, locale: str = DEFAULT_LOCALE, *args: object) -> str:
    """Render a message in ``locale``, substituting positional arguments.

    Args:
        key: Which message to render.
        locale: Locale code; unknown locales fall back to English.
        *args: Values for ``{0}``, ``{1}``, ... placeholders.

    Returns:
        The rendered string, or the key's dotted name if no locale
        defines it.
    """
    table = TRANSLATIONS.get(locale, TRANSLATIONS[DEFAULT_LOCALE])
    template = table.get(key) or TRANSLATIONS[DEFAULT_LOCALE].get(key)
    if template is None:
        return key.value

    def _fill(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return str(args[index]) if index < len(args) else match.group(0)

    return _PLACEHOLDER.sub(_fill, template)
