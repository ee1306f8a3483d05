"""Pygame 2D shell for gridfarm.

Renders the farm, the avatar and a side panel, and turns keyboard input
into session commands.  The avatar glides toward its cell; a new step is
only signalled once the glide has finished, so one key press is one
turn in grid mode and a held key repeats on a timer in continuous mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from gridfarm.crops.species import GrowthRule
    from gridfarm.persistence.store import SaveSlots
    from gridfarm.simulation.session import Session

from gridfarm.i18n.messages import MessageKey, translate
from gridfarm.scenario.victory import victory_progress
from gridfarm.simulation.session import Direction
from gridfarm.world.tile import CropType, GrowthStage

# Colour palette
_BG = (45, 45, 45)
_GRID_LINE = (51, 51, 51)
_AVATAR = (0, 255, 0)
_TEXT = (200, 200, 200)
_WARN = (255, 90, 90)
_CROWDED = (90, 20, 20)

# Soil tint: dry/dark -> wet/blue, lifted by sunlight
_SOIL_DRY = np.array([60, 45, 30], dtype=np.float64)
_SOIL_WET = np.array([40, 70, 130], dtype=np.float64)
_SUN_TINT = np.array([60, 55, 0], dtype=np.float64)

_CROP_COLOURS: dict[CropType, tuple[int, int, int]] = {
    CropType.GARLIC: (235, 235, 210),
    CropType.CUCUMBER: (60, 170, 60),
    CropType.TOMATO: (220, 50, 40),
}

_CROP_NAMES: dict[CropType, MessageKey] = {
    CropType.GARLIC: MessageKey.GARLIC,
    CropType.CUCUMBER: MessageKey.CUCUMBER,
    CropType.TOMATO: MessageKey.TOMATO,
}

_CONDITION_LABELS: dict[str, MessageKey] = {
    "normal": MessageKey.CONDITION_NORMAL,
    "harsh": MessageKey.CONDITION_HARSH,
    "return": MessageKey.CONDITION_RETURN,
}

_MOVE_KEYS: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}

_PLANT_KEYS: dict[int, CropType] = {
    pygame.K_1: CropType.GARLIC,
    pygame.K_2: CropType.CUCUMBER,
    pygame.K_3: CropType.TOMATO,
}

_MOVE_SPEED = 200.0  # display units per second while gliding


def requirement_lines(rule: GrowthRule, locale: str) -> list[str]:
    """Describe a growth rule as short display lines, sun first."""
    lines: list[str] = []
    if rule.min_sun > 0:
        lines.append(translate(MessageKey.REQ_SUN, locale, "≥", rule.min_sun))
    if rule.max_sun < 100:
        lines.append(translate(MessageKey.REQ_SUN, locale, "≤", rule.max_sun))
    if rule.min_water > 0:
        lines.append(translate(MessageKey.REQ_WATER, locale, rule.min_water))
    if rule.needs_adjacent_same:
        lines.append(translate(MessageKey.REQ_ADJACENT, locale))
    return lines


class PygameRenderer:
    """Renders a Session into a Pygame window and feeds it input.

    Attributes:
        session: The game being played.
        slots: Save-slot manager used for save/load/autosave.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    _SLOTS: ClassVar[tuple[int, ...]] = (1, 2, 3)

    def __init__(
        self,
        session: Session,
        slots: SaveSlots,
        cell_size: int = 32,
        autosave_seconds: float = 30.0,
        step_ms: int = 150,
    ) -> None:
        """Initialise the renderer.

        Args:
            session: The session to render and control.
            slots: Save-slot manager.
            cell_size: Pixel width/height per grid cell.
            autosave_seconds: Autosave period; 0 disables it.
            step_ms: Held-key repeat interval in continuous mode.
        """
        self.session = session
        self.slots = slots
        self.cell_size = cell_size
        self.autosave_seconds = autosave_seconds
        self.step_ms = step_ms
        self.locale = session.config.locale

        self._slot_index = 0
        self._autosave_timer = 0.0
        self._step_timer = 0.0
        self._key_latched = False
        self._notice = ""
        self._avatar = self._cell_centre(*session.player)

        grid = session.grid
        self._panel_width = 320
        self._win_w = grid.cols * cell_size + self._panel_width
        self._win_h = max(grid.rows * cell_size, 760)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("gridfarm")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.big_font = pygame.font.SysFont("monospace", 28, bold=True)
        self.running = True

    @property
    def slot(self) -> int:
        """Currently selected save slot."""
        return self._SLOTS[self._slot_index]

    def _t(self, key: MessageKey, *args: object) -> str:
        return translate(key, self.locale, *args)

    def _cell_centre(self, row: int, col: int) -> np.ndarray:
        half = self.cell_size / 2
        return np.array(
            [col * self.cell_size + half, row * self.cell_size + half],
            dtype=np.float64,
        )

    def run(self, fps: int = 60) -> None:
        """Main loop: handle events, glide avatar, autosave, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            self._update_movement(dt)
            self._update_autosave(dt)
            self._draw()

        if self.autosave_seconds > 0:
            self.slots.autosave(self.session)
        pygame.quit()

    # -- Input ---------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._on_key(event.key)

    def _on_key(self, key: int) -> None:
        session = self.session
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key in _PLANT_KEYS:
            session.plant_here(_PLANT_KEYS[key])
        elif key == pygame.K_z:
            session.undo()
        elif key == pygame.K_y:
            session.redo()
        elif key == pygame.K_c:
            session.toggle_continuous()
        elif key == pygame.K_TAB:
            self._slot_index = (self._slot_index + 1) % len(self._SLOTS)
        elif key == pygame.K_s:
            ok = self.slots.save(session, self.slot)
            self._notice = self._t(
                MessageKey.SAVED if ok else MessageKey.SAVE_FAILED,
                self.slot,
            )
        elif key == pygame.K_l:
            ok = self.slots.load(session, self.slot)
            self._notice = self._t(
                MessageKey.LOADED if ok else MessageKey.LOAD_FAILED,
                self.slot,
            )
            if ok:
                self._avatar = self._cell_centre(*session.player)
        elif key == pygame.K_n:
            session.new_game()
            self._avatar = self._cell_centre(*session.player)
            self._notice = ""

    def _held_direction(self) -> Direction | None:
        pressed = pygame.key.get_pressed()
        for key, direction in _MOVE_KEYS.items():
            if pressed[key]:
                return direction
        return None

    def _update_movement(self, dt: float) -> None:
        """Glide the avatar and signal a new step when allowed."""
        target = self._cell_centre(*self.session.player)
        offset = target - self._avatar
        distance = float(np.hypot(*offset))
        if distance < 1.0:
            self._avatar = target
        else:
            step = min(distance, _MOVE_SPEED * dt)
            self._avatar = self._avatar + offset / distance * step
            return

        direction = self._held_direction()
        if direction is None:
            self._key_latched = False
            self._step_timer = 0.0
            return

        if self.session.continuous:
            self._step_timer -= dt * 1000.0
            if self._step_timer > 0:
                return
            self._step_timer = float(self.step_ms)
        elif self._key_latched:
            return

        self._key_latched = True
        self.session.request_move(direction)

    def _update_autosave(self, dt: float) -> None:
        if self.autosave_seconds <= 0 or not self.session.is_active:
            return
        self._autosave_timer += dt
        if self._autosave_timer >= self.autosave_seconds:
            self._autosave_timer = 0.0
            self.slots.autosave(self.session)

    # -- Drawing -------------------------------------------------------------

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_tiles()
        self._draw_grid_lines()
        self._draw_avatar()
        self._draw_info_panel()
        if self.session.victory:
            self._draw_victory()
        pygame.display.flip()

    def _draw_tiles(self) -> None:
        """Tint soil by water and sun, then draw each crop."""
        cs = self.cell_size
        for tile in self.session.grid:
            rect = (tile.col * cs, tile.row * cs, cs, cs)
            if tile.overcrowded:
                colour = np.array(_CROWDED, dtype=np.float64)
            else:
                wet = tile.water / 100.0
                colour = _SOIL_DRY + wet * (_SOIL_WET - _SOIL_DRY)
                colour = np.clip(colour + _SUN_TINT * (tile.sun / 100.0), 0, 255)
            pygame.draw.rect(self.screen, colour.astype(int).tolist(), rect)

            if tile.crop is None or tile.growth_stage is None:
                continue
            cx = tile.col * cs + cs // 2
            cy = tile.row * cs + cs // 2
            radius = max(2, (cs // 8) * (int(tile.growth_stage) + 1))
            pygame.draw.circle(self.screen, _CROP_COLOURS[tile.crop], (cx, cy), radius)
            if tile.growth_stage is GrowthStage.MATURE:
                pygame.draw.circle(self.screen, _TEXT, (cx, cy), radius, 1)

    def _draw_grid_lines(self) -> None:
        cs = self.cell_size
        grid = self.session.grid
        w, h = grid.cols * cs, grid.rows * cs
        for x in range(0, w + 1, cs):
            pygame.draw.line(self.screen, _GRID_LINE, (x, 0), (x, h))
        for y in range(0, h + 1, cs):
            pygame.draw.line(self.screen, _GRID_LINE, (0, y), (w, y))

    def _draw_avatar(self) -> None:
        size = self.cell_size - 4
        x, y = (self._avatar - size / 2).astype(int).tolist()
        pygame.draw.rect(self.screen, _AVATAR, (x, y, size, size), 2)

    def _draw_info_panel(self) -> None:
        """Draw status, scenario, victory progress and controls."""
        session = self.session
        panel_x = session.grid.cols * self.cell_size + 10
        y = 10

        condition = session.current_condition
        label_key = _CONDITION_LABELS.get(condition.label) if condition else None
        mode = MessageKey.MOVE_CONTINUOUS if session.continuous else MessageKey.MOVE_GRID
        lines: list[tuple[str, tuple[int, int, int]]] = [
            (self._t(MessageKey.TURN, session.turn), _TEXT),
            (self._t(mode), _TEXT),
            ("", _TEXT),
            (self._t(MessageKey.HEADER_SCENARIO), _TEXT),
            (session.scenario.name, _TEXT),
        ]
        if label_key is not None:
            lines.append((self._t(label_key), _TEXT))

        lines += [("", _TEXT), (self._t(MessageKey.VICTORY_REQUIREMENTS), _TEXT)]
        progress = victory_progress(session.grid, session.scenario.victory_conditions)
        for cond, count in progress:
            name = self._t(_CROP_NAMES[cond.crop])
            text = self._t(
                MessageKey.VICTORY_PROGRESS,
                name,
                count,
                cond.required_count,
            )
            lines.append((text, _TEXT))

        lines += [("", _TEXT), (self._t(MessageKey.HEADER_GROWTH), _TEXT)]
        for crop, rule in session.growth.rules.items():
            requirements = ", ".join(requirement_lines(rule, self.locale))
            lines.append((f"{self._t(_CROP_NAMES[crop])}: {requirements}", _TEXT))

        lines += [
            ("", _TEXT),
            (self._t(MessageKey.WARNING_TITLE), _WARN),
            (self._t(MessageKey.WARNING_OVERCROWDING), _WARN),
            ("", _TEXT),
            (self._t(MessageKey.HEADER_CONTROLS), _TEXT),
            (self._t(MessageKey.PLANTING_TITLE), _TEXT),
            (f"1: {self._t(MessageKey.PLANT_GARLIC)}", _TEXT),
            (f"2: {self._t(MessageKey.PLANT_CUCUMBER)}", _TEXT),
            (f"3: {self._t(MessageKey.PLANT_TOMATO)}", _TEXT),
            (self._t(MessageKey.MOVEMENT_TITLE), _TEXT),
            (f"Z: {self._t(MessageKey.UNDO)}", _TEXT),
            (f"Y: {self._t(MessageKey.REDO)}", _TEXT),
            (f"C: {self._t(MessageKey.MOVE_CONTINUOUS)}", _TEXT),
            (self._t(MessageKey.SAVE_LOAD_TITLE), _TEXT),
            (f"TAB: {self._t(MessageKey.SLOT, self.slot)}", _TEXT),
            (f"S: {self._t(MessageKey.SAVE)}", _TEXT),
            (f"L: {self._t(MessageKey.LOAD)}", _TEXT),
            (f"N: {self._t(MessageKey.NEW_GAME)}", _TEXT),
        ]
        if self._notice:
            lines += [("", _TEXT), (self._notice, _TEXT)]

        for line, colour in lines:
            surf = self.font.render(line, True, colour)
            self.screen.blit(surf, (panel_x, y))
            y += 18

    def _draw_victory(self) -> None:
        w = self.session.grid.cols * self.cell_size
        h = self.session.grid.rows * self.cell_size
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        self.screen.blit(overlay, (0, 0))
        y = h // 2 - 40
        for key, font in (
            (MessageKey.VICTORY_TITLE, self.big_font),
            (MessageKey.VICTORY_MESSAGE, self.font),
            (MessageKey.VICTORY_SUB, self.font),
        ):
            surf = font.render(self._t(key), True, (255, 255, 255))
            self.screen.blit(surf, ((w - surf.get_width()) // 2, y))
            y += surf.get_height() + 8
