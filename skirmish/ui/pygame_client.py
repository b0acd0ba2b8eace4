"""Pygame 2D client for Skirmish.

Draws the terrain, the current move/attack highlights, units with their
health badges and a cursor, and forwards key presses to the session.
Movement steps are paced here: the session advances one step every
``step_interval`` seconds of wall-clock time.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import pygame

if TYPE_CHECKING:
    from skirmish.game.session import GameSession

from skirmish.engine.controller import SelectionState
from skirmish.world.terrain import TERRAIN_COLOURS, TerrainType

# Colour palette
_BG = (30, 30, 34)
_GRID_LINE = (40, 40, 44)
_CURSOR = (255, 255, 255)
_TEXT = (200, 200, 200)
_BADGE_BG = (255, 255, 255)
_BADGE_TEXT = (20, 20, 20)

_PLAYER_COLOURS: dict[int, tuple[int, int, int]] = {
    1: (220, 40, 40),
    2: (40, 80, 230),
}

# Highlight fill/outline per state
_HIGHLIGHTS: dict[SelectionState, tuple[tuple[int, int, int], tuple[int, int, int]]] = {
    SelectionState.UNIT_SELECTED_FOR_MOVE: ((0, 255, 255), (0, 0, 255)),
    SelectionState.UNIT_SELECTED_FOR_ATTACK: ((255, 165, 0), (255, 0, 0)),
}


def health_badge(health: int) -> str | None:
    """Return the badge digit shown on a damaged unit, or None at full-ish health.

    Health is shown in tenths, never below 1 for a living unit; units at
    95 or above get no badge.
    """
    short = max(1, math.floor(health / 10 + 0.5))
    if short < 10:
        return str(short)
    return None


class PygameRenderer:
    """Renders a GameSession into a Pygame window and feeds it input.

    Attributes:
        session: The game session to play.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
        cursor: Cursor cell ``(x, y)``.
    """

    def __init__(self, session: GameSession, cell_size: int = 50) -> None:
        """Initialise the renderer.

        Args:
            session: The game session to render.
            cell_size: Pixel width/height per grid cell.
        """
        self.session = session
        self.cell_size = cell_size
        self.cursor = (0, 0)
        self._step_accumulator = 0.0

        w = session.grid.width * cell_size
        h = session.grid.height * cell_size
        self._panel_width = 240
        self._win_w = w + self._panel_width
        self._win_h = max(h, 320)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Skirmish")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.badge_font = pygame.font.SysFont("monospace", 12, bold=True)
        self.running = True
        self._terrain_surface = self._render_terrain()

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, advance movement, render.

        Args:
            fps: Target frames per second.
        """
        interval = self.session.config.step_interval
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if self.session.controller.is_moving:
                self._step_accumulator += dt
                while self._step_accumulator >= interval and self.session.controller.is_moving:
                    self._step_accumulator -= interval
                    self.session.tick()
            else:
                self._step_accumulator = 0.0
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.session.activate(*self.cursor)
                elif event.key == pygame.K_UP:
                    self._move_cursor(0, -1)
                elif event.key == pygame.K_DOWN:
                    self._move_cursor(0, 1)
                elif event.key == pygame.K_LEFT:
                    self._move_cursor(-1, 0)
                elif event.key == pygame.K_RIGHT:
                    self._move_cursor(1, 0)

    def _move_cursor(self, dx: int, dy: int) -> None:
        x, y = self.cursor
        grid = self.session.grid
        self.cursor = (
            min(max(x + dx, 0), grid.width - 1),
            min(max(y + dy, 0), grid.height - 1),
        )

    def _render_terrain(self) -> pygame.Surface:
        """Paint the static terrain once; the grid never changes."""
        grid = self.session.grid
        # Lookup table from terrain code to RGB, applied to the whole grid
        codes = np.unique(grid.terrain)
        rgb = np.zeros((grid.height, grid.width, 3), dtype=np.uint8)
        for code in codes:
            colour = TERRAIN_COLOURS.get(TerrainType(int(code)), _BG)
            rgb[grid.terrain == code] = colour

        small = pygame.surfarray.make_surface(rgb.transpose(1, 0, 2))
        surface = pygame.transform.scale(
            small,
            (grid.width * self.cell_size, grid.height * self.cell_size),
        )
        cs = self.cell_size
        for x in range(grid.width + 1):
            pygame.draw.line(surface, _GRID_LINE, (x * cs, 0), (x * cs, grid.height * cs))
        for y in range(grid.height + 1):
            pygame.draw.line(surface, _GRID_LINE, (0, y * cs), (grid.width * cs, y * cs))
        return surface

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self.screen.blit(self._terrain_surface, (0, 0))
        self._draw_highlights()
        self._draw_units()
        self._draw_cursor()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_highlights(self) -> None:
        """Draw reachable cells as a translucent overlay."""
        colours = _HIGHLIGHTS.get(self.session.state)
        cells = self.session.highlighted
        if colours is None or not cells:
            return
        fill, outline = colours
        cs = self.cell_size
        overlay = pygame.Surface(self._terrain_surface.get_size(), pygame.SRCALPHA)
        for x, y in cells:
            pygame.draw.rect(overlay, (*fill, 76), (x * cs, y * cs, cs, cs))
            pygame.draw.rect(overlay, (*outline, 76), (x * cs, y * cs, cs, cs), width=4)
        self.screen.blit(overlay, (0, 0))

    def _draw_units(self) -> None:
        """Draw each unit as a rounded square with an optional health badge."""
        cs = self.cell_size
        size = cs // 2
        for unit in self.session.units:
            colour = _PLAYER_COLOURS.get(unit.player, (200, 200, 200))
            left = unit.x * cs + cs // 4
            top = unit.y * cs + cs // 4
            pygame.draw.rect(self.screen, colour, (left, top, size, size), border_radius=8)

            badge = health_badge(unit.health)
            if badge is not None:
                text = self.badge_font.render(badge, True, _BADGE_TEXT)
                rect = text.get_rect(center=(left + size, top))
                pygame.draw.rect(self.screen, _BADGE_BG, rect.inflate(4, 2), border_radius=3)
                self.screen.blit(text, rect)

    def _draw_cursor(self) -> None:
        cs = self.cell_size
        x, y = self.cursor
        pygame.draw.rect(self.screen, _CURSOR, (x * cs, y * cs, cs, cs), width=4, border_radius=4)

    def _draw_info_panel(self) -> None:
        """Draw terrain, unit and event info on the right side of the window."""
        panel_x = self.session.grid.width * self.cell_size + 10
        y = 10

        terrain, unit = self.session.describe(*self.cursor)
        lines = [
            f"Terrain: {terrain}",
            "",
        ]
        if unit is not None:
            lines += [
                f"Player: {unit.player}",
                f"Health: {unit.health}%",
            ]
        lines += [
            "",
            f"State: {self.session.state.name.lower()}",
            "",
            "--- Events ---",
            *self.session.events,
        ]

        winner = self.session.winner()
        if winner is not None:
            lines += ["", f"Player {winner} wins"]

        lines += [
            "",
            "--- Controls ---",
            "Arrows: cursor",
            "SPACE: activate",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
