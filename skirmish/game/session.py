"""GameSession - wires a level, its units and the controller together.

Owns the top-level game state: the terrain grid, the unit registry, the
seeded RNG and the selection controller.  The presentation layer talks
only to the session: it forwards cursor activations, drives movement
ticks, and reads back highlights and recent events.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator

from skirmish.engine.controller import Controller, SelectionState
from skirmish.world.terrain import terrain_name

if TYPE_CHECKING:
    from skirmish.game.config import GameConfig
    from skirmish.units.registry import UnitRegistry
    from skirmish.units.unit import HealthChange, Unit
    from skirmish.world.grid import Coord, Grid
    from skirmish.world.level import Level

logger = logging.getLogger(__name__)

_EVENT_HISTORY = 8


@dataclass
class GameSession:
    """One level being played.

    Attributes:
        config: Loaded game configuration.
        level: The level being played.
        grid: Terrain of the level.
        units: Units in play.
        rng: Seeded random generator for combat.
        controller: Selection state machine.
        events: Most recent human-readable event lines, oldest first.
    """

    config: GameConfig
    level: Level
    grid: Grid = field(init=False)
    units: UnitRegistry = field(init=False)
    rng: Generator = field(init=False)
    controller: Controller = field(init=False)
    events: deque[str] = field(init=False, default_factory=lambda: deque(maxlen=_EVENT_HISTORY))

    def __post_init__(self) -> None:
        """Spawn units, seed the RNG and hook up notifications."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = self.level.grid
        self.units = self.level.spawn_units()
        self.controller = Controller(
            grid=self.grid,
            units=self.units,
            rng=self.rng,
            move_range=self.config.move_range,
            attack_range=self.config.attack_range,
            active_player=self.config.active_player,
        )
        self.controller.move_listeners.append(self._on_move)
        self.controller.health_listeners.append(self._on_health_change)
        logger.info(
            "Session started (seed=%d, %d units, players %s)",
            self.config.seed,
            len(self.units),
            sorted(self.units.players()),
        )

    @property
    def state(self) -> SelectionState:
        return self.controller.state

    @property
    def highlighted(self) -> list[Coord]:
        """Cells the presentation should highlight for the current state."""
        return sorted(self.controller.area.cells)

    def activate(self, x: int, y: int) -> bool:
        """Forward a cursor activation to the controller."""
        return self.controller.activate(x, y)

    def tick(self) -> Coord | None:
        """Advance an in-flight move by one step."""
        return self.controller.tick()

    def describe(self, x: int, y: int) -> tuple[str, Unit | None]:
        """Return the terrain name and the unit to show for a hovered cell.

        While a unit is selected it stays on display regardless of the
        cursor.
        """
        unit = self.controller.selected or self.units.unit_at(x, y)
        return terrain_name(self.grid.terrain_at(x, y)), unit

    def winner(self) -> int | None:
        """Return the only player left with units, if play has come to that."""
        players = self.units.players()
        if len(players) == 1:
            return next(iter(players))
        return None

    def _on_move(self, unit: Unit, old: Coord, new: Coord) -> None:
        logger.debug("Unit %d stepped %s -> %s", unit.unit_id, old, new)

    def _on_health_change(self, change: HealthChange) -> None:
        unit = change.unit
        if change.destroyed:
            line = f"P{unit.player} unit {unit.unit_id} destroyed"
        else:
            line = (
                f"P{unit.player} unit {unit.unit_id}: "
                f"{change.old_health} -> {change.new_health}"
            )
        self.events.append(line)
        logger.info(line)
