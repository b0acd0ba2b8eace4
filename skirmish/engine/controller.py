"""Controller - the selection state machine driven by cursor activations.

One activation selects a unit, a second picks its destination, and, if an
enemy is then adjacent, a third picks the target:

- ``IDLE`` + unit under cursor -> movement area -> ``UNIT_SELECTED_FOR_MOVE``
- ``UNIT_SELECTED_FOR_MOVE`` + destination -> walk the path, then check for
  targets; an unreachable cell means "stay put" and checks immediately
- ``UNIT_SELECTED_FOR_ATTACK`` + target -> combat; anything else cancels.
  Either way back to ``IDLE``.

Movement is a generator of steps the caller advances with ``tick()`` at
whatever pace it likes.  Activations that arrive while a unit is still
walking are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from skirmish.engine.combat import engage
from skirmish.engine.reachability import (
    ATTACK_RANGE,
    MOVE_RANGE,
    ReachableSet,
    attack_area,
    movement_area,
    reconstruct_path,
)

if TYPE_CHECKING:
    from skirmish.engine.combat import RandomSource
    from skirmish.units.registry import UnitRegistry
    from skirmish.units.unit import HealthChange, Unit
    from skirmish.world.grid import Coord, Grid

logger = logging.getLogger(__name__)

MoveListener = Callable[["Unit", "Coord", "Coord"], None]
HealthListener = Callable[["HealthChange"], None]


class SelectionState(Enum):
    """Where the controller is in the move-then-attack sequence."""

    IDLE = auto()
    UNIT_SELECTED_FOR_MOVE = auto()
    UNIT_SELECTED_FOR_ATTACK = auto()


@dataclass
class Controller:
    """Turns activations into movement and combat.

    Attributes:
        grid: Terrain of the current level.
        units: Units in play; also the ``unit_at`` provider.
        rng: Variance source for combat.
        move_range: Movement points per activation.
        attack_range: Attack reach in steps.
        active_player: If set, only this player's units can be selected.
        state: Current selection state.
        selected: Unit being moved or attacking, if any.
        area: Highlighted destinations or targets for the current state.
        move_listeners: Called with ``(unit, old, new)`` after each step.
        health_listeners: Called with each ``HealthChange`` from combat.
    """

    grid: Grid
    units: UnitRegistry
    rng: RandomSource
    move_range: int = MOVE_RANGE
    attack_range: int = ATTACK_RANGE
    active_player: int | None = None
    state: SelectionState = SelectionState.IDLE
    selected: Unit | None = None
    area: ReachableSet = field(default_factory=ReachableSet)
    move_listeners: list[MoveListener] = field(default_factory=list)
    health_listeners: list[HealthListener] = field(default_factory=list)
    _steps: Generator[Coord, None, None] | None = field(default=None, init=False, repr=False)
    _destination: Coord | None = field(default=None, init=False, repr=False)

    @property
    def is_moving(self) -> bool:
        """Return True while a movement sequence is in flight."""
        return self._steps is not None

    def activate(self, x: int, y: int) -> bool:
        """Handle a cursor activation on ``(x, y)``.

        Returns:
            True if the activation was acted on, False if it was a no-op
            (empty cell while idle, or a move still in flight).
        """
        if self.is_moving:
            logger.debug("Ignoring activation at (%d, %d) during a move", x, y)
            return False

        match self.state:
            case SelectionState.IDLE:
                return self._select(x, y)
            case SelectionState.UNIT_SELECTED_FOR_MOVE:
                self._choose_destination(x, y)
            case SelectionState.UNIT_SELECTED_FOR_ATTACK:
                self._choose_target(x, y)
        return True

    def tick(self) -> Coord | None:
        """Advance an in-flight move by one step.

        Returns:
            The unit's new position, or None if no move was in flight.
            After the last step the controller checks for attack targets.
        """
        if self._steps is None:
            return None
        position = next(self._steps, None)
        if position is None or position == self._destination:
            self._end_move()
        return position

    def finish_move(self) -> None:
        """Run any in-flight move to completion."""
        while self.is_moving:
            self.tick()

    def cancel_move(self) -> None:
        """Stop an in-flight move where the unit currently stands.

        The unit then checks for targets from that cell, exactly as if it
        had chosen to stop there.  A unit caught passing over a friendly
        unit keeps walking until it stands on a cell of its own.
        """
        if self._steps is None:
            return
        unit = self.selected
        if unit is not None:
            while self._shares_cell(unit):
                if next(self._steps, None) is None:
                    break
            logger.debug("Unit %d move cancelled at %s", unit.unit_id, unit.position)
        self._end_move()

    def _shares_cell(self, unit: Unit) -> bool:
        return any(u is not unit and u.position == unit.position for u in self.units)

    # -- Transitions --

    def _select(self, x: int, y: int) -> bool:
        unit = self.units.unit_at(x, y)
        if unit is None:
            return False
        if self.active_player is not None and unit.player != self.active_player:
            logger.debug("Unit %d does not belong to player %d", unit.unit_id, self.active_player)
            return False
        self.selected = unit
        self.area = movement_area(self.grid, unit, self.units.unit_at, self.move_range)
        self.state = SelectionState.UNIT_SELECTED_FOR_MOVE
        logger.debug("Selected unit %d, %d destinations", unit.unit_id, len(self.area))
        return True

    def _choose_destination(self, x: int, y: int) -> None:
        unit = self.selected
        if unit is None:
            self._reset()
            return
        destination = self.area.get(x, y)
        path = reconstruct_path(destination) if destination is not None else []
        self.area.clear()
        if not path:
            self._check_for_attack_targets(unit)
            return
        path.reverse()
        logger.debug("Unit %d moving %s -> %s", unit.unit_id, unit.position, (x, y))
        self._destination = path[-1]
        self._steps = self._walk(unit, path)

    def _walk(self, unit: Unit, path: list[Coord]) -> Generator[Coord, None, None]:
        for nx, ny in path:
            old = unit.position
            self.units.move(unit, nx, ny)
            for listener in self.move_listeners:
                listener(unit, old, (nx, ny))
            yield nx, ny

    def _end_move(self) -> None:
        if self._steps is not None:
            self._steps.close()
        self._steps = None
        self._destination = None
        if self.selected is None:
            self._reset()
            return
        self._check_for_attack_targets(self.selected)

    def _check_for_attack_targets(self, unit: Unit) -> None:
        self.area = attack_area(self.grid, unit, self.units.unit_at, self.attack_range)
        if self.area:
            self.state = SelectionState.UNIT_SELECTED_FOR_ATTACK
            return
        self._reset()

    def _choose_target(self, x: int, y: int) -> None:
        attacker = self.selected
        target = self.area.get(x, y)
        if attacker is not None and target is not None and target.unit is not None:
            for change in engage(attacker, target.unit, self.grid, self.units, self.rng):
                for listener in self.health_listeners:
                    listener(change)
        self._reset()

    def _reset(self) -> None:
        self.area.clear()
        self.selected = None
        self.state = SelectionState.IDLE
