"""UnitRegistry - occupancy storage behind the ``unit_at`` capability.

The engine never owns units; it only asks a ``UnitLookup`` who stands on a
cell.  ``UnitRegistry`` is the stock implementation used by the game
session and the tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from skirmish.units.unit import MAX_HEALTH, Unit

UnitLookup = Callable[[int, int], "Unit | None"]


@dataclass
class UnitRegistry:
    """Units currently in play on a ``width`` x ``height`` board.

    A moving unit may briefly share a cell with a friendly unit it is
    walking over; ``unit_at`` then reports the one placed first.

    Attributes:
        width: Board columns, used to reject off-board placement.
        height: Board rows.
        units: Units in play, in placement order.
    """

    width: int
    height: int
    units: list[Unit] = field(default_factory=list)
    _next_id: int = field(default=1, init=False, repr=False)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def __contains__(self, unit: object) -> bool:
        return any(u is unit for u in self.units)

    def spawn(self, player: int, x: int, y: int, health: int | None = None) -> Unit:
        """Create a unit with the next free id and place it.

        Args:
            player: Owning player.
            x: Column to place at.
            y: Row to place at.
            health: Starting health; defaults to full health.

        Returns:
            The placed unit.
        """
        unit = Unit(unit_id=self._next_id, player=player, x=x, y=y)
        if health is not None:
            unit.health = health
        self.add(unit)
        return unit

    def add(self, unit: Unit) -> None:
        """Place an existing unit on its current cell.

        Raises:
            ValueError: If the unit is already destroyed or over full health,
                or its cell is off the board or already occupied.
        """
        if not 0 < unit.health <= MAX_HEALTH:
            msg = f"unit {unit.unit_id} placed with health {unit.health}, expected 1-{MAX_HEALTH}"
            raise ValueError(msg)
        if not (0 <= unit.x < self.width and 0 <= unit.y < self.height):
            msg = f"unit {unit.unit_id} placed off the board at {unit.position}"
            raise ValueError(msg)
        if self.unit_at(unit.x, unit.y) is not None:
            msg = f"cell {unit.position} is already occupied"
            raise ValueError(msg)
        self.units.append(unit)
        self._next_id = max(self._next_id, unit.unit_id + 1)

    def remove(self, unit: Unit) -> None:
        """Take a unit out of play.

        Raises:
            ValueError: If the unit is not in the registry.
        """
        for i, u in enumerate(self.units):
            if u is unit:
                del self.units[i]
                return
        msg = f"unit {unit.unit_id} is not in play"
        raise ValueError(msg)

    def unit_at(self, x: int, y: int) -> Unit | None:
        """Return the unit on ``(x, y)``, or None if the cell is empty."""
        for unit in self.units:
            if unit.x == x and unit.y == y:
                return unit
        return None

    def move(self, unit: Unit, x: int, y: int) -> None:
        """Set a unit's position.  No legality checks are made here."""
        unit.x = x
        unit.y = y

    def players(self) -> set[int]:
        """Return the players that still have units in play."""
        return {u.player for u in self.units}
