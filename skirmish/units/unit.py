"""Unit - a single combatant on the grid.

Units are plain records.  Health is changed only through ``take_damage``
(called by the combat resolver) and position only through the registry's
``move`` (called by the controller while walking a path).
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_HEALTH = 100


@dataclass(frozen=True)
class HealthChange:
    """Notification emitted whenever a unit takes damage.

    Attributes:
        unit: The unit that was hit.
        old_health: Health before the hit.
        new_health: Health after the hit (never below 0).
        destroyed: True if the hit removed the unit from play.
    """

    unit: Unit
    old_health: int
    new_health: int
    destroyed: bool


@dataclass(eq=False)
class Unit:
    """A combatant owned by one player.

    Attributes:
        unit_id: Identifier, unique within a level.
        player: Owning player / faction.  Units with different players are
            enemies.
        x: Current column.
        y: Current row.
        health: Remaining health, 0-100.  Also the unit's attack strength.
    """

    unit_id: int
    player: int
    x: int
    y: int
    health: int = MAX_HEALTH

    @property
    def position(self) -> tuple[int, int]:
        """Current ``(x, y)`` cell."""
        return self.x, self.y

    @property
    def is_alive(self) -> bool:
        """Return True while the unit has health left."""
        return self.health > 0

    def is_enemy_of(self, other: Unit) -> bool:
        """Return True if ``other`` belongs to a different player."""
        return self.player != other.player

    def take_damage(self, damage: int) -> HealthChange:
        """Subtract ``damage`` from health, clamping at 0.

        Args:
            damage: Non-negative damage dealt by an attack.

        Returns:
            The resulting health change, flagged ``destroyed`` if health
            reached 0.
        """
        old = self.health
        self.health = max(0, round(self.health - damage))
        return HealthChange(
            unit=self,
            old_health=old,
            new_health=self.health,
            destroyed=not self.is_alive,
        )
