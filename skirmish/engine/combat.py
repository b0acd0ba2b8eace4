"""Combat - damage formula and attack resolution.

Damage scales with the attacker's *current* health, so a weakened unit
hits softer:

1. ``base = health / 2``
2. reduce (or increase) by the defender's terrain defense modifier
3. apply a uniform +/-50% variance
4. round half up to an integer

A defender that survives the first strike retaliates exactly once with
the same formula, using the terrain under the attacker.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Protocol

from skirmish.world.terrain import TerrainType, defense_modifier

if TYPE_CHECKING:
    from skirmish.units.registry import UnitRegistry
    from skirmish.units.unit import HealthChange, Unit
    from skirmish.world.grid import Grid

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in ``[0, 1)``.

    ``numpy.random.Generator`` satisfies this.
    """

    def random(self) -> float: ...


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_damage(
    attacker_health: int,
    defender_terrain: TerrainType | None,
    rng: RandomSource,
) -> int:
    """Compute the damage an attack deals.

    Args:
        attacker_health: Current health of the attacking unit.
        defender_terrain: Terrain under the defender.
        rng: Source of the variance roll.

    Returns:
        Damage as an integer; non-negative whenever the health is
        non-negative and the modifier lies in ``[-1, 1]``.
    """
    damage = attacker_health / 2
    damage -= damage * defense_modifier(defender_terrain)
    damage += damage * (float(rng.random()) - 0.5)
    return _round_half_up(damage)


def resolve_attack(
    attacker: Unit,
    defender: Unit,
    defender_terrain: TerrainType | None,
    rng: RandomSource,
) -> int:
    """Return the damage ``attacker`` deals to ``defender`` on its terrain."""
    damage = calculate_damage(attacker.health, defender_terrain, rng)
    logger.debug(
        "Unit %d (hp %d) hits unit %d on %s for %d",
        attacker.unit_id,
        attacker.health,
        defender.unit_id,
        defender_terrain,
        damage,
    )
    return damage


def _apply(unit: Unit, damage: int, units: UnitRegistry) -> HealthChange:
    change = unit.take_damage(damage)
    if change.destroyed:
        units.remove(unit)
        logger.info("Unit %d (player %d) destroyed", unit.unit_id, unit.player)
    return change


def engage(
    attacker: Unit,
    defender: Unit,
    grid: Grid,
    units: UnitRegistry,
    rng: RandomSource,
) -> list[HealthChange]:
    """Resolve one attack and the defender's single retaliation.

    Destroyed units are removed from ``units`` immediately so they can
    never be targeted again.

    Args:
        attacker: Unit striking first.
        defender: Unit being attacked.
        grid: Terrain, for both units' defense modifiers.
        units: Registry the destroyed units are removed from.
        rng: Source of the variance rolls.

    Returns:
        One health change for the first strike, plus one for the
        retaliation if the defender survived.
    """
    damage = resolve_attack(attacker, defender, grid.terrain_at(*defender.position), rng)
    changes = [_apply(defender, damage, units)]
    if changes[0].destroyed:
        return changes

    damage = resolve_attack(defender, attacker, grid.terrain_at(*attacker.position), rng)
    changes.append(_apply(attacker, damage, units))
    return changes
