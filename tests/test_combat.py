"""Tests for skirmish.engine.combat - damage formula and engagements."""

from collections.abc import Callable

import pytest
from numpy.random import Generator

from skirmish.engine.combat import (
    RandomSource,
    calculate_damage,
    engage,
    resolve_attack,
)
from skirmish.units.registry import UnitRegistry
from skirmish.world.level import parse_level_string
from skirmish.world.terrain import INVALID, TerrainType


_ALL_TERRAIN = [
    TerrainType.PLAIN,
    TerrainType.ROAD,
    TerrainType.FLOOR,
    TerrainType.FOREST,
    TerrainType.MOUNTAIN,
    TerrainType.WALL,
    TerrainType.RIVER,
    TerrainType.BEACH,
    TerrainType.SEA,
    TerrainType.DEEP_SEA,
    TerrainType.REEF,
    TerrainType.BRIDGE,
    INVALID,
]


class TestCalculateDamage:
    """Tests for the damage formula."""

    def test_no_variance(self, midpoint_rng: RandomSource) -> None:
        assert calculate_damage(100, TerrainType.PLAIN, midpoint_rng) == 45
        assert calculate_damage(100, TerrainType.ROAD, midpoint_rng) == 50
        assert calculate_damage(100, TerrainType.MOUNTAIN, midpoint_rng) == 30
        assert calculate_damage(100, TerrainType.RIVER, midpoint_rng) == 60

    def test_unmapped_terrain(self, midpoint_rng: RandomSource) -> None:
        assert calculate_damage(100, INVALID, midpoint_rng) == 50

    def test_variance_extremes_round_half_up(
        self,
        fixed_random: Callable[[float], RandomSource],
    ) -> None:
        """45 +/- 50% spans 22.5 to 67.5; the low end rounds up to 23."""
        assert calculate_damage(100, TerrainType.PLAIN, fixed_random(0.0)) == 23
        assert calculate_damage(100, TerrainType.PLAIN, fixed_random(0.999999)) == 67

    def test_plain_range(self, rng: Generator) -> None:
        for _ in range(500):
            damage = calculate_damage(100, TerrainType.PLAIN, rng)
            assert isinstance(damage, int)
            assert 23 <= damage <= 68

    def test_weakened_attacker_hits_softer(self, midpoint_rng: RandomSource) -> None:
        assert calculate_damage(40, TerrainType.ROAD, midpoint_rng) == 20

    @pytest.mark.parametrize("roll", [0.0, 0.25, 0.5, 0.75, 0.999])
    def test_non_negative(
        self,
        roll: float,
        fixed_random: Callable[[float], RandomSource],
    ) -> None:
        for terrain in _ALL_TERRAIN:
            for health in range(0, 101, 5):
                assert calculate_damage(health, terrain, fixed_random(roll)) >= 0

    @pytest.mark.parametrize("roll", [0.0, 0.3, 0.5, 0.9])
    def test_monotonic_in_health(
        self,
        roll: float,
        fixed_random: Callable[[float], RandomSource],
    ) -> None:
        for terrain in _ALL_TERRAIN:
            damages = [calculate_damage(h, terrain, fixed_random(roll)) for h in range(101)]
            assert damages == sorted(damages)

    def test_resolve_attack_uses_attacker_health(self, midpoint_rng: RandomSource) -> None:
        units = UnitRegistry(width=2, height=1)
        attacker = units.spawn(1, 0, 0, health=60)
        defender = units.spawn(2, 1, 0)
        assert resolve_attack(attacker, defender, TerrainType.ROAD, midpoint_rng) == 30


class TestEngage:
    """Tests for first strike plus retaliation."""

    def test_kill_prevents_retaliation(self, midpoint_rng: RandomSource) -> None:
        grid = parse_level_string(",,")
        units = UnitRegistry(width=2, height=1)
        attacker = units.spawn(1, 0, 0, health=30)
        defender = units.spawn(2, 1, 0, health=10)

        changes = engage(attacker, defender, grid, units, midpoint_rng)
        assert len(changes) == 1
        assert changes[0].unit is defender
        assert changes[0].old_health == 10
        assert changes[0].new_health == 0
        assert changes[0].destroyed
        assert attacker.health == 30
        assert defender not in units
        assert units.unit_at(1, 0) is None

    def test_survivor_retaliates_once(self, midpoint_rng: RandomSource) -> None:
        grid = parse_level_string(",,")
        units = UnitRegistry(width=2, height=1)
        attacker = units.spawn(1, 0, 0)
        defender = units.spawn(2, 1, 0)

        changes = engage(attacker, defender, grid, units, midpoint_rng)
        assert [c.unit for c in changes] == [defender, attacker]
        assert defender.health == 50
        # Retaliation is computed from the defender's reduced health
        assert attacker.health == 75

    def test_retaliation_uses_attacker_terrain(self, midpoint_rng: RandomSource) -> None:
        grid = parse_level_string("^,")
        units = UnitRegistry(width=2, height=1)
        attacker = units.spawn(1, 0, 0)
        defender = units.spawn(2, 1, 0)

        engage(attacker, defender, grid, units, midpoint_rng)
        assert defender.health == 50
        assert attacker.health == 85

    def test_retaliation_can_destroy_attacker(self, midpoint_rng: RandomSource) -> None:
        grid = parse_level_string(",,")
        units = UnitRegistry(width=2, height=1)
        attacker = units.spawn(1, 0, 0, health=10)
        defender = units.spawn(2, 1, 0)

        changes = engage(attacker, defender, grid, units, midpoint_rng)
        assert defender.health == 95
        assert changes[1].destroyed
        assert attacker not in units
        assert defender in units
