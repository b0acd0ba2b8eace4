"""Tests for skirmish.units - units and the registry."""

import pytest

from skirmish.units.registry import UnitRegistry
from skirmish.units.unit import MAX_HEALTH, Unit


class TestUnit:
    """Tests for the Unit record."""

    def test_defaults(self) -> None:
        unit = Unit(unit_id=1, player=1, x=2, y=3)
        assert unit.health == MAX_HEALTH
        assert unit.position == (2, 3)
        assert unit.is_alive

    def test_take_damage(self) -> None:
        unit = Unit(unit_id=1, player=1, x=0, y=0)
        change = unit.take_damage(30)
        assert unit.health == 70
        assert change.old_health == 100
        assert change.new_health == 70
        assert change.destroyed is False
        assert change.unit is unit

    def test_overkill_clamps_to_zero(self) -> None:
        unit = Unit(unit_id=1, player=1, x=0, y=0, health=10)
        change = unit.take_damage(15)
        assert unit.health == 0
        assert change.destroyed
        assert not unit.is_alive

    def test_exact_kill(self) -> None:
        unit = Unit(unit_id=1, player=1, x=0, y=0, health=15)
        assert unit.take_damage(15).destroyed

    def test_enemies(self) -> None:
        a = Unit(unit_id=1, player=1, x=0, y=0)
        b = Unit(unit_id=2, player=2, x=1, y=0)
        c = Unit(unit_id=3, player=1, x=2, y=0)
        assert a.is_enemy_of(b)
        assert not a.is_enemy_of(c)

    def test_identity_equality(self) -> None:
        """Two units with identical fields are still different units."""
        assert Unit(unit_id=1, player=1, x=0, y=0) != Unit(unit_id=1, player=1, x=0, y=0)


class TestUnitRegistry:
    """Tests for occupancy storage."""

    def test_spawn_assigns_ids(self) -> None:
        units = UnitRegistry(width=4, height=4)
        a = units.spawn(1, 0, 0)
        b = units.spawn(2, 1, 0, health=50)
        assert (a.unit_id, b.unit_id) == (1, 2)
        assert b.health == 50
        assert len(units) == 2

    def test_unit_at(self) -> None:
        units = UnitRegistry(width=4, height=4)
        unit = units.spawn(1, 2, 3)
        assert units.unit_at(2, 3) is unit
        assert units.unit_at(3, 2) is None
        assert units.unit_at(-1, 0) is None

    def test_add_occupied_cell(self) -> None:
        units = UnitRegistry(width=4, height=4)
        units.spawn(1, 1, 1)
        with pytest.raises(ValueError, match="occupied"):
            units.spawn(2, 1, 1)

    def test_add_off_board(self) -> None:
        units = UnitRegistry(width=4, height=4)
        with pytest.raises(ValueError, match="off the board"):
            units.add(Unit(unit_id=7, player=1, x=4, y=0))

    @pytest.mark.parametrize("health", [0, -10, MAX_HEALTH + 1])
    def test_add_rejects_out_of_range_health(self, health: int) -> None:
        """A destroyed unit never enters play, so it can never be targeted."""
        units = UnitRegistry(width=4, height=4)
        with pytest.raises(ValueError, match="health"):
            units.spawn(2, 1, 0, health=health)
        assert units.unit_at(1, 0) is None
        assert len(units) == 0

    def test_add_keeps_ids_unique(self) -> None:
        units = UnitRegistry(width=4, height=4)
        units.add(Unit(unit_id=7, player=1, x=0, y=0))
        assert units.spawn(1, 1, 0).unit_id == 8

    def test_remove(self) -> None:
        units = UnitRegistry(width=4, height=4)
        unit = units.spawn(1, 1, 1)
        units.remove(unit)
        assert unit not in units
        assert units.unit_at(1, 1) is None
        with pytest.raises(ValueError):
            units.remove(unit)

    def test_move(self) -> None:
        units = UnitRegistry(width=4, height=4)
        unit = units.spawn(1, 0, 0)
        units.move(unit, 3, 2)
        assert unit.position == (3, 2)
        assert units.unit_at(3, 2) is unit
        assert units.unit_at(0, 0) is None

    def test_players(self) -> None:
        units = UnitRegistry(width=4, height=4)
        units.spawn(1, 0, 0)
        units.spawn(1, 1, 0)
        units.spawn(3, 2, 0)
        assert units.players() == {1, 3}
