"""Reachability - which cells a unit can move to or attack.

Both queries run the same cost-weighted flood fill.  The frontier is an
unordered work list rather than a priority queue: a cell is re-recorded
and re-expanded whenever a strictly cheaper route to it turns up, so the
final costs equal Dijkstra's.  When two routes tie, whichever relaxed
first keeps its predecessor, so only the cost of a reconstructed path is
guaranteed minimal, not the path itself.

Movement mode charges terrain move costs and treats enemy units as walls
(their cells are recorded as *contested* but never expanded).  Friendly
units can be walked over but not landed on.  Attack mode charges 1 per
step regardless of terrain and keeps only enemy-occupied cells.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skirmish.world.terrain import TerrainType, move_cost

if TYPE_CHECKING:
    from skirmish.units.registry import UnitLookup
    from skirmish.units.unit import Unit
    from skirmish.world.grid import Coord, Grid

MOVE_RANGE = 4
ATTACK_RANGE = 1


@dataclass(eq=False)
class ReachableCell:
    """A cell proven reachable within the cost budget.

    Attributes:
        x: Column.
        y: Row.
        cost: Cheapest accumulated cost found from the origin.
        unit: Unit standing on the cell when the query ran, if any.
        previous: Cell this one was reached from; None for the origin.
    """

    x: int
    y: int
    cost: int
    unit: Unit | None = None
    previous: ReachableCell | None = field(default=None, repr=False)

    @property
    def key(self) -> Coord:
        return self.x, self.y


@dataclass
class ReachableSet:
    """Result of one reachability query.

    Attributes:
        origin: Cell the query started from, or None if it was off the grid.
        cells: Legal destinations (movement) or targets (attack), by ``(x, y)``.
        contested: Enemy-occupied cells reached during a movement query.
    """

    origin: Coord | None = None
    cells: dict[Coord, ReachableCell] = field(default_factory=dict)
    contested: dict[Coord, ReachableCell] = field(default_factory=dict)

    def get(self, x: int, y: int) -> ReachableCell | None:
        """Return the recorded cell at ``(x, y)``, or None if not reachable."""
        return self.cells.get((x, y))

    def __contains__(self, coord: object) -> bool:
        return coord in self.cells

    def __iter__(self) -> Iterator[ReachableCell]:
        return iter(self.cells.values())

    def __len__(self) -> int:
        return len(self.cells)

    def clear(self) -> None:
        """Discard the result once the activation that produced it ends."""
        self.cells.clear()
        self.contested.clear()


def flood_fill(
    grid: Grid,
    x: int,
    y: int,
    *,
    max_range: int,
    step_cost: Callable[[TerrainType | None], float],
    unit_at: UnitLookup,
    blocks: Callable[[Unit], bool] | None = None,
) -> dict[Coord, ReachableCell]:
    """Record every cell reachable from ``(x, y)`` within ``max_range``.

    Args:
        grid: Terrain to traverse.
        x: Origin column.
        y: Origin row.
        max_range: Largest accumulated cost a recorded cell may have.
        step_cost: Cost of entering a cell of the given terrain.
        unit_at: Occupancy lookup, called at most once per recorded cell.
        blocks: If given, cells whose occupant satisfies it are recorded
            but not expanded.

    Returns:
        Every recorded cell keyed by ``(x, y)``, origin included at cost 0.
        Empty if the origin is off the grid.
    """
    if not grid.in_bounds(x, y) or max_range < 0:
        return {}

    origin = ReachableCell(x, y, 0, unit_at(x, y))
    visited: dict[Coord, ReachableCell] = {origin.key: origin}
    work = [origin]

    while work:
        current = work.pop()
        if blocks is not None and current.unit is not None and blocks(current.unit):
            continue

        for nx, ny in grid.neighbours(current.x, current.y):
            cost = current.cost + step_cost(grid.terrain_at(nx, ny))
            if cost > max_range:
                continue
            existing = visited.get((nx, ny))
            if existing is None:
                cell = ReachableCell(nx, ny, int(cost), unit_at(nx, ny), current)
                visited[cell.key] = cell
                work.append(cell)
            elif cost < existing.cost:
                existing.cost = int(cost)
                existing.previous = current
                work.append(existing)

    return visited


def movement_area(
    grid: Grid,
    unit: Unit,
    unit_at: UnitLookup,
    max_range: int = MOVE_RANGE,
) -> ReachableSet:
    """Compute where ``unit`` may move this activation.

    Args:
        grid: Terrain to traverse.
        unit: The moving unit; its own cell is always a destination.
        unit_at: Occupancy lookup.
        max_range: Movement points available.

    Returns:
        Destinations in ``cells``; enemy-occupied cells in ``contested``.
    """
    visited = flood_fill(
        grid,
        unit.x,
        unit.y,
        max_range=max_range,
        step_cost=move_cost,
        unit_at=unit_at,
        blocks=unit.is_enemy_of,
    )
    result = ReachableSet(origin=unit.position if visited else None)
    for key, cell in visited.items():
        if cell.unit is None or cell.unit is unit:
            result.cells[key] = cell
        elif cell.unit.is_enemy_of(unit):
            result.contested[key] = cell
        # Friendly cells were only passed through.
    return result


def attack_area(
    grid: Grid,
    unit: Unit,
    unit_at: UnitLookup,
    max_range: int = ATTACK_RANGE,
) -> ReachableSet:
    """Compute which cells ``unit`` may attack from where it stands.

    Terrain is ignored and nothing blocks; only cells holding an enemy
    survive the filter.
    """
    visited = flood_fill(
        grid,
        unit.x,
        unit.y,
        max_range=max_range,
        step_cost=lambda _terrain: 1,
        unit_at=unit_at,
    )
    result = ReachableSet(origin=unit.position if visited else None)
    for key, cell in visited.items():
        if cell.unit is not None and cell.unit.is_enemy_of(unit):
            result.cells[key] = cell
    return result


def reconstruct_path(cell: ReachableCell) -> list[Coord]:
    """Walk predecessor links from ``cell`` back toward the origin.

    Returns:
        Coordinates from ``cell`` (first) to the step just after the
        origin (last); the origin itself is excluded, so the length is the
        number of predecessor links.  Reverse it to walk origin to target.
    """
    path: list[Coord] = []
    node = cell
    while node.previous is not None:
        path.append(node.key)
        node = node.previous
    return path
