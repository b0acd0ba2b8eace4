"""Grid - the immutable terrain map for one level.

Terrain codes live in a read-only NumPy array indexed ``[y, x]``.  Queries
never fail on bad coordinates: out-of-bounds lookups return the
``INVALID`` sentinel and neighbour iteration silently skips the edge.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from skirmish.world.terrain import INVALID, TerrainType

Coord = tuple[int, int]

_ORTHOGONAL: tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True, eq=False)
class Grid:
    """A rectangular terrain map.

    Attributes:
        terrain: 2D array of ``TerrainType`` values, shape ``(height, width)``.
        width: Number of columns.
        height: Number of rows.
    """

    terrain: NDArray[np.int16] = field(repr=False)
    width: int = field(init=False)
    height: int = field(init=False)

    def __post_init__(self) -> None:
        """Freeze the terrain array and derive the dimensions."""
        terrain = np.array(self.terrain, dtype=np.int16)
        if terrain.ndim != 2 or terrain.shape[0] == 0 or terrain.shape[1] == 0:
            msg = f"grid must be a non-empty 2D array, got shape {terrain.shape}"
            raise ValueError(msg)
        terrain.flags.writeable = False
        object.__setattr__(self, "terrain", terrain)
        object.__setattr__(self, "height", int(terrain.shape[0]))
        object.__setattr__(self, "width", int(terrain.shape[1]))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[TerrainType]]) -> Grid:
        """Build a grid from row-major terrain values.

        Args:
            rows: Equal-length rows of terrain, top row first.
        """
        return cls(terrain=np.array([[int(t) for t in row] for row in rows]))

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies on the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_at(self, x: int, y: int) -> TerrainType | None:
        """Return the terrain at ``(x, y)``, or ``INVALID`` off the grid."""
        if not self.in_bounds(x, y):
            return INVALID
        return TerrainType(int(self.terrain[y, x]))

    def neighbours(self, x: int, y: int) -> Iterator[Coord]:
        """Yield the in-bounds orthogonal neighbours of ``(x, y)``."""
        for dx, dy in _ORTHOGONAL:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny
