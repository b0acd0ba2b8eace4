"""Terrain - cell classification and its movement/defense tables.

Every grid cell holds exactly one ``TerrainType``.  The tables here are
fixed at import time: how many movement points a ground unit spends to
enter a cell, how much incoming damage is adjusted for a defender
standing on it, and how level strings spell each type.
"""

from __future__ import annotations

import math
from enum import IntFlag
from typing import Final


class TerrainType(IntFlag):
    """Terrain categories, encoded as bit flags."""

    PLAIN = 0
    ROAD = 1 << 0
    FLOOR = 1 << 1
    FOREST = 1 << 2
    MOUNTAIN = 1 << 3
    WALL = 1 << 4
    RIVER = 1 << 5
    BEACH = 1 << 6
    SEA = 1 << 7
    DEEP_SEA = 1 << 8
    REEF = 1 << 9
    BRIDGE = 1 << 10


# Returned for coordinates outside the grid.
INVALID: Final = None

IMPASSABLE: Final = math.inf

_MOVE_COSTS: dict[TerrainType, int] = {
    TerrainType.PLAIN: 1,
    TerrainType.ROAD: 1,
    TerrainType.FLOOR: 1,
    TerrainType.BRIDGE: 1,
    TerrainType.FOREST: 2,
    TerrainType.RIVER: 2,
    TerrainType.BEACH: 2,
    TerrainType.MOUNTAIN: 3,
}

_DEFENSE_MODIFIERS: dict[TerrainType, float] = {
    TerrainType.PLAIN: 0.1,
    TerrainType.ROAD: 0.0,
    TerrainType.FLOOR: 0.0,
    TerrainType.FOREST: 0.3,
    TerrainType.MOUNTAIN: 0.4,
    TerrainType.WALL: 0.4,
    TerrainType.RIVER: -0.2,
    TerrainType.BEACH: -0.1,
    TerrainType.SEA: 0.1,
    TerrainType.DEEP_SEA: 0.0,
    TerrainType.REEF: 0.2,
    TerrainType.BRIDGE: 0.0,
}

CHAR_TO_TERRAIN: dict[str, TerrainType] = {
    ".": TerrainType.PLAIN,
    ",": TerrainType.ROAD,
    "_": TerrainType.FLOOR,
    "^": TerrainType.MOUNTAIN,
    "T": TerrainType.FOREST,
    "#": TerrainType.WALL,
    "~": TerrainType.RIVER,
    "/": TerrainType.BEACH,
    "u": TerrainType.SEA,
    "w": TerrainType.DEEP_SEA,
    "x": TerrainType.REEF,
    "=": TerrainType.BRIDGE,
}

TERRAIN_COLOURS: dict[TerrainType, tuple[int, int, int]] = {
    TerrainType.PLAIN: (126, 211, 33),
    TerrainType.ROAD: (230, 227, 161),
    TerrainType.FLOOR: (191, 198, 201),
    TerrainType.FOREST: (30, 125, 51),
    TerrainType.MOUNTAIN: (102, 91, 86),
    TerrainType.WALL: (125, 126, 128),
    TerrainType.RIVER: (119, 184, 237),
    TerrainType.BEACH: (252, 252, 204),
    TerrainType.SEA: (35, 167, 204),
    TerrainType.DEEP_SEA: (16, 79, 161),
    TerrainType.REEF: (84, 165, 168),
    TerrainType.BRIDGE: (181, 123, 72),
}


def move_cost(terrain: TerrainType | None) -> float:
    """Return the movement points needed to enter a cell of ``terrain``.

    Args:
        terrain: Terrain of the cell being entered, or ``INVALID``.

    Returns:
        A positive integer cost, or ``IMPASSABLE`` (infinity) for terrain
        ground units cannot enter.
    """
    if terrain is None:
        return IMPASSABLE
    return _MOVE_COSTS.get(terrain, IMPASSABLE)


def defense_modifier(terrain: TerrainType | None) -> float:
    """Return the fraction by which damage to a defender on ``terrain`` drops.

    Negative values mean the defender takes *more* damage.  Unmapped
    terrain (including ``INVALID``) gives 0.
    """
    if terrain is None:
        return 0.0
    return _DEFENSE_MODIFIERS.get(terrain, 0.0)


def terrain_from_char(char: str) -> TerrainType:
    """Map a level character to its terrain; unknown characters are plain."""
    return CHAR_TO_TERRAIN.get(char, TerrainType.PLAIN)


def terrain_name(terrain: TerrainType | None) -> str:
    """Human-readable name, e.g. ``"Deep Sea"``; ``"Unknown"`` for INVALID."""
    if terrain is None or terrain.name is None:
        return "Unknown"
    return terrain.name.replace("_", " ").title()
