"""Level loading - turn level strings and YAML level files into game state.

A level string is a newline-delimited block of single characters, one per
cell (see ``terrain.CHAR_TO_TERRAIN``).  A level file wraps that string in
YAML together with the starting units::

    terrain: |
      ..T^
      .~~.
    units:
      - {player: 1, x: 0, y: 0}
      - {player: 2, x: 3, y: 1, health: 60}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skirmish.units.registry import UnitRegistry
from skirmish.units.unit import MAX_HEALTH
from skirmish.world.grid import Grid
from skirmish.world.terrain import terrain_from_char

logger = logging.getLogger(__name__)


class LevelFormatError(ValueError):
    """Raised when a level description cannot produce a playable level."""


@dataclass(frozen=True)
class UnitPlacement:
    """Starting position of one unit in a level file."""

    player: int
    x: int
    y: int
    health: int | None = None


@dataclass
class Level:
    """A parsed level: terrain plus starting units.

    Attributes:
        grid: The terrain grid.
        placements: Units to spawn when play begins.
    """

    grid: Grid
    placements: list[UnitPlacement] = field(default_factory=list)

    def spawn_units(self) -> UnitRegistry:
        """Build a fresh registry holding this level's starting units."""
        registry = UnitRegistry(width=self.grid.width, height=self.grid.height)
        for p in self.placements:
            registry.spawn(p.player, p.x, p.y, health=p.health)
        return registry


def parse_level_string(level_string: str) -> Grid:
    """Parse a level string into a ``Grid``.

    The whole string and every row are stripped of surrounding whitespace.
    Unrecognised characters become plain terrain.

    Args:
        level_string: Newline-delimited terrain characters.

    Returns:
        The parsed grid.

    Raises:
        LevelFormatError: If the level has no rows or no columns, or its
            rows differ in length.
    """
    rows = [row.strip() for row in level_string.strip().split("\n")]
    width = len(rows[0])
    if width == 0:
        msg = "level has no terrain cells"
        raise LevelFormatError(msg)
    for y, row in enumerate(rows):
        if len(row) != width:
            msg = f"level row {y} has {len(row)} cells, expected {width}"
            raise LevelFormatError(msg)

    return Grid.from_rows([[terrain_from_char(char) for char in row] for row in rows])


def _placement(entry: object, index: int) -> UnitPlacement:
    """Validate one ``units`` entry of a level file."""
    msg = f"unit {index}: expected {{player, x, y, health?}}, got {entry!r}"
    if not isinstance(entry, dict):
        raise LevelFormatError(msg)
    try:
        player, x, y = int(entry["player"]), int(entry["x"]), int(entry["y"])
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelFormatError(msg) from exc

    health = entry.get("health")
    if health is not None and not (isinstance(health, int) and 1 <= health <= MAX_HEALTH):
        msg = f"unit {index}: starting health must be 1-{MAX_HEALTH}, got {health!r}"
        raise LevelFormatError(msg)
    return UnitPlacement(player=player, x=x, y=y, health=health)


def load_level(path: str | Path) -> Level:
    """Load a YAML level file.

    Args:
        path: Path to the level file.

    Returns:
        The parsed level.

    Raises:
        FileNotFoundError: If the file does not exist.
        LevelFormatError: If the terrain is missing or malformed, or a unit
            entry is incomplete, has out-of-range health, sits off the board
            or shares a cell with another unit.
    """
    path = Path(path)
    with path.open("r") as f:
        data = yaml.safe_load(f) or {}

    terrain = data.get("terrain")
    if not isinstance(terrain, str):
        msg = f"{path}: missing 'terrain' level string"
        raise LevelFormatError(msg)

    grid = parse_level_string(terrain)
    placements = [_placement(u, i) for i, u in enumerate(data.get("units") or [])]
    level = Level(grid=grid, placements=placements)
    try:
        level.spawn_units()
    except ValueError as exc:
        msg = f"{path}: {exc}"
        raise LevelFormatError(msg) from exc

    logger.info(
        "Loaded level %s (%dx%d, %d units)",
        path.name,
        grid.width,
        grid.height,
        len(placements),
    )
    return level
