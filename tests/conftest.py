"""Shared fixtures for the Skirmish test suite."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from skirmish.units.registry import UnitRegistry
from skirmish.world.grid import Grid
from skirmish.world.level import parse_level_string

REPO_ROOT = Path(__file__).resolve().parent.parent


class FixedRandom:
    """Random source that always rolls the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def midpoint_rng() -> FixedRandom:
    """A random source with no variance: every roll is exactly 0.5."""
    return FixedRandom(0.5)


@pytest.fixture
def fixed_random() -> type[FixedRandom]:
    """Factory for random sources pinned to a chosen roll."""
    return FixedRandom


@pytest.fixture
def open_grid() -> Grid:
    """A 5x3 grid of plain terrain."""
    return parse_level_string(".....\n.....\n.....")


@pytest.fixture
def open_units(open_grid: Grid) -> UnitRegistry:
    """An empty registry sized for ``open_grid``."""
    return UnitRegistry(width=open_grid.width, height=open_grid.height)


@pytest.fixture
def demo_level_path() -> Path:
    """The level bundled with the repository."""
    return REPO_ROOT / "levels" / "skirmish.yaml"
