"""Config - load game parameters from YAML files.

Tunable rules (movement and attack range, animation pacing, the RNG seed
and the level to play) live in YAML and are parsed into a typed dataclass
here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for the combat variance rolls.
        move_range: Movement points per activation.
        attack_range: Attack reach in steps.
        step_interval: Seconds between movement steps in the client.
        active_player: If set, only this player's units can be selected.
        level: Path to the YAML level file, relative to the config file.
    """

    seed: int = 42
    move_range: int = 4
    attack_range: int = 1
    step_interval: float = 0.1
    active_player: int | None = None
    level: Path | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        level = data.get("level")
        return cls(
            seed=data.get("seed", cls.seed),
            move_range=data.get("move_range", cls.move_range),
            attack_range=data.get("attack_range", cls.attack_range),
            step_interval=data.get("step_interval", cls.step_interval),
            active_player=data.get("active_player", cls.active_player),
            level=path.parent / level if level else None,
        )
