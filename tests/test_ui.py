"""Smoke tests for the UI module (no display required)."""

from __future__ import annotations

import pytest

from skirmish.ui.pygame_client import PygameRenderer, health_badge


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from skirmish.__main__ import main

    assert callable(main)


@pytest.mark.parametrize(
    ("health", "badge"),
    [(100, None), (95, None), (94, "9"), (85, "9"), (50, "5"), (3, "1")],
)
def test_health_badge(health: int, badge: str | None) -> None:
    assert health_badge(health) == badge
