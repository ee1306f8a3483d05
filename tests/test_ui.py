"""Smoke tests for the UI module (no display required)."""

from __future__ import annotations

from gridfarm.ui.pygame_client import PygameRenderer


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from gridfarm.__main__ import main

    assert callable(main)


class TestRequirementLines:
    """Tests for the growth-conditions panel text."""

    def test_shipped_rules(self) -> None:
        from gridfarm.crops.species import RULES
        from gridfarm.ui.pygame_client import requirement_lines
        from gridfarm.world.tile import CropType

        assert requirement_lines(RULES[CropType.GARLIC], "en") == [
            "Sun ≥ 95",
            "Water ≥ 10",
        ]
        assert requirement_lines(RULES[CropType.CUCUMBER], "en") == [
            "Sun ≤ 20",
            "Water ≥ 80",
        ]
        assert requirement_lines(RULES[CropType.TOMATO], "en") == [
            "Sun ≥ 30",
            "Water ≥ 30",
            "Needs adjacent tomato",
        ]

    def test_unbounded_rule_has_no_lines(self) -> None:
        from gridfarm.crops.species import GrowthRule
        from gridfarm.ui.pygame_client import requirement_lines

        assert requirement_lines(GrowthRule(), "en") == []
