"""Default grid configuration and the starter block shown before data loads."""

from __future__ import annotations

from typing import Any, Dict

from .model import GridConfig

DEFAULT_GRID_CONFIG = GridConfig(
    columns=36,
    row_height=15,
    padding=50,
    step_x=20,
    step_y=15,
    gutter=0,
    mode="design",
)

LAYOUT_KEY = "layout"
LEGACY_LAYOUT_KEYS = ("layout_lg",)

DEFAULT_BLOCK_DATA: Dict[str, Any] = {
    "blockId": "starter-block",
    LAYOUT_KEY: {
        "columns": 24,
        "rowHeight": 18,
        "padding": 32,
        "stepX": 24,
        "stepY": 18,
        "positions": [
            {"positionId": "hero", "contentId": "hero-content", "x": 0, "y": 0, "w": 24, "h": 7, "z": 0},
            {"positionId": "cta", "contentId": "cta-content", "x": 1, "y": 7, "w": 10, "h": 4, "z": 1},
            {"positionId": "feature", "contentId": "feature-content", "x": 12, "y": 7, "w": 11, "h": 6, "z": 2},
        ],
    },
}


__all__ = [
    "DEFAULT_GRID_CONFIG",
    "LAYOUT_KEY",
    "LEGACY_LAYOUT_KEYS",
    "DEFAULT_BLOCK_DATA",
]
