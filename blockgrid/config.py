"""Tuning knobs for pointer interaction."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    # Pointer travel (local px) that turns a click into a drag.
    drag_threshold_px: float = 2.0
    # Marquee extents at or below this are treated as a click on the background.
    marquee_threshold_px: float = 2.0
    # Resize handles are squares centred on the selected rect's corners.
    handle_half_size_px: float = 5.0
    zoom_min: float = 0.5
    zoom_max: float = 2.0
    zoom_step: float = 0.1
    # Rows shown by an empty grid overlay.
    default_row_count: int = 52


_ENGINE_CONFIG = EngineConfig()


def get_engine_config() -> EngineConfig:
    return copy.deepcopy(_ENGINE_CONFIG)


def set_engine_config(config: EngineConfig) -> None:
    global _ENGINE_CONFIG
    _ENGINE_CONFIG = copy.deepcopy(config)
