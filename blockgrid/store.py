"""Conversion between persisted layout positions and the live rect dictionary."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .defaults import DEFAULT_GRID_CONFIG, LAYOUT_KEY, LEGACY_LAYOUT_KEYS
from .logging_utils import apply_debug_logging
from .model import GridConfig, Rect, RectId, RectUpdate, Size, apply_patch

logger = logging.getLogger(__name__)

BlockData = Dict[str, Any]

_POSITION_ID_KEYS = ("positionId", "_positionID", "id")
_CONTENT_ID_KEYS = ("contentId", "_contentID", "contentID")


@dataclass(frozen=True)
class LayoutState:
    rects: Dict[RectId, Rect] = field(default_factory=dict)
    grid: GridConfig = DEFAULT_GRID_CONFIG
    container_size: Size = Size(0, 0)


def _first(mapping: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _value(mapping: Mapping[str, Any], key: str, default: Any) -> Any:
    value = mapping.get(key)
    return default if value is None else value


def layout_section(block_data: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Return ``(key, layout)`` for the block's layout, preferring ``layout`` over legacy keys."""

    for key in (LAYOUT_KEY,) + LEGACY_LAYOUT_KEYS:
        section = block_data.get(key)
        if isinstance(section, dict):
            return key, section
    return LAYOUT_KEY, {}


def positions_of(block_data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    _, layout = layout_section(block_data)
    positions = layout.get("positions")
    return list(positions) if isinstance(positions, list) else []


def position_id(position: Mapping[str, Any], index: int) -> RectId:
    pid = _first(position, _POSITION_ID_KEYS)
    return str(pid) if pid is not None else f"pos-{index + 1}"


def rect_from_position(position: Mapping[str, Any], index: int) -> Rect:
    content = _first(position, _CONTENT_ID_KEYS)
    return Rect(
        id=position_id(position, index),
        x=int(_value(position, "x", 0)),
        y=int(_value(position, "y", 0)),
        w=int(_value(position, "w", 1)),
        h=int(_value(position, "h", 1)),
        z=int(_value(position, "z", index)),
        content_id=str(content) if content is not None else None,
    )


def grid_config_from_layout(layout: Mapping[str, Any]) -> GridConfig:
    d = DEFAULT_GRID_CONFIG
    return GridConfig(
        columns=int(_value(layout, "columns", d.columns)),
        row_height=_value(layout, "rowHeight", d.row_height),
        padding=_value(layout, "padding", d.padding),
        step_x=_value(layout, "stepX", d.step_x),
        step_y=_value(layout, "stepY", d.step_y),
        gutter=_value(layout, "gutter", d.gutter),
        mode=_value(layout, "mode", d.mode),
    )


def container_size(rects: Iterable[Rect], grid: GridConfig) -> Size:
    max_row = 1
    for rect in rects:
        max_row = max(max_row, rect.bottom)
    return Size(
        width=grid.columns * grid.step_x + grid.padding * 2,
        height=max_row * grid.row_height + grid.padding * 2,
    )


def derive_layout_state(
    block_data: Mapping[str, Any],
    override_rects: Optional[Mapping[RectId, Rect]] = None,
) -> LayoutState:
    """Build the live layout view of ``block_data``.

    ``override_rects`` is used verbatim when given; this is how a commit
    refreshes the view from merged rects before anything re-reads positions.
    """

    _, layout = layout_section(block_data)
    grid = grid_config_from_layout(layout)

    if override_rects is not None:
        rects = dict(override_rects)
    else:
        rects = {}
        for index, position in enumerate(positions_of(block_data)):
            rect = rect_from_position(position, index)
            rects[rect.id] = rect

    return LayoutState(rects=rects, grid=grid, container_size=container_size(rects.values(), grid))


def commit_rect_updates(
    block_data: Mapping[str, Any],
    rects: Mapping[RectId, Rect],
    updates: Iterable[RectUpdate],
) -> Tuple[BlockData, LayoutState]:
    """Merge ``updates`` into ``rects`` and write the result back to the positions.

    Patches for ids without a live rect are dropped, and positions without a
    patched rect are left as they are. ``block_data`` itself is not modified.
    """

    merged = dict(rects)
    patched: set[RectId] = set()
    for update in updates:
        current = merged.get(update.id)
        if current is None:
            logger.debug("Dropping update for unknown rect %s", update.id)
            continue
        merged[update.id] = apply_patch(current, update.rect)
        patched.add(update.id)

    if not patched:
        return dict(block_data), derive_layout_state(block_data, merged)

    key, layout = layout_section(block_data)
    positions: List[Dict[str, Any]] = []
    for index, position in enumerate(positions_of(block_data)):
        pid = position_id(position, index)
        if pid not in patched:
            positions.append(position)
            continue
        rect = merged[pid]
        positions.append({**position, "x": rect.x, "y": rect.y, "w": rect.w, "h": rect.h, "z": rect.z})

    next_data: BlockData = {**block_data, key: {**layout, "positions": positions}}
    logger.debug("Committed %d rect update(s)", len(patched))
    return next_data, derive_layout_state(next_data, merged)


def serialize_block_data(block_data: Mapping[str, Any]) -> str:
    return json.dumps(block_data or {}, indent=2)


def load_block_data(path: Union[str, Path]) -> BlockData:
    with open(path, encoding="utf-8") as fin:
        return json.load(fin)


def dump_block_data(block_data: Mapping[str, Any], path: Union[str, Path]) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(serialize_block_data(block_data) + "\n", encoding="utf-8")


apply_debug_logging(globals(), logger=logger, skip={"serialize_block_data", "load_block_data", "dump_block_data"})
