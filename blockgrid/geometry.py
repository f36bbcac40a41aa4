"""Grid/pixel coordinate conversion, clamping and batch rect queries."""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

import numpy as np

from .model import GridConfig, Point, Rect, RectId

# Column order of the table built by ``_rect_table``.
_X, _Y, _W, _H, _Z = range(5)

PixelBox = Tuple[float, float, float, float]
GridBox = Tuple[int, int, int, int]

_ClampT = TypeVar("_ClampT", Rect, GridBox)


def to_local(point: Point, origin: Point, zoom: float) -> Point:
    """Map a pointer position into the unzoomed local space of the grid."""

    return Point((point.x - origin.x) / zoom, (point.y - origin.y) / zoom)


def to_grid(x: float, y: float, config: GridConfig) -> Tuple[int, int]:
    grid_x = math.floor((x - config.padding) / config.step_x)
    grid_y = math.floor((y - config.padding) / config.step_y)
    return int(grid_x), int(grid_y)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going toward +infinity."""

    return int(math.floor(value + 0.5))


def clamp_int(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def clamp_grid(rect: _ClampT, columns: int) -> _ClampT:
    """Force ``w,h >= 1`` and ``0 <= x <= x + w <= columns``, shrinking then shifting.

    Accepts a ``Rect`` (identity, z and content id are kept) or a bare
    ``(x, y, w, h)`` tuple, and returns the same kind.
    """

    if isinstance(rect, Rect):
        x, y, w, h = rect.geometry()
    else:
        x, y, w, h = rect

    w = clamp_int(int(w), 1, columns)
    x = clamp_int(int(x), 0, columns - w)
    h = max(1, int(h))
    y = max(0, int(y))

    if isinstance(rect, Rect):
        return Rect(rect.id, x, y, w, h, rect.z, rect.content_id)
    return (x, y, w, h)


def rect_covers_cell(rect: Rect, grid_x: int, grid_y: int) -> bool:
    return rect.x <= grid_x < rect.right and rect.y <= grid_y < rect.bottom


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Strict 2D interval overlap; touching edges do not count."""

    return a.x < b.right and a.right > b.x and a.y < b.bottom and a.bottom > b.y


def pixel_box(rect: Rect, config: GridConfig) -> PixelBox:
    """Return ``(left, top, width, height)`` of ``rect`` in local pixels."""

    return (
        config.padding + rect.x * config.step_x,
        config.padding + rect.y * config.step_y,
        rect.w * config.step_x,
        rect.h * config.step_y,
    )


def marquee_bounds(x1: float, y1: float, x2: float, y2: float) -> PixelBox:
    """Normalise two unordered corners into ``(left, top, width, height)``."""

    return (min(x1, x2), min(y1, y2), abs(x1 - x2), abs(y1 - y2))


def group_bounds(rects: Iterable[Rect]) -> Optional[Tuple[int, int, int, int]]:
    """Bounding box ``(min_x, min_y, max_x, max_y)`` of ``rects``; ``None`` when empty."""

    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for rect in rects:
        seen = True
        min_x = min(min_x, rect.x)
        min_y = min(min_y, rect.y)
        max_x = max(max_x, rect.right)
        max_y = max(max_y, rect.bottom)
    if not seen:
        return None
    return int(min_x), int(min_y), int(max_x), int(max_y)


def _rect_table(rects: Mapping[RectId, Rect]) -> Tuple[List[RectId], np.ndarray]:
    ids = list(rects.keys())
    if not ids:
        return ids, np.empty((0, 5), dtype=np.int64)
    table = np.array(
        [[r.x, r.y, r.w, r.h, r.z] for r in rects.values()],
        dtype=np.int64,
    )
    return ids, table


def _ordered_ids(ids: Sequence[RectId], table: np.ndarray, mask: np.ndarray, *, descending: bool) -> List[RectId]:
    idx = np.nonzero(mask)[0]
    keys = table[idx, _Z]
    if descending:
        keys = -keys
    order = idx[np.argsort(keys, kind="stable")]
    return [ids[i] for i in order]


def rects_at_cell(rects: Mapping[RectId, Rect], grid_x: int, grid_y: int) -> List[RectId]:
    """Ids of the rects covering a grid cell, front-most first.

    Ties in ``z`` keep the mapping's insertion order.
    """

    ids, t = _rect_table(rects)
    mask = (
        (t[:, _X] <= grid_x)
        & (grid_x < t[:, _X] + t[:, _W])
        & (t[:, _Y] <= grid_y)
        & (grid_y < t[:, _Y] + t[:, _H])
    )
    return _ordered_ids(ids, t, mask, descending=True)


def overlap_stack(rects: Mapping[RectId, Rect], anchor: Rect) -> List[RectId]:
    """Ids of the rects strictly overlapping ``anchor`` (itself included), back to front."""

    ids, t = _rect_table(rects)
    mask = (
        (t[:, _X] < anchor.right)
        & (t[:, _X] + t[:, _W] > anchor.x)
        & (t[:, _Y] < anchor.bottom)
        & (t[:, _Y] + t[:, _H] > anchor.y)
    )
    return _ordered_ids(ids, t, mask, descending=False)


def z_sorted_ids(rects: Mapping[RectId, Rect]) -> List[RectId]:
    """All ids back to front (stable for equal ``z``)."""

    ids, t = _rect_table(rects)
    return _ordered_ids(ids, t, np.ones(len(ids), dtype=bool), descending=False)


def rects_in_pixel_box(rects: Mapping[RectId, Rect], box: PixelBox, config: GridConfig) -> List[RectId]:
    """Ids whose pixel box has non-zero-area overlap with ``box``, in mapping order."""

    left, top, width, height = box
    ids, t = _rect_table(rects)
    r_left = config.padding + t[:, _X] * float(config.step_x)
    r_top = config.padding + t[:, _Y] * float(config.step_y)
    r_right = r_left + t[:, _W] * float(config.step_x)
    r_bottom = r_top + t[:, _H] * float(config.step_y)
    mask = (r_left < left + width) & (r_right > left) & (r_top < top + height) & (r_bottom > top)
    return [ids[i] for i in np.nonzero(mask)[0]]


def grid_row_count(
    rects: Iterable[Rect],
    extra: Iterable[Rect] = (),
    *,
    default: int = 52,
) -> int:
    """Rows the overlay needs to show committed and in-flight rects."""

    max_row = 0
    for rect in list(rects) + list(extra):
        max_row = max(max_row, rect.bottom)
    return max_row if max_row > 0 else default


__all__ = [
    "PixelBox",
    "GridBox",
    "to_local",
    "to_grid",
    "round_half_up",
    "clamp_int",
    "clamp_grid",
    "rect_covers_cell",
    "rects_overlap",
    "pixel_box",
    "marquee_bounds",
    "group_bounds",
    "rects_at_cell",
    "overlap_stack",
    "z_sorted_ids",
    "rects_in_pixel_box",
    "grid_row_count",
]
