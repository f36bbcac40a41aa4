"""Core data structures shared by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional, Tuple, Union

RectId = str
GestureType = Literal["MOVE", "RESIZE", "MARQUEE"]
EditorMode = str

_RECT_GEOMETRY_KEYS = ("x", "y", "w", "h", "z")


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Grid-aligned block with integer position, size and stacking index."""

    id: RectId
    x: int
    y: int
    w: int
    h: int
    z: int = 0
    content_id: Optional[str] = None

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def geometry(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)


@dataclass(frozen=True)
class GridConfig:
    columns: int
    row_height: float
    padding: float
    step_x: float
    step_y: float
    gutter: float = 0
    mode: EditorMode = "design"


@dataclass(frozen=True)
class GestureTarget:
    """Resize handle resolved under the pointer (``nw``, ``se``, ...)."""

    handle_direction: str
    owner_id: RectId


RectPatch = Union[Rect, Mapping[str, int]]


@dataclass(frozen=True)
class RectUpdate:
    id: RectId
    rect: RectPatch


def apply_patch(rect: Rect, patch: RectPatch) -> Rect:
    """Merge ``patch`` into ``rect``; identity and content id are kept."""

    if isinstance(patch, Rect):
        values = {key: getattr(patch, key) for key in _RECT_GEOMETRY_KEYS}
    else:
        values = {key: int(patch[key]) for key in _RECT_GEOMETRY_KEYS if key in patch}
    return Rect(
        id=rect.id,
        x=values.get("x", rect.x),
        y=values.get("y", rect.y),
        w=values.get("w", rect.w),
        h=values.get("h", rect.h),
        z=values.get("z", rect.z),
        content_id=rect.content_id,
    )


@dataclass(frozen=True)
class SelectionChange:
    ids: Tuple[RectId, ...]

    kind: str = field(default="selection-change", init=False)


@dataclass(frozen=True)
class RectUpdateBatch:
    updates: Tuple[RectUpdate, ...]

    kind: str = field(default="rect-update", init=False)


Notification = Union[SelectionChange, RectUpdateBatch]


__all__ = [
    "RectId",
    "GestureType",
    "EditorMode",
    "Point",
    "Size",
    "Rect",
    "GridConfig",
    "GestureTarget",
    "RectPatch",
    "RectUpdate",
    "apply_patch",
    "SelectionChange",
    "RectUpdateBatch",
    "Notification",
]
