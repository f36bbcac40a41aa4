"""Gesture lifecycle: ghost/marquee state driven by pointer and wheel events.

The interaction state is an immutable value. Event handlers never mutate it;
they return an :class:`Outcome` holding the intents that move the state
forward plus the notifications the host should act on (selection changes and
rect updates). ``Outcome.apply`` folds the intents with
:func:`reduce_interaction`, so a host that keeps the state elsewhere can
replay the same intents into its own store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from .config import EngineConfig, get_engine_config
from .geometry import (
    clamp_grid,
    group_bounds,
    marquee_bounds,
    rects_at_cell,
    rects_in_pixel_box,
    round_half_up,
    to_grid,
    to_local,
)
from .hit_test import classify_pointer_down
from .model import (
    EditorMode,
    GestureTarget,
    GridConfig,
    Notification,
    Point,
    Rect,
    RectId,
    RectUpdate,
    RectUpdateBatch,
    SelectionChange,
)
from .zorder import restack

logger = logging.getLogger(__name__)

DragType = Literal["MOVE", "RESIZE"]

DEFAULT_RESIZE_DIR = "se"


@dataclass(frozen=True)
class GhostItem:
    original_rect: Rect
    current_rect: Rect


@dataclass(frozen=True)
class Ghost:
    """In-flight geometry of a move/resize, kept apart from the committed rects."""

    primary_id: RectId
    # Selection as it was before this gesture's own pointer-down touched it.
    original_selected_ids: Tuple[RectId, ...]
    type: DragType
    start_mouse: Point
    items: Dict[RectId, GhostItem] = field(default_factory=dict)
    was_dragged: bool = False
    resize_dir: Optional[str] = None

    def current_rects(self) -> List[Rect]:
        return [item.current_rect for item in self.items.values()]


@dataclass(frozen=True)
class Marquee:
    """Rubber band in local pixels; ``(x1, y1)`` is the anchor, ``(x2, y2)`` follows the pointer."""

    x1: float
    y1: float
    x2: float
    y2: float
    additive: bool = False
    base_ids: Tuple[RectId, ...] = ()

    def bounds(self) -> Tuple[float, float, float, float]:
        return marquee_bounds(self.x1, self.y1, self.x2, self.y2)


@dataclass(frozen=True)
class InteractionState:
    hovered_id: Optional[RectId] = None
    ghost: Optional[Ghost] = None
    marquee: Optional[Marquee] = None

    @property
    def is_idle(self) -> bool:
        return self.ghost is None and self.marquee is None


_UNSET: Any = object()


@dataclass(frozen=True)
class Hover:
    hovered_id: Optional[RectId]


@dataclass(frozen=True)
class DragStart:
    ghost: Optional[Ghost]
    marquee: Optional[Marquee]


@dataclass(frozen=True)
class DragUpdate:
    """Replace ``ghost`` and/or ``marquee``; fields left unset keep their value."""

    ghost: Any = _UNSET
    marquee: Any = _UNSET


@dataclass(frozen=True)
class DragEnd:
    pass


Intent = Union[Hover, DragStart, DragUpdate, DragEnd]


def reduce_interaction(state: InteractionState, intent: Intent) -> InteractionState:
    if isinstance(intent, Hover):
        return replace(state, hovered_id=intent.hovered_id)
    if isinstance(intent, DragStart):
        return replace(state, ghost=intent.ghost, marquee=intent.marquee)
    if isinstance(intent, DragUpdate):
        return replace(
            state,
            ghost=state.ghost if intent.ghost is _UNSET else intent.ghost,
            marquee=state.marquee if intent.marquee is _UNSET else intent.marquee,
        )
    if isinstance(intent, DragEnd):
        return replace(state, ghost=None, marquee=None)
    raise TypeError(f"unknown interaction intent: {intent!r}")


@dataclass(frozen=True)
class Outcome:
    intents: Tuple[Intent, ...] = ()
    notifications: Tuple[Notification, ...] = ()

    def apply(self, state: InteractionState) -> InteractionState:
        for intent in self.intents:
            state = reduce_interaction(state, intent)
        return state


@dataclass(frozen=True)
class GridView:
    """Read-only snapshot of the host state a handler needs."""

    rects: Mapping[RectId, Rect]
    grid: GridConfig
    selected_ids: Tuple[RectId, ...] = ()
    mode: EditorMode = "design"
    zoom: float = 1.0
    # Top-left of the grid element in pointer (client) coordinates.
    origin: Point = Point(0.0, 0.0)

    def local_point(self, event: "PointerEvent") -> Point:
        return to_local(Point(event.x, event.y), self.origin, self.zoom)


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    # Ctrl, Meta or Shift.
    modifier: bool = False


@dataclass(frozen=True)
class WheelEvent:
    delta_y: float


def hover(state: InteractionState, rect_id: Optional[RectId]) -> Outcome:
    return Outcome(intents=(Hover(rect_id),))


def pointer_down(
    view: GridView,
    state: InteractionState,
    event: PointerEvent,
    target: Optional[GestureTarget] = None,
) -> Outcome:
    """Classify the press, update the selection and open a ghost or marquee."""

    if view.mode != "design":
        return Outcome()

    local = view.local_point(event)
    original_ids = tuple(view.selected_ids)
    result = classify_pointer_down(
        local,
        view.rects,
        original_ids,
        view.grid,
        target=target,
        modifier=event.modifier,
    )

    notifications: Tuple[Notification, ...] = (SelectionChange(result.selection),)

    if result.gesture == "MARQUEE" or result.primary_id is None:
        marquee = Marquee(
            local.x,
            local.y,
            local.x,
            local.y,
            additive=event.modifier,
            base_ids=result.selection,
        )
        return Outcome(intents=(DragStart(ghost=None, marquee=marquee),), notifications=notifications)

    items = {
        rid: GhostItem(view.rects[rid], view.rects[rid])
        for rid in result.selection
        if rid in view.rects
    }
    ghost = Ghost(
        primary_id=result.primary_id,
        original_selected_ids=original_ids,
        type="RESIZE" if result.gesture == "RESIZE" else "MOVE",
        start_mouse=local,
        items=items,
        was_dragged=False,
        resize_dir=target.handle_direction if result.gesture == "RESIZE" and target else None,
    )
    logger.debug("Starting %s gesture on %s with %d item(s)", ghost.type, ghost.primary_id, len(items))
    return Outcome(intents=(DragStart(ghost=ghost, marquee=None),), notifications=notifications)


def _move_items(ghost: Ghost, grid_dx: int, grid_dy: int, columns: int) -> Dict[RectId, GhostItem]:
    bounds = group_bounds(item.original_rect for item in ghost.items.values())
    if bounds is None:
        return dict(ghost.items)
    min_x, min_y, max_x, _ = bounds

    # Horizontal clamp keeps the whole group inside the columns; vertical only guards the top.
    if min_x + grid_dx < 0:
        grid_dx = -min_x
    if max_x + grid_dx > columns:
        grid_dx = columns - max_x
    if min_y + grid_dy < 0:
        grid_dy = -min_y

    moved: Dict[RectId, GhostItem] = {}
    for rid, item in ghost.items.items():
        orig = item.original_rect
        moved[rid] = GhostItem(orig, replace(orig, x=orig.x + grid_dx, y=orig.y + grid_dy))
    return moved


def resize_rect(orig: Rect, direction: str, grid_dx: int, grid_dy: int, columns: int) -> Rect:
    """Resize ``orig`` by dragging the edges named in ``direction`` (``n``/``s``/``e``/``w``)."""

    x, y, w, h = orig.geometry()

    if "e" in direction:
        w = max(1, orig.w + grid_dx)
    elif "w" in direction:
        diff = min(orig.w - 1, grid_dx)
        w = orig.w - diff
        x = orig.x + diff

    if "s" in direction:
        h = max(1, orig.h + grid_dy)
    elif "n" in direction:
        diff = min(orig.h - 1, grid_dy)
        h = orig.h - diff
        y = orig.y + diff

    return clamp_grid(Rect(orig.id, x, y, w, h, orig.z, orig.content_id), columns)


def pointer_move(
    view: GridView,
    state: InteractionState,
    event: PointerEvent,
    config: Optional[EngineConfig] = None,
) -> Outcome:
    """Track the pointer: stretch the marquee or reposition the ghost items."""

    local = view.local_point(event)

    if state.marquee is not None:
        marquee = replace(state.marquee, x2=local.x, y2=local.y)
        return Outcome(intents=(DragUpdate(marquee=marquee),))

    ghost = state.ghost
    if ghost is None:
        return Outcome()

    cfg = config or get_engine_config()
    grid = view.grid

    delta_x = local.x - ghost.start_mouse.x
    delta_y = local.y - ghost.start_mouse.y
    was_dragged = (
        ghost.was_dragged
        or abs(delta_x) > cfg.drag_threshold_px
        or abs(delta_y) > cfg.drag_threshold_px
    )
    grid_dx = round_half_up(delta_x / grid.step_x)
    grid_dy = round_half_up(delta_y / grid.step_y)

    if ghost.type == "MOVE":
        items = _move_items(ghost, grid_dx, grid_dy, grid.columns)
    else:
        items = dict(ghost.items)
        primary = items.get(ghost.primary_id)
        if primary is not None:
            resized = resize_rect(
                primary.original_rect,
                ghost.resize_dir or DEFAULT_RESIZE_DIR,
                grid_dx,
                grid_dy,
                grid.columns,
            )
            items[ghost.primary_id] = GhostItem(primary.original_rect, resized)

    return Outcome(intents=(DragUpdate(ghost=replace(ghost, was_dragged=was_dragged, items=items)),))


def _finish_marquee(view: GridView, marquee: Marquee, cfg: EngineConfig) -> Tuple[Notification, ...]:
    left, top, width, height = marquee.bounds()
    threshold = cfg.marquee_threshold_px
    if width <= threshold or height <= threshold:
        return ()

    hits = rects_in_pixel_box(view.rects, (left, top, width, height), view.grid)
    if marquee.additive:
        selection = list(marquee.base_ids)
        selection.extend(rid for rid in hits if rid not in selection)
    else:
        selection = hits
    logger.debug("Marquee %s selects %s", (left, top, width, height), selection)
    return (SelectionChange(tuple(selection)),)


def _finish_click(view: GridView, ghost: Ghost, event: PointerEvent) -> Tuple[Notification, ...]:
    grid_x, grid_y = to_grid(ghost.start_mouse.x, ghost.start_mouse.y, view.grid)
    hits = rects_at_cell(view.rects, grid_x, grid_y)

    if not hits:
        return () if event.modifier else (SelectionChange(()),)
    if event.modifier:
        # Toggle already happened at pointer-down.
        return ()
    if ghost.primary_id not in ghost.original_selected_ids:
        return ()

    # Repeated clicks on an already-selected rect step through the pile front to back.
    index = hits.index(ghost.primary_id) if ghost.primary_id in hits else -1
    next_id = hits[(index + 1) % len(hits)]
    logger.debug("Click cycles selection from %s to %s", ghost.primary_id, next_id)
    return (SelectionChange((next_id,)),)


def _commit_ghost(ghost: Ghost) -> Tuple[Notification, ...]:
    if not ghost.items:
        return ()
    updates = tuple(RectUpdate(rid, item.current_rect) for rid, item in ghost.items.items())
    logger.debug("Committing %s of %d item(s)", ghost.type, len(updates))
    return (RectUpdateBatch(updates),)


def pointer_up(
    view: GridView,
    state: InteractionState,
    event: PointerEvent,
    config: Optional[EngineConfig] = None,
) -> Outcome:
    """Finish the active gesture and return to idle."""

    cfg = config or get_engine_config()

    if state.marquee is not None:
        return Outcome(intents=(DragEnd(),), notifications=_finish_marquee(view, state.marquee, cfg))

    ghost = state.ghost
    if ghost is None:
        return Outcome()

    notifications: Tuple[Notification, ...] = ()
    if ghost.type == "MOVE":
        if ghost.was_dragged:
            notifications = _commit_ghost(ghost)
        else:
            notifications = _finish_click(view, ghost, event)
    elif ghost.was_dragged:
        notifications = _commit_ghost(ghost)

    return Outcome(intents=(DragEnd(),), notifications=notifications)


def wheel(view: GridView, event: WheelEvent) -> Outcome:
    """Re-stack the selection: wheel down brings it forward, wheel up sends it backward."""

    if view.mode != "design" or not view.selected_ids or event.delta_y == 0:
        return Outcome()
    updates = restack(view.rects, list(view.selected_ids), forward=event.delta_y > 0)
    if not updates:
        return Outcome()
    return Outcome(notifications=(RectUpdateBatch(tuple(updates)),))


def drive(
    view: GridView,
    state: InteractionState,
    events: Sequence[Tuple[str, PointerEvent]],
    target: Optional[GestureTarget] = None,
) -> Tuple[InteractionState, List[Notification]]:
    """Run a down/move/up sequence against a fixed view; handy for scripted gestures."""

    collected: List[Notification] = []
    for kind, event in events:
        if kind == "down":
            outcome = pointer_down(view, state, event, target)
        elif kind == "move":
            outcome = pointer_move(view, state, event)
        elif kind == "up":
            outcome = pointer_up(view, state, event)
        else:
            raise ValueError(f"unknown pointer event kind {kind!r}")
        state = outcome.apply(state)
        collected.extend(outcome.notifications)
    return state, collected


__all__ = [
    "DragType",
    "GhostItem",
    "Ghost",
    "Marquee",
    "InteractionState",
    "Hover",
    "DragStart",
    "DragUpdate",
    "DragEnd",
    "Intent",
    "reduce_interaction",
    "Outcome",
    "GridView",
    "PointerEvent",
    "WheelEvent",
    "hover",
    "pointer_down",
    "pointer_move",
    "pointer_up",
    "wheel",
    "resize_rect",
    "drive",
]
