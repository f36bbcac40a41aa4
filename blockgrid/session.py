"""Host side of the engine: owns block data, selection, zoom and gesture state."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from . import interaction
from .config import EngineConfig, get_engine_config
from .defaults import DEFAULT_BLOCK_DATA
from .geometry import grid_row_count
from .hit_test import resolve_handle_target
from .interaction import GridView, InteractionState, Outcome, PointerEvent, WheelEvent
from .model import GestureTarget, Notification, Point, RectId, RectUpdateBatch, SelectionChange
from .store import BlockData, LayoutState, commit_rect_updates, derive_layout_state

logger = logging.getLogger(__name__)

Listener = Callable[[Notification], None]

EDITABLE_MODES = ("design", "render")


class EditorSession:
    """Single grid instance: routes events through the engine and applies its notifications.

    ``selection-change`` replaces the selection and ``rect-update`` is committed
    to the block data through the store adapter, once per finished gesture.
    """

    def __init__(
        self,
        block_data: Optional[Mapping[str, Any]] = None,
        *,
        mode: str = "design",
        zoom: float = 1.0,
        origin: Point = Point(0.0, 0.0),
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.block_data: BlockData = dict(block_data) if block_data is not None else copy.deepcopy(DEFAULT_BLOCK_DATA)
        self.layout: LayoutState = derive_layout_state(self.block_data)
        self.selected_ids: Tuple[RectId, ...] = ()
        self.mode = mode if mode in EDITABLE_MODES else "design"
        self.zoom = zoom
        self.origin = origin
        self.interaction = InteractionState()
        self._config = config
        self._listeners: List[Listener] = []

    @property
    def config(self) -> EngineConfig:
        return self._config or get_engine_config()

    def view(self) -> GridView:
        return GridView(
            rects=self.layout.rects,
            grid=self.layout.grid,
            selected_ids=self.selected_ids,
            mode=self.mode,
            zoom=self.zoom,
            origin=self.origin,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self, block_data: Mapping[str, Any]) -> None:
        self.block_data = dict(block_data)
        self.layout = derive_layout_state(self.block_data)

    def select(self, ids: Sequence[RectId]) -> None:
        self.selected_ids = tuple(ids)

    def set_mode(self, mode: str) -> bool:
        if mode not in EDITABLE_MODES:
            logger.debug("Ignoring unsupported mode %r", mode)
            return False
        self.mode = mode
        return True

    def zoom_in(self) -> float:
        return self._adjust_zoom(self.config.zoom_step)

    def zoom_out(self) -> float:
        return self._adjust_zoom(-self.config.zoom_step)

    def _adjust_zoom(self, delta: float) -> float:
        cfg = self.config
        self.zoom = min(cfg.zoom_max, max(cfg.zoom_min, round(self.zoom + delta, 6)))
        return self.zoom

    @property
    def row_count(self) -> int:
        ghost = self.interaction.ghost
        extra = ghost.current_rects() if ghost is not None else []
        return grid_row_count(self.layout.rects.values(), extra, default=self.config.default_row_count)

    def resolve_target(self, event: PointerEvent) -> Optional[GestureTarget]:
        local = self.view().local_point(event)
        return resolve_handle_target(local, self.layout.rects, self.selected_ids, self.layout.grid, self._config)

    def hover(self, rect_id: Optional[RectId]) -> None:
        self._apply(interaction.hover(self.interaction, rect_id))

    def pointer_down(self, event: PointerEvent, target: Optional[GestureTarget] = None) -> List[Notification]:
        if target is None:
            target = self.resolve_target(event)
        return self._apply(interaction.pointer_down(self.view(), self.interaction, event, target))

    def pointer_move(self, event: PointerEvent) -> List[Notification]:
        return self._apply(interaction.pointer_move(self.view(), self.interaction, event, self._config))

    def pointer_up(self, event: PointerEvent) -> List[Notification]:
        return self._apply(interaction.pointer_up(self.view(), self.interaction, event, self._config))

    def wheel(self, event: WheelEvent) -> List[Notification]:
        return self._apply(interaction.wheel(self.view(), event))

    def _apply(self, outcome: Outcome) -> List[Notification]:
        self.interaction = outcome.apply(self.interaction)
        for notification in outcome.notifications:
            self._handle(notification)
            for listener in list(self._listeners):
                listener(notification)
        return list(outcome.notifications)

    def _handle(self, notification: Notification) -> None:
        if isinstance(notification, SelectionChange):
            self.selected_ids = tuple(notification.ids)
            logger.debug("Selection is now %s", list(self.selected_ids))
        elif isinstance(notification, RectUpdateBatch):
            self.block_data, self.layout = commit_rect_updates(
                self.block_data,
                self.layout.rects,
                notification.updates,
            )
