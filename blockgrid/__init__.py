from .model import (
    Point,
    Size,
    Rect,
    GridConfig,
    GestureTarget,
    RectUpdate,
    SelectionChange,
    RectUpdateBatch,
    apply_patch,
)
from .config import EngineConfig, get_engine_config, set_engine_config
from .defaults import DEFAULT_GRID_CONFIG, DEFAULT_BLOCK_DATA
from .geometry import to_local, to_grid, clamp_grid, round_half_up, pixel_box, rects_at_cell, overlap_stack
from .hit_test import PointerDownResult, classify_pointer_down, resolve_handle_target
from .interaction import (
    Ghost,
    GhostItem,
    Marquee,
    InteractionState,
    GridView,
    PointerEvent,
    WheelEvent,
    Outcome,
    reduce_interaction,
    hover,
    pointer_down,
    pointer_move,
    pointer_up,
    wheel,
)
from .zorder import restack, bring_forward, send_backward
from .store import (
    LayoutState,
    derive_layout_state,
    commit_rect_updates,
    serialize_block_data,
    load_block_data,
    dump_block_data,
)
from .session import EditorSession
from .validate import validate_block_data, validate_script, ValidationError
from .printer import print_layout, format_rect, format_grid_map

__all__ = [
    'Point',
    'Size',
    'Rect',
    'GridConfig',
    'GestureTarget',
    'RectUpdate',
    'SelectionChange',
    'RectUpdateBatch',
    'apply_patch',
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'DEFAULT_GRID_CONFIG',
    'DEFAULT_BLOCK_DATA',
    'to_local',
    'to_grid',
    'clamp_grid',
    'round_half_up',
    'pixel_box',
    'rects_at_cell',
    'overlap_stack',
    'PointerDownResult',
    'classify_pointer_down',
    'resolve_handle_target',
    'Ghost',
    'GhostItem',
    'Marquee',
    'InteractionState',
    'GridView',
    'PointerEvent',
    'WheelEvent',
    'Outcome',
    'reduce_interaction',
    'hover',
    'pointer_down',
    'pointer_move',
    'pointer_up',
    'wheel',
    'restack',
    'bring_forward',
    'send_backward',
    'LayoutState',
    'derive_layout_state',
    'commit_rect_updates',
    'serialize_block_data',
    'load_block_data',
    'dump_block_data',
    'EditorSession',
    'validate_block_data',
    'validate_script',
    'ValidationError',
    'print_layout',
    'format_rect',
    'format_grid_map',
]
