from typing import Dict, Iterable, List, Optional, Sequence

from .geometry import rect_covers_cell, z_sorted_ids
from .model import GridConfig, Rect
from .store import LayoutState

_MAP_SYMBOLS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"


def _format_number(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_opts(opts: Dict[str, object]) -> str:
    if not opts:
        return ""
    parts = []
    for key in sorted(opts.keys()):
        value = opts[key]
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        else:
            rendered = str(value)
        parts.append(f"{key}={rendered}")
    return " [" + " ".join(parts) + "]"


def format_grid(grid: GridConfig) -> str:
    return (
        f"grid columns={grid.columns} row-height={_format_number(grid.row_height)} "
        f"padding={_format_number(grid.padding)} "
        f"step={_format_number(grid.step_x)}x{_format_number(grid.step_y)}"
    )


def format_rect(rect: Rect, *, selected: bool = False) -> str:
    opts: Dict[str, object] = {}
    if rect.content_id:
        opts["content"] = rect.content_id
    if selected:
        opts["selected"] = True
    return f"rect {rect.id} at {rect.x},{rect.y} size {rect.w}x{rect.h} z={rect.z}{_format_opts(opts)}"


def print_layout(layout: LayoutState, selected_ids: Sequence[str] = ()) -> str:
    """Render a layout back to front, one line per rect."""

    selected = set(selected_ids)
    lines = [format_grid(layout.grid)]
    size = layout.container_size
    lines.append(f"container {_format_number(size.width)}x{_format_number(size.height)}")
    for rid in z_sorted_ids(layout.rects):
        lines.append(format_rect(layout.rects[rid], selected=rid in selected))
    return "\n".join(lines) + "\n"


def format_grid_map(rects: Iterable[Rect], columns: int, rows: Optional[int] = None) -> str:
    """Character map of the grid; each cell shows its front-most rect, ``.`` when empty.

    Rects are lettered in back-to-front order and a legend follows the map.
    """

    ordered: List[Rect] = sorted(rects, key=lambda r: r.z)
    height = rows if rows is not None else max((r.bottom for r in ordered), default=0)
    symbols = [_MAP_SYMBOLS[index % len(_MAP_SYMBOLS)] for index in range(len(ordered))]
    legend = [f"{symbol}={rect.id}" for symbol, rect in zip(symbols, ordered)]
    body = []
    for y in range(height):
        row = []
        for x in range(columns):
            cell = "."
            for symbol, rect in zip(symbols, ordered):
                if rect_covers_cell(rect, x, y):
                    cell = symbol
            row.append(cell)
        body.append("".join(row))
    return "\n".join(body + ([" ".join(legend)] if legend else [])) + "\n"
