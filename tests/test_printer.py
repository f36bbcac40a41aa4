from blockgrid.model import GridConfig, Rect
from blockgrid.printer import format_grid, format_grid_map, format_rect, print_layout
from blockgrid.store import derive_layout_state


def test_format_rect_plain():
    assert format_rect(Rect('a', 1, 2, 3, 4, z=5)) == 'rect a at 1,2 size 3x4 z=5'


def test_format_rect_prints_bracketed_options():
    rect = Rect('a', 0, 0, 1, 1, z=0, content_id='c-a')

    assert format_rect(rect, selected=True) == 'rect a at 0,0 size 1x1 z=0 [content=c-a selected=true]'
    assert format_rect(rect) == 'rect a at 0,0 size 1x1 z=0 [content=c-a]'


def test_format_grid_drops_integral_decimals():
    grid = GridConfig(columns=12, row_height=15.0, padding=10, step_x=20, step_y=12.5)

    assert format_grid(grid) == 'grid columns=12 row-height=15 padding=10 step=20x12.5'


def test_print_layout_lists_rects_back_to_front():
    data = {
        'layout': {
            'columns': 6,
            'rowHeight': 10,
            'padding': 5,
            'stepX': 20,
            'stepY': 10,
            'positions': [
                {'positionId': 'top', 'x': 0, 'y': 0, 'w': 2, 'h': 2, 'z': 3},
                {'positionId': 'bottom', 'contentId': 'c1', 'x': 1, 'y': 1, 'w': 2, 'h': 3, 'z': 1},
            ],
        }
    }
    layout = derive_layout_state(data)

    assert print_layout(layout, ['top']) == (
        'grid columns=6 row-height=10 padding=5 step=20x10\n'
        'container 130x50\n'
        'rect bottom at 1,1 size 2x3 z=1 [content=c1]\n'
        'rect top at 0,0 size 2x2 z=3 [selected=true]\n'
    )


def test_grid_map_shows_front_most_rect():
    rects = [Rect('high', 1, 0, 2, 2, z=1), Rect('low', 0, 0, 2, 1, z=0)]

    assert format_grid_map(rects, 4) == 'ABB.\n.BB.\nA=low B=high\n'
    assert format_grid_map(rects, 4, rows=3) == 'ABB.\n.BB.\n....\nA=low B=high\n'
