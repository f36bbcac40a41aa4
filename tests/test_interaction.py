import pytest

from blockgrid.interaction import (
    DragEnd,
    DragStart,
    DragUpdate,
    Ghost,
    GhostItem,
    GridView,
    Hover,
    InteractionState,
    Marquee,
    PointerEvent,
    WheelEvent,
    drive,
    pointer_down,
    pointer_move,
    pointer_up,
    reduce_interaction,
    resize_rect,
    wheel,
)
from blockgrid.model import GestureTarget, GridConfig, Point, Rect, RectUpdateBatch, SelectionChange


GRID = GridConfig(columns=12, row_height=15, padding=10, step_x=20, step_y=15)


def rects(*items):
    return {r.id: r for r in items}


def view(layout, selected=(), grid=GRID, **kwargs):
    return GridView(rects=layout, grid=grid, selected_ids=tuple(selected), **kwargs)


def selections(notifications):
    return [n.ids for n in notifications if isinstance(n, SelectionChange)]


def committed(notifications):
    batches = [n for n in notifications if isinstance(n, RectUpdateBatch)]
    assert len(batches) <= 1
    if not batches:
        return {}
    return {u.id: u.rect for u in batches[0].updates}


def click(layout, selected, point, modifier=False):
    """Press and release in place, feeding the selection back like a host would."""

    state = InteractionState()
    event = PointerEvent(*point, modifier=modifier)
    down = pointer_down(view(layout, selected), state, event)
    state = down.apply(state)
    picked = selections(down.notifications)
    if picked:
        selected = picked[-1]
    up = pointer_up(view(layout, selected), state, event)
    picked = selections(up.notifications)
    if picked:
        selected = picked[-1]
    return tuple(selected), up.apply(state)


@pytest.mark.parametrize('dx_px', [45, 41, 49.9])
def test_drag_rounds_pixel_delta_to_grid(dx_px):
    layout = rects(Rect('A', 0, 0, 4, 2, z=0))
    state, notes = drive(
        view(layout),
        InteractionState(),
        [
            ('down', PointerEvent(30, 20)),
            ('move', PointerEvent(30 + dx_px, 20)),
            ('up', PointerEvent(30 + dx_px, 20)),
        ],
    )
    assert state.is_idle
    assert selections(notes) == [('A',)]
    assert committed(notes)['A'] == Rect('A', 2, 0, 4, 2, z=0)


def test_pointer_down_snapshots_selection_into_ghost():
    a = Rect('A', 0, 0, 4, 2, z=0)
    b = Rect('B', 8, 0, 2, 2, z=1)
    outcome = pointer_down(view(rects(a, b), selected=['A', 'B']), InteractionState(), PointerEvent(30, 20))

    assert outcome.apply(InteractionState()).ghost == Ghost(
        primary_id='A',
        original_selected_ids=('A', 'B'),
        type='MOVE',
        start_mouse=Point(30, 20),
        items={'A': GhostItem(a, a), 'B': GhostItem(b, b)},
    )


def test_small_motion_stays_a_click():
    layout = rects(Rect('A', 0, 0, 4, 2, z=0))
    state, notes = drive(
        view(layout),
        InteractionState(),
        [('down', PointerEvent(30, 20)), ('move', PointerEvent(32, 18)), ('up', PointerEvent(32, 18))],
    )
    assert state.is_idle
    assert committed(notes) == {}


def test_once_dragged_returning_to_start_still_commits():
    layout = rects(Rect('A', 3, 0, 2, 2, z=0))
    _, notes = drive(
        view(layout),
        InteractionState(),
        [
            ('down', PointerEvent(75, 20)),
            ('move', PointerEvent(120, 20)),
            ('move', PointerEvent(75, 20)),
            ('up', PointerEvent(75, 20)),
        ],
    )
    assert committed(notes) == {'A': Rect('A', 3, 0, 2, 2, z=0)}


def test_group_drag_is_rigid_and_clamped():
    layout = rects(Rect('A', 0, 0, 4, 2, z=0), Rect('B', 3, 3, 2, 2, z=1))
    v = view(layout, selected=['A', 'B'])
    state = pointer_down(v, InteractionState(), PointerEvent(30, 20)).apply(InteractionState())
    assert set(state.ghost.items) == {'A', 'B'}

    seen = []
    for x, y in [(75, 20), (530, 20), (-470, 20), (30, -280), (130, 320), (90, 65)]:
        state = pointer_move(v, state, PointerEvent(x, y)).apply(state)
        a = state.ghost.items['A'].current_rect
        b = state.ghost.items['B'].current_rect
        assert (b.x - a.x, b.y - a.y) == (3, 3)
        assert min(a.x, b.x) >= 0 and max(a.right, b.right) <= GRID.columns
        assert min(a.y, b.y) >= 0
        seen.append((a.x, a.y))

    # Right edge clamps at column 12, left at 0, top at 0; downwards is unbounded.
    assert seen == [(2, 0), (7, 0), (0, 0), (0, 0), (5, 20), (3, 3)]

    notes = pointer_up(v, state, PointerEvent(90, 65)).notifications
    assert committed(notes) == {'A': Rect('A', 3, 3, 4, 2, z=0), 'B': Rect('B', 6, 6, 2, 2, z=1)}


def test_resize_from_south_east_handle():
    layout = rects(Rect('A', 2, 2, 4, 2, z=3))
    _, notes = drive(
        view(layout),
        InteractionState(),
        [('down', PointerEvent(130, 70)), ('move', PointerEvent(170, 100)), ('up', PointerEvent(170, 100))],
        target=GestureTarget('se', 'A'),
    )
    assert selections(notes) == [('A',)]
    assert committed(notes) == {'A': Rect('A', 2, 2, 6, 4, z=3)}


def test_resize_without_motion_commits_nothing():
    layout = rects(Rect('A', 2, 2, 4, 2))
    state, notes = drive(
        view(layout),
        InteractionState(),
        [('down', PointerEvent(130, 70)), ('up', PointerEvent(130, 70))],
        target=GestureTarget('se', 'A'),
    )
    assert state.is_idle
    assert committed(notes) == {}


@pytest.mark.parametrize(
    'direction, dx, dy, expected',
    [
        ('se', 2, 1, (2, 2, 6, 3)),
        ('se', -9, -9, (2, 2, 1, 1)),
        ('nw', 5, 5, (5, 3, 1, 1)),
        ('nw', -1, -1, (1, 1, 5, 3)),
        ('nw', -3, 0, (0, 2, 7, 2)),
        ('ne', 1, 1, (2, 3, 5, 1)),
        ('sw', 1, 1, (3, 2, 3, 3)),
        ('e', 20, 0, (0, 2, 12, 2)),
    ],
)
def test_resize_rect_directions(direction, dx, dy, expected):
    resized = resize_rect(Rect('A', 2, 2, 4, 2, z=1), direction, dx, dy, 12)
    assert resized.geometry() == expected
    assert resized.z == 1


def test_marquee_selects_strict_overlaps():
    grid = GridConfig(columns=12, row_height=20, padding=10, step_x=20, step_y=20)
    layout = rects(
        Rect('inside', 1, 1, 1, 1),
        Rect('straddle', 4, 4, 2, 2),
        Rect('outside', 5, 0, 1, 1),
    )
    v = view(layout, selected=['outside'], grid=grid)
    state = InteractionState()

    down = pointer_down(v, state, PointerEvent(0, 0))
    assert selections(down.notifications) == [()]
    state = down.apply(state)
    assert state.marquee == Marquee(0, 0, 0, 0, additive=False, base_ids=())

    state = pointer_move(v, state, PointerEvent(100, 100)).apply(state)
    assert state.marquee.bounds() == (0, 0, 100, 100)

    up = pointer_up(v, state, PointerEvent(100, 100))
    assert selections(up.notifications) == [('inside', 'straddle')]
    assert up.apply(state).is_idle


def test_marquee_below_threshold_is_noop():
    layout = rects(Rect('A', 0, 0, 2, 2))
    v = view(layout)
    state = pointer_down(v, InteractionState(), PointerEvent(200, 200)).apply(InteractionState())
    # 1px wide, 50px tall: one extent under the threshold is enough to cancel.
    state = pointer_move(v, state, PointerEvent(201, 250)).apply(state)
    up = pointer_up(v, state, PointerEvent(201, 250))
    assert up.notifications == ()
    assert up.intents == (DragEnd(),)


def test_additive_marquee_unions_with_prior_selection():
    layout = rects(Rect('A', 0, 0, 1, 1), Rect('B', 8, 8, 1, 1))
    v = view(layout, selected=['B'])
    state = InteractionState()
    down = pointer_down(v, state, PointerEvent(5, 5, modifier=True))
    assert selections(down.notifications) == [('B',)]
    state = down.apply(state)
    state = pointer_move(v, state, PointerEvent(40, 40)).apply(state)
    up = pointer_up(v, state, PointerEvent(40, 40))
    assert selections(up.notifications) == [('B', 'A')]


def test_click_cycles_through_overlapping_pile():
    layout = rects(
        Rect('A', 2, 2, 4, 4, z=0),
        Rect('B', 2, 2, 4, 4, z=1),
        Rect('C', 2, 2, 4, 4, z=2),
    )
    point = (80, 60)
    selected = ()
    seen = []
    for _ in range(5):
        selected, state = click(layout, selected, point)
        assert state.is_idle
        seen.append(selected)
    assert seen == [('C',), ('B',), ('A',), ('C',), ('B',)]


def test_first_click_on_unselected_rect_does_not_cycle():
    layout = rects(Rect('A', 2, 2, 4, 4, z=0), Rect('B', 2, 2, 4, 4, z=1))
    selected, _ = click(layout, ('A',), (80, 60))
    # A was already selected, so pointer-down keeps it primary and the click advances to B.
    assert selected == ('B',)

    selected, _ = click(layout, ('X',), (80, 60))
    assert selected == ('B',)


def test_modifier_click_toggles_without_cycling():
    layout = rects(Rect('A', 2, 2, 4, 4, z=0), Rect('B', 2, 2, 4, 4, z=1))
    selected, _ = click(layout, ('B',), (80, 60), modifier=True)
    assert selected == ()


def test_click_on_vanished_rect_clears_selection():
    layout = rects(Rect('A', 0, 0, 2, 2))
    state = pointer_down(view(layout), InteractionState(), PointerEvent(15, 15)).apply(InteractionState())
    up = pointer_up(view({}, selected=['A']), state, PointerEvent(15, 15))
    assert selections(up.notifications) == [()]


def test_idle_move_and_up_are_noops():
    layout = rects(Rect('A', 0, 0, 2, 2))
    state = InteractionState()
    assert pointer_move(view(layout), state, PointerEvent(5, 5)).intents == ()
    assert pointer_up(view(layout), state, PointerEvent(5, 5)).intents == ()


def test_pointer_down_outside_design_mode_is_ignored():
    layout = rects(Rect('A', 0, 0, 2, 2))
    outcome = pointer_down(view(layout, mode='render'), InteractionState(), PointerEvent(15, 15))
    assert outcome.intents == () and outcome.notifications == ()


def test_zoom_and_origin_map_pointer_to_local_space():
    layout = rects(Rect('A', 0, 0, 4, 2))
    v = view(layout, zoom=2.0, origin=Point(100, 50))
    state = pointer_down(v, InteractionState(), PointerEvent(160, 90)).apply(InteractionState())
    assert state.ghost.start_mouse == Point(30, 20)
    # 90px on screen is 45px locally.
    state = pointer_move(v, state, PointerEvent(250, 90)).apply(state)
    assert state.ghost.items['A'].current_rect.x == 2


def test_new_pointer_down_replaces_active_gesture():
    layout = rects(Rect('A', 0, 0, 4, 2))
    v = view(layout)
    state = pointer_down(v, InteractionState(), PointerEvent(300, 300)).apply(InteractionState())
    assert state.marquee is not None
    state = pointer_down(v, state, PointerEvent(30, 20)).apply(state)
    assert state.marquee is None
    assert state.ghost.primary_id == 'A'


def test_reduce_interaction_intents():
    ghost_state = InteractionState(hovered_id='A', marquee=Marquee(1, 2, 3, 4))
    assert reduce_interaction(ghost_state, Hover('B')).hovered_id == 'B'
    assert reduce_interaction(ghost_state, DragUpdate()).marquee == Marquee(1, 2, 3, 4)
    assert reduce_interaction(ghost_state, DragUpdate(marquee=None)).marquee is None
    ended = reduce_interaction(ghost_state, DragEnd())
    assert ended == InteractionState(hovered_id='A')
    started = reduce_interaction(ended, DragStart(ghost=None, marquee=Marquee(0, 0, 0, 0)))
    assert started.marquee == Marquee(0, 0, 0, 0)
    with pytest.raises(TypeError):
        reduce_interaction(ghost_state, 'not-an-intent')


def test_wheel_restacks_selection():
    layout = rects(Rect('A', 0, 0, 2, 2, z=0), Rect('B', 0, 0, 2, 2, z=1))
    forward = wheel(view(layout, selected=['A']), WheelEvent(delta_y=3))
    assert {rid: r.z for rid, r in committed(forward.notifications).items()} == {'A': 1, 'B': 0}
    assert forward.intents == ()

    assert wheel(view(layout, selected=['B']), WheelEvent(delta_y=3)).notifications == ()
    assert wheel(view(layout, selected=['A']), WheelEvent(delta_y=-3)).notifications == ()
    assert wheel(view(layout, selected=['A']), WheelEvent(delta_y=0)).notifications == ()
    assert wheel(view(layout), WheelEvent(delta_y=3)).notifications == ()
    assert wheel(view(layout, selected=['A'], mode='render'), WheelEvent(delta_y=3)).notifications == ()
