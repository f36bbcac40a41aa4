"""Stack-relative re-stacking with dense global renumbering."""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from .geometry import overlap_stack, z_sorted_ids
from .logging_utils import apply_debug_logging
from .model import Rect, RectId, RectUpdate

logger = logging.getLogger(__name__)


def restack(
    rects: Mapping[RectId, Rect],
    selected_ids: Sequence[RectId],
    forward: bool,
) -> List[RectUpdate]:
    """Move the selection one step forward/backward within the anchor's overlap stack.

    The anchor is ``selected_ids[0]``. Its stack is every rect strictly
    overlapping it, back to front. The selected member of that stack closest to
    the moving direction must have a neighbour beyond it; that neighbour is the
    target. The whole selection is then pulled out of the global back-to-front
    order and re-inserted right after (forward) or right before (backward) the
    target, keeping its own relative order. Rects outside the stack keep their
    relative order too.

    Returns one update per rect with ``z`` renumbered to its global index, or an
    empty list when nothing moves.
    """

    if not selected_ids:
        return []
    anchor = rects.get(selected_ids[0])
    if anchor is None:
        return []

    selected = set(selected_ids)
    stack = overlap_stack(rects, anchor)
    in_stack = [rid for rid in stack if rid in selected]
    if not in_stack:
        return []

    if forward:
        pivot = stack.index(in_stack[-1])
        if pivot >= len(stack) - 1:
            logger.debug("%s is already front-most in its stack", in_stack[-1])
            return []
        target = stack[pivot + 1]
    else:
        pivot = stack.index(in_stack[0])
        if pivot <= 0:
            logger.debug("%s is already back-most in its stack", in_stack[0])
            return []
        target = stack[pivot - 1]

    ordered = z_sorted_ids(rects)
    group = [rid for rid in ordered if rid in selected]
    rest = [rid for rid in ordered if rid not in selected]
    insert_at = rest.index(target) + (1 if forward else 0)
    final_order = rest[:insert_at] + group + rest[insert_at:]

    logger.debug(
        "Restacking %s %s %s",
        group,
        "above" if forward else "below",
        target,
    )

    updates: List[RectUpdate] = []
    for index, rid in enumerate(final_order):
        rect = rects[rid]
        updates.append(
            RectUpdate(
                id=rid,
                rect=Rect(rect.id, rect.x, rect.y, rect.w, rect.h, index, rect.content_id),
            )
        )
    return updates


def bring_forward(rects: Mapping[RectId, Rect], selected_ids: Sequence[RectId]) -> List[RectUpdate]:
    return restack(rects, selected_ids, forward=True)


def send_backward(rects: Mapping[RectId, Rect], selected_ids: Sequence[RectId]) -> List[RectUpdate]:
    return restack(rects, selected_ids, forward=False)


apply_debug_logging(globals(), logger=logger)
