import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from blockgrid import (
    EditorSession,
    GestureTarget,
    PointerEvent,
    ValidationError,
    WheelEvent,
    dump_block_data,
    format_grid_map,
    load_block_data,
    print_layout,
    validate_block_data,
    validate_script,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_json(path: str) -> Any:
    with open(path, encoding="utf-8") as fin:
        return json.load(fin)


def _pointer(event: Mapping[str, Any]) -> PointerEvent:
    return PointerEvent(float(event["x"]), float(event["y"]), modifier=bool(event.get("modifier", False)))


def replay(session: EditorSession, events: Sequence[Mapping[str, Any]]) -> int:
    """Feed scripted events into ``session``; returns the number of notifications produced."""

    produced = 0
    for index, event in enumerate(events):
        kind = event["type"]
        if kind == "down":
            target = None
            if "handle" in event:
                target = GestureTarget(handle_direction=str(event["handle"]), owner_id=str(event["owner"]))
            notes = session.pointer_down(_pointer(event), target)
        elif kind == "move":
            notes = session.pointer_move(_pointer(event))
        elif kind == "up":
            notes = session.pointer_up(_pointer(event))
        elif kind == "wheel":
            notes = session.wheel(WheelEvent(float(event["deltaY"])))
        elif kind == "hover":
            session.hover(event.get("id"))
            notes = []
        elif kind == "zoom":
            zoom = session.zoom_in() if event["direction"] == "in" else session.zoom_out()
            logger.info("Event %d: zoom is now %.2f", index, zoom)
            notes = []
        elif kind == "mode":
            if not session.set_mode(event["mode"]):
                logger.warning("Event %d: unsupported mode %r ignored", index, event["mode"])
            notes = []
        else:
            session.select(event["ids"])
            notes = []

        for note in notes:
            logger.info("Event %d (%s): %s", index, kind, note.kind)
        produced += len(notes)
    return produced


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Replay pointer gestures against a block layout")
    parser.add_argument("path", help="Path to the block data JSON file")
    parser.add_argument(
        "--script",
        help="JSON list of events to replay (down/move/up/wheel/hover/zoom/mode/select)",
    )
    parser.add_argument(
        "--select",
        nargs="+",
        default=[],
        metavar="ID",
        help="Initial selection, anchor first",
    )
    parser.add_argument(
        "--output",
        help="Write the updated block data to the given path",
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="Print a character map of the grid after the layout",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        logger.info("Loading block data from %s", args.path)
        block_data = load_block_data(args.path)
        validate_block_data(block_data)
        events: List[Mapping[str, Any]] = []
        if args.script:
            logger.info("Loading gesture script from %s", args.script)
            events = _load_json(args.script)
            validate_script(events)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)

    session = EditorSession(block_data)
    session.select(args.select)

    produced = replay(session, events)
    logger.info("Replayed %d event(s), %d notification(s)", len(events), produced)

    print(print_layout(session.layout, session.selected_ids), end="")
    print(f"Selection: {', '.join(session.selected_ids) if session.selected_ids else '(none)'}")
    if args.map:
        print(format_grid_map(session.layout.rects.values(), session.layout.grid.columns), end="")

    if args.output:
        output_path = Path(args.output)
        logger.info("Writing block data to %s", output_path)
        dump_block_data(session.block_data, output_path)
        print(f"Block data written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
