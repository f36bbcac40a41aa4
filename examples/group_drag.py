"""Example: select two blocks and drag them together across the grid."""

from blockgrid import EditorSession, PointerEvent, print_layout

BLOCK = {
    "layout": {
        "columns": 12,
        "rowHeight": 15,
        "padding": 10,
        "stepX": 20,
        "stepY": 15,
        "positions": [
            {"positionId": "title", "x": 0, "y": 0, "w": 4, "h": 2, "z": 0},
            {"positionId": "body", "x": 0, "y": 3, "w": 6, "h": 4, "z": 1},
        ],
    }
}


def main() -> None:
    session = EditorSession(BLOCK)
    session.select(["title", "body"])

    # Press inside "title", drag 45px right and 30px down, release.
    session.pointer_down(PointerEvent(30, 20))
    session.pointer_move(PointerEvent(75, 50))
    session.pointer_up(PointerEvent(75, 50))

    print(print_layout(session.layout, session.selected_ids), end="")


if __name__ == "__main__":
    main()
