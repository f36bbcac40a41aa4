"""Example: step a block through an overlapping pile with the wheel and with clicks."""

from blockgrid import EditorSession, PointerEvent, WheelEvent, print_layout

BLOCK = {
    "layout": {
        "columns": 12,
        "padding": 10,
        "stepX": 20,
        "stepY": 15,
        "positions": [
            {"positionId": "back", "x": 2, "y": 2, "w": 4, "h": 4, "z": 0},
            {"positionId": "middle", "x": 2, "y": 2, "w": 4, "h": 4, "z": 1},
            {"positionId": "front", "x": 2, "y": 2, "w": 4, "h": 4, "z": 2},
        ],
    }
}


def click(session: EditorSession, x: float, y: float) -> None:
    session.pointer_down(PointerEvent(x, y))
    session.pointer_up(PointerEvent(x, y))


def main() -> None:
    session = EditorSession(BLOCK)

    for _ in range(4):
        click(session, 80, 60)
        print("Selected:", ", ".join(session.selected_ids))

    session.select(["back"])
    session.wheel(WheelEvent(delta_y=1))
    print(print_layout(session.layout, session.selected_ids), end="")


if __name__ == "__main__":
    main()
