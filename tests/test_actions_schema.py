import pytest

from cua_remote.errors import UnsupportedAction
from cua_remote.schemas.actions import (
    ClickAction,
    DragAction,
    KeypressAction,
    ScrollAction,
    WaitAction,
    parse_action,
)


def test_parse_dispatches_on_type():
    assert isinstance(parse_action({"type": "click", "x": 1, "y": 2}), ClickAction)
    assert isinstance(parse_action({"type": "wait"}), WaitAction)
    assert isinstance(parse_action({"type": "keypress", "keys": ["ALT", "F4"]}), KeypressAction)


def test_defaults():
    click = parse_action({"type": "click", "x": 1, "y": 2})
    assert click.button == "left"
    scroll = parse_action({"type": "scroll", "scroll_y": 3})
    assert isinstance(scroll, ScrollAction) and scroll.scroll_x == 0


def test_drag_points():
    drag = parse_action({"type": "drag", "path": [{"x": 1, "y": 2}, {"x": 3, "y": 4}]})
    assert isinstance(drag, DragAction)
    assert (drag.path[-1].x, drag.path[-1].y) == (3, 4)


def test_unknown_extra_keys_are_kept():
    click = parse_action({"type": "click", "x": 1, "y": 2, "button": "left", "note": "from planner"})
    assert click.model_dump()["note"] == "from planner"


@pytest.mark.parametrize("payload", [{"x": 1}, {"type": None}, {"type": "teleport"}, ["click"]])
def test_bad_payloads(payload):
    with pytest.raises(UnsupportedAction):
        parse_action(payload)
