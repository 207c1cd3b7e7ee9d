from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import UnsupportedAction


# Base action (all actions have these)
class ActionBase(BaseModel):
    # Planners attach extra keys we do not use; keep them for the event stream
    model_config = ConfigDict(extra="allow")

    type: str


class Point(BaseModel):
    x: int
    y: int


# ---- Pointer actions (model-space coordinates) ----

class ClickAction(ActionBase):
    type: Literal["click"] = "click"
    x: int
    y: int
    button: str = Field(default="left", description="left, right, middle or wheel")


class DoubleClickAction(ActionBase):
    type: Literal["double_click"] = "double_click"
    x: int
    y: int


class MoveAction(ActionBase):
    type: Literal["move"] = "move"
    x: int
    y: int


class ScrollAction(ActionBase):
    type: Literal["scroll"] = "scroll"
    scroll_y: int = Field(default=0, description="Negative = scroll up, Positive = scroll down")
    scroll_x: int = Field(default=0, description="Horizontal scrolling is not supported")
    x: Optional[int] = None
    y: Optional[int] = None


class DragAction(ActionBase):
    type: Literal["drag"] = "drag"
    path: List[Point] = Field(min_length=2)


# ---- Keyboard actions ----

class TypeAction(ActionBase):
    type: Literal["type"] = "type"
    text: str


class KeypressAction(ActionBase):
    type: Literal["keypress"] = "keypress"
    keys: Union[str, List[str]] = Field(description="Key combination like ctrl+c or ['CTRL', 'C']")


# ---- No-op actions ----

class ScreenshotAction(ActionBase):
    type: Literal["screenshot"] = "screenshot"


class WaitAction(ActionBase):
    type: Literal["wait"] = "wait"


# Union type (the planner issues ONE of these per computer call)
Action = Annotated[
    Union[
        ClickAction,
        DoubleClickAction,
        TypeAction,
        KeypressAction,
        MoveAction,
        ScrollAction,
        DragAction,
        ScreenshotAction,
        WaitAction,
    ],
    Field(discriminator="type"),
]

ACTION_TYPES = (
    "click",
    "double_click",
    "type",
    "keypress",
    "move",
    "scroll",
    "drag",
    "screenshot",
    "wait",
)

_action_adapter: TypeAdapter = TypeAdapter(Action)


def parse_action(data: Union[Dict[str, Any], ActionBase]) -> ActionBase:
    """
    Validate a raw action payload into one of the Action models.

    Raises UnsupportedAction for unknown tags and for payloads that do not
    match their tag's schema.
    """
    if isinstance(data, ActionBase):
        return data
    if not isinstance(data, dict):
        raise UnsupportedAction(f"Expected action object, got {type(data).__name__}")

    action_type = data.get("type")
    if action_type not in ACTION_TYPES:
        raise UnsupportedAction(
            f"Unknown action type: {action_type!r}. Valid types: {list(ACTION_TYPES)}",
            action_type=str(action_type),
        )

    try:
        return _action_adapter.validate_python(data)
    except ValidationError as e:
        raise UnsupportedAction(
            f"Invalid {action_type} action: {e.errors()[0].get('msg', e)}",
            action_type=action_type,
        ) from e
