"""Schemas module for cua-remote."""

from .actions import (
    Action,
    ActionBase,
    ClickAction,
    DoubleClickAction,
    DragAction,
    KeypressAction,
    MoveAction,
    Point,
    ScreenshotAction,
    ScrollAction,
    TypeAction,
    WaitAction,
    parse_action,
)
from .events import ErrorKind, EventLog, EventSink, EventType, LoopEvent, StopReason
from .tasks import ActionResult, InstructionRequest, InstructionResult, ScreenshotResult

__all__ = [
    "Action",
    "ActionBase",
    "ClickAction",
    "DoubleClickAction",
    "DragAction",
    "KeypressAction",
    "MoveAction",
    "Point",
    "ScreenshotAction",
    "ScrollAction",
    "TypeAction",
    "WaitAction",
    "parse_action",
    "ErrorKind",
    "EventLog",
    "EventSink",
    "EventType",
    "LoopEvent",
    "StopReason",
    "ActionResult",
    "InstructionRequest",
    "InstructionResult",
    "ScreenshotResult",
]
