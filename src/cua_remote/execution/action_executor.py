"""
action_executor.py - Action -> desktop calls
============================================
Translates one planner action into DesktopSession calls, converting
model-space coordinates to desktop space on the way.

DESIGN PATTERN:
- DesktopSession  -> defines WHAT the remote desktop can do
- ActionExecutor  -> decides WHICH calls an action needs and WHERE

Nothing here retries: a retried click is a second click.
"""

from __future__ import annotations

from typing import Any, Dict, Union

from ..errors import UnsupportedAction
from ..perception.resolution import Coordinate, ResolutionScaler
from ..schemas.actions import (
    ActionBase,
    ClickAction,
    DoubleClickAction,
    DragAction,
    KeypressAction,
    MoveAction,
    ScreenshotAction,
    ScrollAction,
    TypeAction,
    WaitAction,
    parse_action,
)
from ..utils.logger import get_logger
from .session import DesktopSession

logger = get_logger(__name__)


class ActionExecutor:
    """
    Executes planner actions against one desktop session.

    USAGE:
        executor = ActionExecutor(session, scaler)
        executor.execute({"type": "click", "x": 10, "y": 20, "button": "left"})
    """

    def __init__(self, session: DesktopSession, scaler: ResolutionScaler):
        self._session = session
        self._scaler = scaler

    @property
    def scaler(self) -> ResolutionScaler:
        return self._scaler

    def execute(self, action: Union[ActionBase, Dict[str, Any]]) -> None:
        """
        Perform one action on the desktop.

        Raises:
            UnsupportedAction: unknown tag, malformed payload or unknown button.
                               Raised before any desktop call is made.
            RemoteSessionError: the desktop rejected or lost the call.
        """
        action = parse_action(action)

        if isinstance(action, ClickAction):
            self._handle_click(action)

        elif isinstance(action, DoubleClickAction):
            x, y = self._to_desktop(action.x, action.y)
            self._session.double_click(x, y)

        elif isinstance(action, MoveAction):
            x, y = self._to_desktop(action.x, action.y)
            self._session.move_mouse(x, y)

        elif isinstance(action, TypeAction):
            self._session.write(action.text)

        elif isinstance(action, KeypressAction):
            self._session.press(action.keys)

        elif isinstance(action, ScrollAction):
            self._handle_scroll(action)

        elif isinstance(action, DragAction):
            self._handle_drag(action)

        elif isinstance(action, (ScreenshotAction, WaitAction)):
            # The loop captures screenshots itself; waiting is the round-trip
            pass

        else:
            raise UnsupportedAction(
                f"Unknown action type: {type(action).__name__}", action_type=action.type
            )

        logger.debug(f"Executed {action.type}")

    # ─────────────────────────────────────────────────────────────
    # PRIVATE HANDLER METHODS
    # ─────────────────────────────────────────────────────────────

    def _to_desktop(self, x: int, y: int) -> Coordinate:
        return self._scaler.scale_to_original_space((x, y))

    def _handle_click(self, action: ClickAction) -> None:
        button = (action.button or "left").lower()
        if button not in ("left", "right", "middle", "wheel"):
            raise UnsupportedAction(f"Unknown mouse button: {action.button}", action_type="click")

        x, y = self._to_desktop(action.x, action.y)
        if button == "left":
            self._session.left_click(x, y)
        elif button == "right":
            self._session.right_click(x, y)
        else:
            self._session.middle_click(x, y)

    def _handle_scroll(self, action: ScrollAction) -> None:
        if action.scroll_x:
            logger.warning(f"Horizontal scroll ({action.scroll_x}) is not supported; ignoring it")

        if action.scroll_y < 0:
            self._session.scroll("up", abs(action.scroll_y))
        elif action.scroll_y > 0:
            self._session.scroll("down", action.scroll_y)

    def _handle_drag(self, action: DragAction) -> None:
        # Only the endpoints are replayed; waypoints are dropped
        if len(action.path) > 2:
            logger.debug(f"Drag path has {len(action.path) - 2} waypoint(s); using endpoints only")

        first, last = action.path[0], action.path[-1]
        self._session.drag(self._to_desktop(first.x, first.y), self._to_desktop(last.x, last.y))
