from __future__ import annotations

import io
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from PIL import Image

from cua_remote.errors import RemoteSessionError
from cua_remote.execution.session import DesktopSession
from cua_remote.llm.base import ActionPlanner, ComputerCall, LLMInfo, PlanningResponse
from cua_remote.perception.resolution import Resolution


def make_png(width: int, height: int, color=(30, 120, 200), fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeDesktopSession(DesktopSession):
    """Records every call; serves a solid-colour frame at ``resolution``."""

    def __init__(self, resolution=(1920, 1080), session_id: str = "sbx-test"):
        self.session_id = session_id
        self.resolution = tuple(resolution)
        self.calls: List[Tuple[Any, ...]] = []
        self.screenshot_calls = 0
        self.fail_screenshot_after: Optional[int] = None
        self.fail_on: Optional[str] = None

    def _record(self, *call):
        if self.fail_on == call[0]:
            raise RemoteSessionError(f"{call[0]} rejected")
        self.calls.append(call)

    def left_click(self, x, y):
        self._record("left_click", x, y)

    def double_click(self, x, y):
        self._record("double_click", x, y)

    def right_click(self, x, y):
        self._record("right_click", x, y)

    def middle_click(self, x, y):
        self._record("middle_click", x, y)

    def move_mouse(self, x, y):
        self._record("move_mouse", x, y)

    def write(self, text):
        self._record("write", text)

    def press(self, keys):
        self._record("press", keys)

    def scroll(self, direction, amount):
        self._record("scroll", direction, amount)

    def drag(self, start, end):
        self._record("drag", tuple(start), tuple(end))

    def screenshot(self) -> bytes:
        self.screenshot_calls += 1
        if self.fail_screenshot_after is not None and self.screenshot_calls > self.fail_screenshot_after:
            raise RemoteSessionError("connection lost")
        return make_png(*self.resolution)


class FakePlanner(ActionPlanner):
    """Replays scripted responses (or raises scripted exceptions) in order."""

    def __init__(self, responses: List[Any], on_plan: Optional[Callable[[int], None]] = None):
        self._responses = list(responses)
        self._on_plan = on_plan
        self.requests: List[Dict[str, Any]] = []

    def info(self) -> LLMInfo:
        return LLMInfo(provider="fake", model="fake-cua")

    def plan(self, input_items, display: Resolution, previous_response_id=None) -> PlanningResponse:
        self.requests.append(
            {
                "input": input_items,
                "display": tuple(display),
                "previous_response_id": previous_response_id,
            }
        )
        if self._on_plan is not None:
            self._on_plan(len(self.requests))
        if not self._responses:
            raise AssertionError("FakePlanner ran out of scripted responses")
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


def action_response(response_id: str, *actions: Dict[str, Any], message: Optional[str] = None) -> PlanningResponse:
    calls = [ComputerCall(call_id=f"{response_id}-call{i}", action=a) for i, a in enumerate(actions)]
    return PlanningResponse(response_id=response_id, computer_calls=calls, message_text=message)


def final_response(response_id: str, text: str) -> PlanningResponse:
    return PlanningResponse(response_id=response_id, output_text=text, message_text=text)


@pytest.fixture
def session():
    return FakeDesktopSession()
