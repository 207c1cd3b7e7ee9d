"""
session.py - Remote desktop capability
======================================
DesktopSession defines WHAT the remote desktop can do; E2BDesktopSession
defines HOW, by calling an E2B Desktop sandbox.

Every coordinate passed to a DesktopSession is in desktop (original) space.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple, TypeVar, Union

from e2b_desktop import Sandbox

from ..errors import RemoteSessionError
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Keys = Union[str, List[str]]


class DesktopSession(ABC):
    """
    Any remote desktop must implement this.
    Calls are real interactions with a live session: not idempotent.
    """

    session_id: str = ""

    @abstractmethod
    def left_click(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def double_click(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def right_click(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def middle_click(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def move_mouse(self, x: int, y: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def write(self, text: str) -> None:
        """Type literal text."""
        raise NotImplementedError

    @abstractmethod
    def press(self, keys: Keys) -> None:
        """Press a key or key combination, in the sandbox's own key vocabulary."""
        raise NotImplementedError

    @abstractmethod
    def scroll(self, direction: str, amount: int) -> None:
        """Scroll ``amount`` wheel clicks, direction is 'up' or 'down'."""
        raise NotImplementedError

    @abstractmethod
    def drag(self, start: Tuple[int, int], end: Tuple[int, int]) -> None:
        raise NotImplementedError

    @abstractmethod
    def screenshot(self) -> bytes:
        """Raw framebuffer image bytes at the desktop's true resolution."""
        raise NotImplementedError


class E2BDesktopSession(DesktopSession):
    """
    Drives an E2B Desktop sandbox.

    USAGE:
        session = E2BDesktopSession.connect("sandbox-id", api_key="e2b_...")
        session.left_click(100, 200)
        png = session.screenshot()

    Any failure raised by the SDK is re-raised as RemoteSessionError.
    """

    def __init__(self, sandbox: Any, session_id: Optional[str] = None):
        self._sandbox = sandbox
        self.session_id = session_id or getattr(sandbox, "sandbox_id", "")

    @classmethod
    def connect(cls, session_id: str, api_key: Optional[str] = None) -> "E2BDesktopSession":
        """Attach to an already running sandbox. Never creates one."""
        try:
            sandbox = Sandbox.connect(session_id, api_key=api_key)
        except Exception as e:
            raise RemoteSessionError(f"Failed to connect to sandbox {session_id}: {e}") from e
        logger.info(f"Connected to sandbox {session_id}")
        return cls(sandbox, session_id=session_id)

    @property
    def sandbox(self) -> Any:
        return self._sandbox

    def _call(self, name: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except Exception as e:
            raise RemoteSessionError(f"Sandbox {self.session_id}: {name} failed: {e}") from e

    def left_click(self, x: int, y: int) -> None:
        self._call("left_click", self._sandbox.left_click, x, y)

    def double_click(self, x: int, y: int) -> None:
        self._call("double_click", self._sandbox.double_click, x, y)

    def right_click(self, x: int, y: int) -> None:
        self._call("right_click", self._sandbox.right_click, x, y)

    def middle_click(self, x: int, y: int) -> None:
        self._call("middle_click", self._sandbox.middle_click, x, y)

    def move_mouse(self, x: int, y: int) -> None:
        self._call("move_mouse", self._sandbox.move_mouse, x, y)

    def write(self, text: str) -> None:
        self._call("write", self._sandbox.write, text)

    def press(self, keys: Keys) -> None:
        self._call("press", self._sandbox.press, keys)

    def scroll(self, direction: str, amount: int) -> None:
        self._call("scroll", self._sandbox.scroll, direction, amount)

    def drag(self, start: Tuple[int, int], end: Tuple[int, int]) -> None:
        self._call("drag", self._sandbox.drag, tuple(start), tuple(end))

    def screenshot(self) -> bytes:
        data = self._call("screenshot", self._sandbox.screenshot)
        if isinstance(data, str):
            raise RemoteSessionError(f"Sandbox {self.session_id}: screenshot returned text, expected bytes")
        return bytes(data)
