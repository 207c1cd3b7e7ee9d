import pytest

from cua_remote.errors import RemoteSessionError
from cua_remote.execution import session as session_module
from cua_remote.execution.session import E2BDesktopSession


class FakeSandbox:
    sandbox_id = "sbx-42"

    def __init__(self):
        self.calls = []

    def left_click(self, x, y):
        self.calls.append(("left_click", x, y))

    def middle_click(self, x, y):
        self.calls.append(("middle_click", x, y))

    def scroll(self, direction, amount):
        self.calls.append(("scroll", direction, amount))

    def drag(self, fr, to):
        self.calls.append(("drag", fr, to))

    def press(self, key):
        self.calls.append(("press", key))

    def write(self, text):
        raise ConnectionError("sandbox went away")

    def screenshot(self):
        return bytearray(b"\x89PNG...")


def test_calls_are_forwarded():
    sandbox = FakeSandbox()
    session = E2BDesktopSession(sandbox)
    session.left_click(1, 2)
    session.middle_click(3, 4)
    session.scroll("up", 5)
    session.drag([1, 1], [9, 9])
    session.press(["CTRL", "C"])
    assert session.session_id == "sbx-42"
    assert sandbox.calls == [
        ("left_click", 1, 2),
        ("middle_click", 3, 4),
        ("scroll", "up", 5),
        ("drag", (1, 1), (9, 9)),
        ("press", ["CTRL", "C"]),
    ]


def test_screenshot_returns_bytes():
    data = E2BDesktopSession(FakeSandbox()).screenshot()
    assert isinstance(data, bytes)
    assert data.startswith(b"\x89PNG")


def test_sdk_failures_become_remote_session_errors():
    with pytest.raises(RemoteSessionError) as exc:
        E2BDesktopSession(FakeSandbox()).write("hello")
    assert "write failed" in str(exc.value)
    assert isinstance(exc.value.__cause__, ConnectionError)


def test_connect(monkeypatch):
    class FakeSandboxClass:
        @staticmethod
        def connect(sandbox_id, api_key=None):
            assert api_key == "e2b_key"
            return FakeSandbox()

    monkeypatch.setattr(session_module, "Sandbox", FakeSandboxClass)
    session = E2BDesktopSession.connect("sbx-42", api_key="e2b_key")
    assert session.session_id == "sbx-42"


def test_connect_failure(monkeypatch):
    class Unreachable:
        @staticmethod
        def connect(sandbox_id, api_key=None):
            raise TimeoutError("no route")

    monkeypatch.setattr(session_module, "Sandbox", Unreachable)
    with pytest.raises(RemoteSessionError):
        E2BDesktopSession.connect("sbx-x")
