import pytest

from cua_remote.errors import SessionBusyError, SessionNotFoundError
from cua_remote.execution.session import E2BDesktopSession
from cua_remote.sessions.registry import SessionRegistry

from .conftest import FakeDesktopSession


def test_register_with_known_resolution():
    registry = SessionRegistry()
    entry = registry.register(FakeDesktopSession(session_id="a"), resolution=(1024, 768))
    assert entry.resolution == (1024, 768)
    assert "a" in registry
    assert len(registry) == 1


def test_register_probes_resolution_when_missing():
    session = FakeDesktopSession((1366, 768), session_id="b")
    entry = SessionRegistry().register(session)
    assert entry.resolution == (1366, 768)
    assert session.screenshot_calls == 1


def test_get_unknown_session():
    with pytest.raises(SessionNotFoundError):
        SessionRegistry().get("missing")


def test_lease_is_exclusive_and_released():
    registry = SessionRegistry()
    registry.register(FakeDesktopSession(session_id="a"), resolution=(800, 600))

    with registry.lease("a") as entry:
        assert entry.leased
        with pytest.raises(SessionBusyError):
            with registry.lease("a"):
                pass
        with pytest.raises(SessionBusyError):
            registry.remove("a")

    assert not registry.get("a").leased

    with pytest.raises(RuntimeError):
        with registry.lease("a"):
            raise RuntimeError("loop blew up")
    assert not registry.get("a").leased


def test_lease_unknown_session():
    with pytest.raises(SessionNotFoundError):
        with SessionRegistry().lease("missing"):
            pass


def test_remove_and_list():
    registry = SessionRegistry()
    registry.register(FakeDesktopSession(session_id="a"), resolution=(800, 600))
    registry.register(FakeDesktopSession(session_id="b"), resolution=(1920, 1080))
    listed = {s["session_id"]: s for s in registry.list_sessions()}
    assert listed["b"]["resolution"] == [1920, 1080]
    assert registry.remove("a") is True
    assert registry.remove("a") is False
    assert [s["session_id"] for s in registry.list_sessions()] == ["b"]


def test_connect_attaches_with_explicit_key(monkeypatch):
    seen = {}

    def fake_connect(cls, session_id, api_key=None):
        seen["args"] = (session_id, api_key)
        return FakeDesktopSession((1280, 720), session_id=session_id)

    monkeypatch.setattr(E2BDesktopSession, "connect", classmethod(fake_connect))
    registry = SessionRegistry(e2b_api_key="e2b_test")

    entry = registry.connect("sbx-1")
    assert seen["args"] == ("sbx-1", "e2b_test")
    assert entry.resolution == (1280, 720)

    seen.clear()
    assert registry.connect("sbx-1") is entry
    assert seen == {}
