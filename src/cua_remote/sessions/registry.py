"""
registry.py - Live desktop sessions
===================================
An explicit, owned registry of connected desktop sessions. It attaches to
sandboxes that already exist; creating and destroying them is somebody
else's job.

The registry is also where "one active loop per session" is enforced:
callers take a lease before driving a session.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence

from ..errors import SessionBusyError, SessionNotFoundError
from ..execution.session import DesktopSession, E2BDesktopSession
from ..perception.resolution import Resolution
from ..perception.screenshot import open_image
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SessionEntry:
    session_id: str
    session: DesktopSession
    resolution: Resolution
    registered_at: datetime = field(default_factory=datetime.now)
    leased: bool = False

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "resolution": list(self.resolution),
            "registered_at": self.registered_at.isoformat(),
            "uptime_seconds": (datetime.now() - self.registered_at).total_seconds(),
            "leased": self.leased,
        }


def probe_resolution(session: DesktopSession) -> Resolution:
    """Measure the desktop by decoding one raw screenshot."""
    image = open_image(session.screenshot())
    return Resolution(*image.size)


class SessionRegistry:
    """
    Thread-safe map of session id -> connected DesktopSession.

    USAGE:
        registry = SessionRegistry(e2b_api_key=settings.e2b_api_key)
        registry.connect("sandbox-id")
        with registry.lease("sandbox-id") as entry:
            ...drive entry.session...
    """

    def __init__(self, e2b_api_key: Optional[str] = None):
        self._e2b_api_key = e2b_api_key
        self._entries: Dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def register(
        self,
        session: DesktopSession,
        resolution: Optional[Sequence[int]] = None,
        session_id: Optional[str] = None,
    ) -> SessionEntry:
        """Add an already connected session; its resolution is probed if not given."""
        sid = session_id or session.session_id
        if not sid:
            raise ValueError("Session id is required")
        res = Resolution(*resolution) if resolution else probe_resolution(session)

        with self._lock:
            if sid in self._entries and self._entries[sid].leased:
                raise SessionBusyError(f"Session {sid} is in use and cannot be replaced")
            entry = SessionEntry(session_id=sid, session=session, resolution=res)
            self._entries[sid] = entry
        logger.info(f"Registered session {sid} at {res}")
        return entry

    def connect(self, session_id: str, resolution: Optional[Sequence[int]] = None) -> SessionEntry:
        """Return the registered entry, or attach to the running sandbox."""
        existing = self.find(session_id)
        if existing is not None:
            return existing
        session = E2BDesktopSession.connect(session_id, api_key=self._e2b_api_key)
        return self.register(session, resolution=resolution, session_id=session_id)

    def find(self, session_id: str) -> Optional[SessionEntry]:
        with self._lock:
            return self._entries.get(session_id)

    def get(self, session_id: str) -> SessionEntry:
        entry = self.find(session_id)
        if entry is None:
            raise SessionNotFoundError(
                f"Sandbox {session_id} not found. Please create a sandbox first."
            )
        return entry

    def remove(self, session_id: str) -> bool:
        """Forget a session (the sandbox itself keeps running)."""
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return False
            if entry.leased:
                raise SessionBusyError(f"Session {session_id} is in use")
            del self._entries[session_id]
        logger.info(f"Removed session {session_id}")
        return True

    def list_sessions(self) -> List[dict]:
        with self._lock:
            return [entry.to_dict() for entry in self._entries.values()]

    @contextmanager
    def lease(self, session_id: str) -> Iterator[SessionEntry]:
        """Hold a session exclusively for the duration of one loop."""
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                raise SessionNotFoundError(
                    f"Sandbox {session_id} not found. Please create a sandbox first."
                )
            if entry.leased:
                raise SessionBusyError(f"Session {session_id} is already driven by another loop")
            entry.leased = True
        try:
            yield entry
        finally:
            with self._lock:
                entry.leased = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return self.find(session_id) is not None
