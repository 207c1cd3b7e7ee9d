"""Session registry for connected remote desktops."""

from .registry import SessionEntry, SessionRegistry, probe_resolution

__all__ = ["SessionEntry", "SessionRegistry", "probe_resolution"]
