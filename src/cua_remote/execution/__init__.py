"""
execution - Remote desktop control
==================================

USAGE:
    from cua_remote.execution import ActionExecutor, E2BDesktopSession

    session = E2BDesktopSession.connect(sandbox_id, api_key=key)
    executor = ActionExecutor(session, scaler)
    executor.execute({"type": "click", "x": 10, "y": 20})
"""

from .action_executor import ActionExecutor
from .session import DesktopSession, E2BDesktopSession

__all__ = [
    "ActionExecutor",
    "DesktopSession",
    "E2BDesktopSession",
]
