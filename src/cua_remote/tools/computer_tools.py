"""
computer_tools.py - Direct computer actions
===========================================
Runs one caller-supplied action on a registered session. Coordinates are
already in desktop space, so no scaling is applied.

Failures come back as ActionResult(success=False) rather than exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from ..errors import CUAError, RemoteSessionError
from ..execution.action_executor import ActionExecutor
from ..perception.resolution import ResolutionScaler
from ..perception.screenshot import describe
from ..schemas.actions import ActionBase
from ..schemas.tasks import ActionResult, ScreenshotResult
from ..sessions.registry import SessionRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ComputerTools:
    def __init__(self, registry: SessionRegistry):
        self._registry = registry

    def execute_action(
        self, session_id: str, action: Union[ActionBase, Dict[str, Any]]
    ) -> ActionResult:
        action_data = action.model_dump() if isinstance(action, ActionBase) else dict(action)
        action_type = action_data.get("type", "unknown")

        entry = self._registry.find(session_id)
        if entry is None:
            return ActionResult(
                success=False,
                message=f"Sandbox {session_id} not found. Please create a sandbox first.",
                action=action_data,
            )

        logger.info(f"Executing {action_type} action on sandbox {session_id}")
        executor = ActionExecutor(entry.session, ResolutionScaler.identity(entry.resolution))
        try:
            executor.execute(action_data)
        except CUAError as e:
            logger.error(f"Failed to execute {action_type} action: {e}")
            return ActionResult(success=False, message=str(e), action=action_data)

        screenshot: Optional[ScreenshotResult] = None
        if action_type != "screenshot":
            try:
                screenshot = self.take_screenshot(session_id)
            except RemoteSessionError as e:
                # The action already happened; a missing screenshot does not undo it
                logger.warning(f"Failed to take post-action screenshot: {e}")

        return ActionResult(
            success=True,
            message=f"Successfully executed {action_type} action",
            action=action_data,
            screenshot=screenshot,
        )

    def take_screenshot(self, session_id: str) -> ScreenshotResult:
        """Full-resolution screenshot. Raises SessionNotFoundError / RemoteSessionError."""
        entry = self._registry.get(session_id)
        logger.debug(f"Taking screenshot of sandbox {session_id}")
        return describe(entry.session.screenshot())

    def get_dimensions(self, session_id: str) -> Optional[Tuple[int, int]]:
        try:
            shot = self.take_screenshot(session_id)
        except CUAError as e:
            logger.error(f"Failed to get sandbox dimensions: {e}")
            return None
        return shot.width, shot.height
