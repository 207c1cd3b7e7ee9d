"""
instruction_tools.py - Natural-language instructions
====================================================
Wires a registered session into a StreamingActionLoop, owns the time limit,
and folds the loop's events into one InstructionResult.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..agent.cancellation import CancellationToken
from ..agent.loop import StreamingActionLoop, collect_reasoning
from ..errors import CUAError, RemoteSessionError
from ..execution.action_executor import ActionExecutor
from ..llm.base import ActionPlanner
from ..perception.resolution import ResolutionBounds, ResolutionScaler
from ..perception.screenshot import ScreenshotTranscoder, describe
from ..schemas.events import EventLog, EventSink, EventType, StopReason
from ..schemas.tasks import InstructionRequest, InstructionResult, ScreenshotResult
from ..sessions.registry import SessionRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class InstructionTools:
    """
    USAGE:
        tools = InstructionTools(registry, planner)
        result = tools.run_instruction(InstructionRequest(
            session_id="sandbox-id", instruction="Open Firefox",
        ))
    """

    def __init__(
        self,
        registry: SessionRegistry,
        planner: ActionPlanner,
        bounds: ResolutionBounds = ResolutionBounds(),
        strict_scaling: bool = False,
        loop_factory: Callable[..., StreamingActionLoop] = StreamingActionLoop,
    ):
        self._registry = registry
        self._planner = planner
        self._bounds = bounds
        self._strict = strict_scaling
        self._loop_factory = loop_factory

    def run_instruction(
        self,
        request: InstructionRequest,
        cancel_token: Optional[CancellationToken] = None,
        sink: Optional[EventSink] = None,
    ) -> InstructionResult:
        try:
            with self._registry.lease(request.session_id) as entry:
                resolution = request.resolution or entry.resolution
                logger.info(
                    f'Executing natural language action on sandbox {request.session_id}: '
                    f'"{request.instruction}"'
                )
                scaler = ResolutionScaler(resolution, bounds=self._bounds, strict=self._strict)
                transcoder = ScreenshotTranscoder(entry.session, scaler)
                events = EventLog(forward=sink)
                loop = self._loop_factory(
                    self._planner, ActionExecutor(entry.session, scaler), transcoder, events
                )

                token = cancel_token or CancellationToken()
                timer = token.start_timer(request.timeout)
                try:
                    state = loop.run(request.instruction, request.messages, token)
                finally:
                    timer.cancel()

                final_screenshot = self._final_screenshot(transcoder)
        except CUAError as e:
            return InstructionResult(success=False, message=str(e))

        terminal = events.terminal
        result = InstructionResult(
            success=terminal is not None and terminal.type != EventType.ERROR,
            message="",
            reasoning=collect_reasoning(events.events),
            actions=[e.action for e in events.of_type(EventType.ACTION) if e.action],
            final_screenshot=final_screenshot,
            stop_reason=state.stop_reason.value if state.stop_reason else None,
        )
        if not result.success:
            result.message = f"AI service error: {terminal.content if terminal else 'no result'}"
        elif state.stop_reason in (StopReason.CANCELLED, StopReason.TIMED_OUT):
            result.message = terminal.content or "Stopped"
        else:
            result.message = (
                f'Successfully executed natural language instruction: "{request.instruction}"'
            )
        return result

    def _final_screenshot(self, transcoder: ScreenshotTranscoder) -> Optional[ScreenshotResult]:
        try:
            return describe(transcoder.take_screenshot())
        except RemoteSessionError as e:
            logger.warning(f"Failed to take final screenshot: {e}")
            return None
