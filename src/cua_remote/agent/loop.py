"""
Streaming action loop - the heart of cua-remote.
Implements PLANNING -> EXECUTING -> CAPTURING -> PLANNING until the planner
stops asking for actions, the caller cancels, or something fails.

Exactly one action runs per planner round-trip: every action is observed on
a fresh screenshot before the next one is planned.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..errors import (
    PlanningQuotaExceeded,
    PlanningServiceError,
    RemoteSessionError,
    UnsupportedAction,
)
from ..execution.action_executor import ActionExecutor
from ..llm.base import ActionPlanner, ComputerCall, PlanningResponse
from ..llm.prompt_templates import build_call_output, build_initial_input
from ..perception.screenshot import ScreenshotTranscoder, to_data_url
from ..schemas.events import ErrorKind, EventSink, EventType, LoopEvent, StopReason
from ..utils import constants
from ..utils.logger import get_logger
from .cancellation import CancellationToken
from .state import LoopState, LoopStatus, StepRecord

logger = get_logger(__name__)


def _discard(event: LoopEvent) -> None:
    pass


class StreamingActionLoop:
    """
    Drives one remote desktop from a planner, one action at a time.

    Every run ends with exactly one terminal event on the sink: ``done``
    (completed, cancelled or timed out) or ``error``.
    """

    def __init__(
        self,
        planner: ActionPlanner,
        executor: ActionExecutor,
        transcoder: ScreenshotTranscoder,
        sink: Optional[EventSink] = None,
    ):
        self._planner = planner
        self._executor = executor
        self._transcoder = transcoder
        self._sink = sink or _discard

    def run(
        self,
        instruction: str,
        messages: Optional[Sequence[Dict[str, Any]]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> LoopState:
        """Run until a terminal state and return the final LoopState."""
        state = LoopState(instruction=instruction)
        token = cancel_token or CancellationToken()
        display = self._transcoder.scaler.scaled_resolution

        try:
            if token.is_set():
                return self._stop(state, token)

            # First turn carries the instruction and the current screen
            screenshot = self._transcoder.take_screenshot()
            pending_input = build_initial_input(instruction, to_data_url(screenshot), messages)

            while True:
                if token.is_set():
                    return self._stop(state, token)

                state.transition(LoopStatus.PLANNING)
                state.transcript.extend(pending_input)
                response = self._planner.plan(
                    pending_input, display, previous_response_id=state.continuation_token
                )
                state.continuation_token = response.response_id
                self._record_response(state, response)

                # Cancelled while the planner was thinking: drop its action
                if token.is_set():
                    return self._stop(state, token)

                if response.is_terminal:
                    if response.output_text:
                        self._emit(EventType.REASONING, content=response.output_text)
                    state.mark_done(response.output_text)
                    self._emit(EventType.DONE, reason=StopReason.COMPLETED)
                    logger.info(f"Loop finished after {state.step_count} action(s)")
                    return state

                call = self._select_call(response)
                self._execute(state, call, response.message_text)

                state.transition(LoopStatus.CAPTURING)
                screenshot = self._transcoder.take_screenshot()
                state.history[-1].screenshot_captured = True
                pending_input = [
                    build_call_output(
                        call.call_id, to_data_url(screenshot), call.pending_safety_checks
                    )
                ]

        except PlanningQuotaExceeded as e:
            return self._fail(state, e, ErrorKind.QUOTA_EXCEEDED, constants.QUOTA_EXCEEDED_MESSAGE)
        except PlanningServiceError as e:
            return self._fail(state, e, ErrorKind.PLANNING_SERVICE, constants.SERVICE_ERROR_MESSAGE)
        except UnsupportedAction as e:
            return self._fail(state, e, ErrorKind.UNSUPPORTED_ACTION, f"Unsupported action: {e}")
        except RemoteSessionError as e:
            return self._fail(state, e, ErrorKind.REMOTE_SESSION, f"Remote desktop error: {e}")
        except Exception as e:
            # A sink failing on the terminal event itself has nothing left to report to
            if state.is_terminal():
                raise
            logger.exception("Unexpected failure in the action loop")
            return self._fail(state, e, ErrorKind.PLANNING_SERVICE, constants.SERVICE_ERROR_MESSAGE)

    # ─────────────────────────────────────────────────────────────
    # STEPS
    # ─────────────────────────────────────────────────────────────

    def _select_call(self, response: PlanningResponse) -> ComputerCall:
        if len(response.computer_calls) > 1:
            ignored = [c.action_type for c in response.computer_calls[1:]]
            logger.warning(f"Planner proposed {len(response.computer_calls)} calls; ignoring {ignored}")
        return response.computer_calls[0]

    def _execute(self, state: LoopState, call: ComputerCall, reasoning: Optional[str]) -> None:
        state.transition(LoopStatus.EXECUTING)
        if reasoning:
            self._emit(EventType.REASONING, content=reasoning)
        self._emit(EventType.ACTION, action=call.action)

        if call.pending_safety_checks:
            codes = [c.get("code", "") for c in call.pending_safety_checks]
            logger.warning(f"Acknowledging safety checks {codes} for call {call.call_id}")

        state.add_step(
            StepRecord(
                step=state.step_count + 1,
                call_id=call.call_id,
                action_type=call.action_type,
                action_data=call.action,
                reasoning=reasoning,
            )
        )
        logger.info(f"Step {state.step_count}: {call.action_type}")
        self._executor.execute(call.action)
        self._emit(EventType.ACTION_COMPLETED)

    def _record_response(self, state: LoopState, response: PlanningResponse) -> None:
        if response.output_text:
            state.transcript.append({"role": "assistant", "content": response.output_text})
        for call in response.computer_calls:
            state.transcript.append(
                {"type": "computer_call", "call_id": call.call_id, "action": call.action}
            )

    # ─────────────────────────────────────────────────────────────
    # TERMINAL PATHS
    # ─────────────────────────────────────────────────────────────

    def _stop(self, state: LoopState, token: CancellationToken) -> LoopState:
        reason = token.reason or StopReason.CANCELLED
        message = (
            constants.TIMED_OUT_MESSAGE
            if reason == StopReason.TIMED_OUT
            else constants.STOPPED_BY_USER_MESSAGE
        )
        state.mark_cancelled(reason)
        self._emit(EventType.DONE, content=message, reason=reason)
        logger.info(message)
        return state

    def _fail(self, state: LoopState, error: Exception, kind: ErrorKind, message: str) -> LoopState:
        logger.error(f"Loop errored ({kind.value}): {error}")
        state.mark_errored(error)
        self._emit(EventType.ERROR, content=message, reason=StopReason.ERRORED, error_kind=kind)
        return state

    def _emit(self, event_type: EventType, **fields: Any) -> None:
        self._sink(LoopEvent(type=event_type, **fields))


def collect_reasoning(events: List[LoopEvent]) -> List[str]:
    return [e.content for e in events if e.type == EventType.REASONING and e.content]
