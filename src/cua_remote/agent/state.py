"""
Loop state tracking for the streaming action loop.
Tracks the transcript, the continuation token and per-step records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..schemas.events import StopReason


class LoopStatus(Enum):
    """Where the loop is in its Planning -> Executing -> Capturing cycle."""

    IDLE = "idle"
    PLANNING = "planning"
    EXECUTING = "executing"
    CAPTURING = "capturing"
    DONE = "done"
    CANCELLED = "cancelled"
    ERRORED = "errored"


TERMINAL_STATUSES = (LoopStatus.DONE, LoopStatus.CANCELLED, LoopStatus.ERRORED)


@dataclass
class StepRecord:
    """Record of one executed action."""

    step: int
    call_id: str
    action_type: str
    action_data: Dict[str, Any]
    reasoning: Optional[str] = None
    screenshot_captured: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "call_id": self.call_id,
            "action_type": self.action_type,
            "action": self.action_data,
            "reasoning": self.reasoning,
            "screenshot_captured": self.screenshot_captured,
        }


@dataclass
class LoopState:
    """
    Everything one loop invocation owns. Never shared between loops.

    ``continuation_token`` is the planner's last response id; sending it
    with the next request lets the planner resume without the full history.
    """

    instruction: str
    status: LoopStatus = LoopStatus.IDLE
    transcript: List[Dict[str, Any]] = field(default_factory=list)
    continuation_token: Optional[str] = None
    history: List[StepRecord] = field(default_factory=list)
    final_text: Optional[str] = None
    stop_reason: Optional[StopReason] = None
    error: Optional[Exception] = None

    @property
    def step_count(self) -> int:
        return len(self.history)

    def add_step(self, record: StepRecord) -> None:
        self.history.append(record)

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition(self, status: LoopStatus) -> None:
        if self.is_terminal():
            raise RuntimeError(f"Loop already finished ({self.status.value})")
        self.status = status

    def mark_done(self, final_text: Optional[str] = None) -> None:
        self.transition(LoopStatus.DONE)
        self.final_text = final_text
        self.stop_reason = StopReason.COMPLETED

    def mark_cancelled(self, reason: StopReason = StopReason.CANCELLED) -> None:
        self.transition(LoopStatus.CANCELLED)
        self.stop_reason = reason

    def mark_errored(self, error: Exception) -> None:
        self.transition(LoopStatus.ERRORED)
        self.error = error
        self.stop_reason = StopReason.ERRORED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instruction": self.instruction,
            "status": self.status.value,
            "continuation_token": self.continuation_token,
            "step_count": self.step_count,
            "final_text": self.final_text,
            "stop_reason": self.stop_reason.value if self.stop_reason else None,
            "error": str(self.error) if self.error else None,
            "history": [step.to_dict() for step in self.history],
        }
