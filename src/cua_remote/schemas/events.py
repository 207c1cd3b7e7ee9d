"""
Notification records emitted by the action loop.

The loop only appends to a sink; turning these into SSE, MCP content or
console output is the caller's job.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    REASONING = "reasoning"
    ACTION = "action"
    ACTION_COMPLETED = "action_completed"
    DONE = "done"
    ERROR = "error"


class StopReason(str, Enum):
    """Why a loop ended. Only ERRORED is a failure."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


class ErrorKind(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    PLANNING_SERVICE = "planning_service"
    UNSUPPORTED_ACTION = "unsupported_action"
    REMOTE_SESSION = "remote_session"


class LoopEvent(BaseModel):
    type: EventType
    content: Optional[str] = None
    action: Optional[Dict[str, Any]] = None
    reason: Optional[StopReason] = None
    error_kind: Optional[ErrorKind] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.type in (EventType.DONE, EventType.ERROR)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


EventSink = Callable[[LoopEvent], None]


class EventLog:
    """Append-only sink that keeps every event in memory."""

    def __init__(self, forward: Optional[EventSink] = None):
        self.events: List[LoopEvent] = []
        self._forward = forward

    def __call__(self, event: LoopEvent) -> None:
        self.events.append(event)
        if self._forward is not None:
            self._forward(event)

    def of_type(self, event_type: EventType) -> List[LoopEvent]:
        return [e for e in self.events if e.type == event_type]

    @property
    def terminal(self) -> Optional[LoopEvent]:
        terminals = [e for e in self.events if e.is_terminal]
        return terminals[-1] if terminals else None
