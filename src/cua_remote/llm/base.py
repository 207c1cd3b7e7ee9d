from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..perception.resolution import Resolution


@dataclass
class LLMInfo:
    provider: str
    model: str


@dataclass
class ComputerCall:
    """One action the planner wants run, in model-space coordinates."""

    call_id: str
    action: Dict[str, Any]
    pending_safety_checks: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def action_type(self) -> str:
        return str(self.action.get("type", "UNKNOWN"))


@dataclass
class PlanningResponse:
    """
    What the planner returned for one request.

    ``response_id`` is the continuation token for the next request.
    """

    response_id: str
    computer_calls: List[ComputerCall] = field(default_factory=list)
    message_text: Optional[str] = None
    output_text: str = ""

    @property
    def is_terminal(self) -> bool:
        return not self.computer_calls


class ActionPlanner(ABC):
    """
    Every planning provider must implement this exact interface.
    The loop should not care which model is behind it.
    """

    @abstractmethod
    def info(self) -> LLMInfo:
        raise NotImplementedError

    @abstractmethod
    def plan(
        self,
        input_items: List[Dict[str, Any]],
        display: Resolution,
        previous_response_id: Optional[str] = None,
    ) -> PlanningResponse:
        """
        Input: new conversation items + the model-visible display size
               (+ the continuation token from the previous response)
        Output: a terminal answer or computer calls

        Raises PlanningQuotaExceeded / PlanningServiceError.
        """
        raise NotImplementedError
