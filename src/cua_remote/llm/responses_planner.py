"""
responses_planner.py - Computer-use planner over the Responses API
==================================================================
Implements the ActionPlanner interface using LiteLLM's ``responses``
endpoint with the ``computer_use_preview`` tool. Conversation history lives
server-side; each request after the first sends only new items plus
``previous_response_id``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import litellm

from ..errors import PlanningQuotaExceeded, PlanningServiceError
from ..perception.resolution import Resolution
from ..utils import constants
from ..utils.logger import get_logger
from .base import ActionPlanner, ComputerCall, LLMInfo, PlanningResponse
from .prompt_templates import INSTRUCTIONS, build_computer_tool

logger = get_logger(__name__)


def _as_dict(item: Any) -> Dict[str, Any]:
    if isinstance(item, dict):
        return item
    if hasattr(item, "model_dump"):
        return item.model_dump(exclude_none=True)
    return dict(vars(item))


def _is_quota_error(error: Exception) -> bool:
    if isinstance(error, litellm.RateLimitError):
        return True
    return getattr(error, "status_code", None) == 429


def _message_text(item: Dict[str, Any]) -> str:
    content = item.get("content") or []
    if not content:
        return ""
    if isinstance(content[0], dict) and content[0].get("type") == "output_text":
        return content[0].get("text", "")
    return json.dumps(content)


def parse_response(response: Any) -> PlanningResponse:
    """Split a Responses API result into computer calls and text."""
    data = _as_dict(response)
    output = [_as_dict(item) for item in data.get("output") or []]

    calls: List[ComputerCall] = []
    message_text: Optional[str] = None
    texts: List[str] = []

    for item in output:
        item_type = item.get("type")
        if item_type == "computer_call":
            calls.append(
                ComputerCall(
                    call_id=item.get("call_id", ""),
                    action=_as_dict(item.get("action") or {}),
                    pending_safety_checks=[
                        _as_dict(c) for c in item.get("pending_safety_checks") or []
                    ],
                )
            )
        elif item_type == "message" and "content" in item:
            if message_text is None:
                message_text = _message_text(item)
            for part in item.get("content") or []:
                if isinstance(part, dict) and part.get("type") == "output_text":
                    texts.append(part.get("text", ""))

    output_text = data.get("output_text") or "".join(texts)
    return PlanningResponse(
        response_id=data.get("id", ""),
        computer_calls=calls,
        message_text=message_text,
        output_text=output_text,
    )


class ResponsesPlanner(ActionPlanner):
    """
    LiteLLM-based adapter for computer-use models.

    Credentials are passed in explicitly; nothing is read from or written
    to the process environment here.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = constants.DEFAULT_MODEL,
        instructions: Optional[str] = None,
        environment: str = constants.DEFAULT_ENVIRONMENT,
        reasoning_effort: str = constants.DEFAULT_REASONING_EFFORT,
        request_timeout: float = constants.DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Args:
            api_key: Provider API key (e.g. from Settings.openai_api_key).
            model: LiteLLM model string, e.g. 'openai/computer-use-preview'.
            instructions: System instructions; defaults to INSTRUCTIONS.
            environment: Environment hint for the computer tool.
            reasoning_effort: 'low', 'medium' or 'high'.
            request_timeout: Seconds before an in-flight request is abandoned.
        """
        self._api_key = api_key
        self._model = model
        self._instructions = instructions or INSTRUCTIONS
        self._environment = environment
        self._reasoning_effort = reasoning_effort
        self._timeout = request_timeout

    def info(self) -> LLMInfo:
        provider = self._model.split("/", 1)[0] if "/" in self._model else "openai"
        return LLMInfo(provider=provider, model=self._model)

    def plan(
        self,
        input_items: List[Dict[str, Any]],
        display: Resolution,
        previous_response_id: Optional[str] = None,
    ) -> PlanningResponse:
        tool = build_computer_tool(display[0], display[1], self._environment)
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "input": input_items,
            "instructions": self._instructions,
            "tools": [tool],
            "truncation": "auto",
            "reasoning": {"effort": self._reasoning_effort, "summary": "concise"},
            "timeout": self._timeout,
        }
        if previous_response_id:
            kwargs["previous_response_id"] = previous_response_id
        if self._api_key:
            kwargs["api_key"] = self._api_key

        try:
            response = litellm.responses(**kwargs)
        except Exception as e:
            if _is_quota_error(e):
                raise PlanningQuotaExceeded(f"Planner quota exceeded: {e}") from e
            raise PlanningServiceError(f"Planner request failed: {e}") from e

        try:
            parsed = parse_response(response)
        except (TypeError, ValueError, AttributeError) as e:
            raise PlanningServiceError(f"Unreadable planner response: {e}") from e

        logger.debug(
            f"Planner response {parsed.response_id}: "
            f"{len(parsed.computer_calls)} computer call(s)"
        )
        return parsed
