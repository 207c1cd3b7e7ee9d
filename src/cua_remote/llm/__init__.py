"""Planner module for cua-remote."""

from .base import ActionPlanner, ComputerCall, LLMInfo, PlanningResponse
from .prompt_templates import INSTRUCTIONS, build_call_output, build_computer_tool, build_initial_input
from .responses_planner import ResponsesPlanner, parse_response

__all__ = [
    "ActionPlanner",
    "ComputerCall",
    "LLMInfo",
    "PlanningResponse",
    "INSTRUCTIONS",
    "build_call_output",
    "build_computer_tool",
    "build_initial_input",
    "ResponsesPlanner",
    "parse_response",
]
