"""
Request and result models for the tool layer.
Defines what callers send in and what they get back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..utils.constants import DEFAULT_INSTRUCTION_TIMEOUT


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class InstructionRequest:
    """A natural-language instruction to carry out on a live session."""

    session_id: str
    instruction: str
    messages: List[Dict[str, Any]] = field(default_factory=list)
    resolution: Optional[Tuple[int, int]] = None
    timeout: float = DEFAULT_INSTRUCTION_TIMEOUT

    def __post_init__(self):
        if not self.instruction.strip():
            raise ValueError("Instruction cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


@dataclass
class ScreenshotResult:
    base64: str
    format: str
    width: int
    height: int
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "base64": self.base64,
            "format": self.format,
            "width": self.width,
            "height": self.height,
            "timestamp": self.timestamp,
        }


@dataclass
class ActionResult:
    """Result of one directly executed action."""

    success: bool
    message: str
    action: Dict[str, Any]
    screenshot: Optional[ScreenshotResult] = None
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "action": self.action,
            "screenshot": self.screenshot.to_dict() if self.screenshot else None,
            "timestamp": self.timestamp,
        }


@dataclass
class InstructionResult:
    """Result of a natural-language instruction run."""

    success: bool
    message: str
    reasoning: List[str] = field(default_factory=list)
    actions: List[Dict[str, Any]] = field(default_factory=list)
    final_screenshot: Optional[ScreenshotResult] = None
    stop_reason: Optional[str] = None
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "reasoning": self.reasoning,
            "actions": self.actions,
            "final_screenshot": (
                self.final_screenshot.to_dict() if self.final_screenshot else None
            ),
            "stop_reason": self.stop_reason,
            "timestamp": self.timestamp,
        }
