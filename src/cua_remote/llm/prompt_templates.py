"""
Instructions and input builders for the computer-use planner.
Input items follow the Responses API shape (input_text / input_image /
computer_call_output).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


INSTRUCTIONS = """
You are an AI assistant that can use a computer to help the user with their tasks.
You can use the computer to search the web, write code, edit files, and more.

You are operating in a secure, isolated sandbox micro VM based on Ubuntu 22.04, so you can execute most commands and operations without worrying about security concerns.

The sandbox comes with many pre-installed applications including:
- Firefox browser
- Visual Studio Code
- LibreOffice suite
- Python 3 with common libraries
- Terminal with standard Linux utilities
- File manager (PCManFM)
- Text editor (Gedit)
- Calculator and other basic utilities

IMPORTANT: When typing commands in the terminal, ALWAYS send a KEYPRESS ENTER action immediately after typing the command to execute it. Terminal commands will not run until you press Enter.

IMPORTANT: When editing files, prefer to use Visual Studio Code (VS Code) as it provides a better editing experience.
"""


def build_computer_tool(display_width: int, display_height: int, environment: str = "linux") -> Dict[str, Any]:
    return {
        "type": "computer_use_preview",
        "display_width": display_width,
        "display_height": display_height,
        "environment": environment,
    }


def build_initial_input(
    instruction: str,
    screenshot_url: str,
    messages: Optional[Sequence[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """Prior turns + the instruction with the current screen inlined."""
    items: List[Dict[str, Any]] = [dict(m) for m in (messages or [])]
    items.append(
        {
            "role": "user",
            "content": [
                {"type": "input_text", "text": instruction},
                {"type": "input_image", "image_url": screenshot_url},
            ],
        }
    )
    return items


def build_call_output(
    call_id: str,
    screenshot_url: str,
    acknowledged_safety_checks: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Result of a computer call: the screen after the action ran."""
    item: Dict[str, Any] = {
        "type": "computer_call_output",
        "call_id": call_id,
        "output": {"type": "input_image", "image_url": screenshot_url},
    }
    if acknowledged_safety_checks:
        item["acknowledged_safety_checks"] = acknowledged_safety_checks
    return item
