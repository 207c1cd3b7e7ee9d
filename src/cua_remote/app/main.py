"""
main.py - Entry point for cua-remote
"""

from __future__ import annotations

import argparse
import base64
import json
import sys
import threading
from pathlib import Path
from typing import List, Optional

from ..agent.cancellation import CancellationToken
from ..errors import CUAError
from ..llm.responses_planner import ResponsesPlanner
from ..perception.resolution import ResolutionBounds
from ..schemas.events import EventType, LoopEvent
from ..schemas.tasks import InstructionRequest, InstructionResult
from ..sessions.registry import SessionRegistry
from ..tools.computer_tools import ComputerTools
from ..tools.instruction_tools import InstructionTools
from ..utils.config import Settings, load_settings
from ..utils.logger import set_level


def _parse_resolution(value: str):
    try:
        width, height = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="cua-remote CLI")
    parser.add_argument("--config", type=str, default=None, help="Path to a settings YAML file")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Carry out a natural-language instruction")
    run.add_argument("sandbox_id", type=str, help="Id of a running desktop sandbox")
    run.add_argument("instruction", type=str, help="What the agent should do")
    run.add_argument("--model", type=str, default=None, help="LiteLLM model string")
    run.add_argument("--timeout", type=float, default=None, help="Time limit in seconds")
    run.add_argument(
        "--resolution", type=_parse_resolution, default=None,
        help="Desktop resolution as WIDTHxHEIGHT (probed when omitted)",
    )

    shot = sub.add_parser("screenshot", help="Save a full-resolution screenshot")
    shot.add_argument("sandbox_id", type=str)
    shot.add_argument("--out", type=str, default="screenshot.png")

    action = sub.add_parser("action", help="Run one action given as JSON (desktop coordinates)")
    action.add_argument("sandbox_id", type=str)
    action.add_argument("action_json", type=str, help='e.g. \'{"type": "click", "x": 10, "y": 20}\'')

    return parser


def print_event(event: LoopEvent) -> None:
    if event.type == EventType.REASONING and event.content:
        print(f"💭 {event.content}")
    elif event.type == EventType.ACTION:
        print(f"🖱️  {json.dumps(event.action)}")
    elif event.type == EventType.ACTION_COMPLETED:
        print("   ✔ done")
    elif event.type == EventType.DONE:
        print(f"🏁 {event.content or 'Finished'}")
    elif event.type == EventType.ERROR:
        print(f"❌ {event.content}")


def wait_for_worker(worker: threading.Thread, token: CancellationToken, poll: float = 0.5) -> None:
    """Join the worker; Ctrl-C cancels the run, repeated Ctrl-C keeps waiting."""
    while worker.is_alive():
        try:
            worker.join(timeout=poll)
        except KeyboardInterrupt:
            if token.is_set():
                print("\n⏳ Already stopping, waiting for the current step to finish...")
            else:
                print("\n🛑 Stopping after the current step...")
                token.cancel()


def run_instruction(settings: Settings, args: argparse.Namespace, registry: SessionRegistry) -> int:
    planner = ResponsesPlanner(
        api_key=settings.openai_api_key,
        model=args.model or settings.model,
        instructions=settings.instructions,
        environment=settings.environment,
        reasoning_effort=settings.reasoning_effort,
        request_timeout=settings.request_timeout,
    )
    tools = InstructionTools(
        registry,
        planner,
        bounds=ResolutionBounds.from_pairs(settings.min_resolution, settings.max_resolution),
        strict_scaling=settings.strict_scaling,
    )
    request = InstructionRequest(
        session_id=args.sandbox_id,
        instruction=args.instruction,
        resolution=args.resolution,
        timeout=args.timeout or settings.instruction_timeout,
    )

    print(f"🤖 Using model: {planner.info().model}")
    print(f"🚀 Starting: {args.instruction}")
    print("-" * 50)

    token = CancellationToken()
    outcome: List[InstructionResult] = []
    worker = threading.Thread(
        target=lambda: outcome.append(tools.run_instruction(request, token, sink=print_event)),
        daemon=True,
    )
    worker.start()
    wait_for_worker(worker, token)

    print("-" * 50)
    if not outcome:
        print("💥 Instruction run did not produce a result")
        return 1
    result = outcome[0]
    print(f"{'✅' if result.success else '❌'} {result.message}")
    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except CUAError as e:
        print(f"Error: {e}")
        return 2
    set_level(args.log_level or settings.log_level)

    registry = SessionRegistry(e2b_api_key=settings.e2b_api_key)
    try:
        registry.connect(args.sandbox_id, resolution=getattr(args, "resolution", None))

        if args.command == "run":
            return run_instruction(settings, args, registry)

        tools = ComputerTools(registry)
        if args.command == "screenshot":
            shot = tools.take_screenshot(args.sandbox_id)
            Path(args.out).write_bytes(base64.b64decode(shot.base64))
            print(f"📸 Saved {shot.width}x{shot.height} screenshot to {args.out}")
            return 0

        try:
            action = json.loads(args.action_json)
        except json.JSONDecodeError as e:
            print(f"Error parsing action JSON: {e}")
            return 2
        result = tools.execute_action(args.sandbox_id, action)
        print(f"{'✅' if result.success else '❌'} {result.message}")
        return 0 if result.success else 1

    except (CUAError, ValueError) as e:
        print(f"\n💥 Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
