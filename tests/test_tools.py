import pytest

from cua_remote.agent.cancellation import CancellationToken
from cua_remote.errors import PlanningQuotaExceeded
from cua_remote.schemas.events import EventType
from cua_remote.schemas.tasks import InstructionRequest
from cua_remote.sessions.registry import SessionRegistry
from cua_remote.tools.computer_tools import ComputerTools
from cua_remote.tools.instruction_tools import InstructionTools
from cua_remote.utils import constants

from .conftest import FakeDesktopSession, FakePlanner, action_response, final_response


@pytest.fixture
def hidpi_registry():
    registry = SessionRegistry()
    session = FakeDesktopSession((3840, 2160), session_id="sbx")
    registry.register(session, resolution=(3840, 2160))
    return registry, session


# ── direct actions ──────────────────────────────────────────


def test_direct_actions_use_desktop_coordinates(hidpi_registry):
    registry, session = hidpi_registry
    result = ComputerTools(registry).execute_action("sbx", {"type": "click", "x": 3000, "y": 2000})
    assert result.success
    assert session.calls == [("left_click", 3000, 2000)]
    assert (result.screenshot.width, result.screenshot.height) == (3840, 2160)
    assert result.message == "Successfully executed click action"


def test_unknown_sandbox_is_reported():
    result = ComputerTools(SessionRegistry()).execute_action("nope", {"type": "wait"})
    assert not result.success
    assert "not found" in result.message


def test_unsupported_action_is_reported(hidpi_registry):
    registry, session = hidpi_registry
    result = ComputerTools(registry).execute_action("sbx", {"type": "teleport"})
    assert not result.success
    assert session.calls == []


def test_post_action_screenshot_is_best_effort(hidpi_registry):
    registry, session = hidpi_registry
    session.fail_screenshot_after = 0
    result = ComputerTools(registry).execute_action("sbx", {"type": "type", "text": "hi"})
    assert result.success
    assert result.screenshot is None
    assert session.calls == [("write", "hi")]


def test_screenshot_action_skips_post_capture(hidpi_registry):
    registry, session = hidpi_registry
    result = ComputerTools(registry).execute_action("sbx", {"type": "screenshot"})
    assert result.success
    assert session.screenshot_calls == 0


def test_dimensions(hidpi_registry):
    registry, session = hidpi_registry
    tools = ComputerTools(registry)
    assert tools.get_dimensions("sbx") == (3840, 2160)
    session.fail_screenshot_after = 0
    assert tools.get_dimensions("sbx") is None
    assert tools.get_dimensions("missing") is None


# ── natural-language instructions ───────────────────────────


def test_instruction_runs_the_loop(hidpi_registry):
    registry, session = hidpi_registry
    planner = FakePlanner(
        [
            action_response("r1", {"type": "click", "x": 10, "y": 10}, message="Opening menu"),
            final_response("r2", "Menu is open"),
        ]
    )
    seen = []
    result = InstructionTools(registry, planner).run_instruction(
        InstructionRequest(session_id="sbx", instruction="Open the menu"), sink=seen.append
    )

    assert result.success
    assert result.stop_reason == "completed"
    assert result.reasoning == ["Opening menu", "Menu is open"]
    assert result.actions == [{"type": "click", "x": 10, "y": 10}]
    assert (result.final_screenshot.width, result.final_screenshot.height) == (1920, 1080)
    assert session.calls == [("left_click", 20, 20)]
    assert planner.requests[0]["display"] == (1920, 1080)
    assert seen[-1].type == EventType.DONE
    assert not registry.get("sbx").leased


def test_request_resolution_overrides_registry(hidpi_registry):
    registry, _ = hidpi_registry
    planner = FakePlanner([final_response("r1", "nothing to do")])
    InstructionTools(registry, planner).run_instruction(
        InstructionRequest(session_id="sbx", instruction="noop", resolution=(1920, 1080))
    )
    assert planner.requests[0]["display"] == (1920, 1080)


def test_planner_error_fails_the_instruction(hidpi_registry):
    registry, _ = hidpi_registry
    planner = FakePlanner([PlanningQuotaExceeded("429")])
    result = InstructionTools(registry, planner).run_instruction(
        InstructionRequest(session_id="sbx", instruction="anything")
    )
    assert not result.success
    assert constants.QUOTA_EXCEEDED_MESSAGE in result.message
    assert result.stop_reason == "errored"


def test_busy_session_is_refused(hidpi_registry):
    registry, _ = hidpi_registry
    planner = FakePlanner([])
    with registry.lease("sbx"):
        result = InstructionTools(registry, planner).run_instruction(
            InstructionRequest(session_id="sbx", instruction="anything")
        )
    assert not result.success
    assert planner.requests == []


def test_unknown_session_is_refused():
    result = InstructionTools(SessionRegistry(), FakePlanner([])).run_instruction(
        InstructionRequest(session_id="missing", instruction="anything")
    )
    assert not result.success
    assert "not found" in result.message


def test_time_limit_stops_the_loop(hidpi_registry):
    registry, session = hidpi_registry
    token = CancellationToken()
    # The planner "thinks" until the caller's timer fires
    planner = FakePlanner(
        [action_response("r1", {"type": "click", "x": 1, "y": 1})],
        on_plan=lambda n: token.wait(5),
    )
    result = InstructionTools(registry, planner).run_instruction(
        InstructionRequest(session_id="sbx", instruction="slow", timeout=0.05), cancel_token=token
    )
    assert result.success
    assert result.stop_reason == "timed_out"
    assert result.message == constants.TIMED_OUT_MESSAGE
    assert session.calls == []


def test_empty_instruction_rejected():
    with pytest.raises(ValueError):
        InstructionRequest(session_id="sbx", instruction="   ")
