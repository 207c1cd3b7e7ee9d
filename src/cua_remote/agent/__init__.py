from .cancellation import CancellationToken
from .loop import StreamingActionLoop, collect_reasoning
from .state import LoopState, LoopStatus, StepRecord

__all__ = [
    "CancellationToken",
    "StreamingActionLoop",
    "collect_reasoning",
    "LoopState",
    "LoopStatus",
    "StepRecord",
]
