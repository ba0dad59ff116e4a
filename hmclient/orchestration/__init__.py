from __future__ import annotations

from .evaluation_loop import EvaluationLoop, LoopState, LoopSummary
from .run_lifecycle import RunResult, prepare_run, run_optimization

__all__ = [
    "EvaluationLoop",
    "LoopState",
    "LoopSummary",
    "RunResult",
    "prepare_run",
    "run_optimization",
]
