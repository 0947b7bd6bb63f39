"""
Per-run execution state.

Each run owns exactly one ExecutionContext; it is never shared between runs.
"""

import uuid
from dataclasses import dataclass, field

from .contracts import StepResult
from .enums import RunState


@dataclass
class ExecutionContext:
    """
    Mutable state threaded through one flow run.

    Attributes:
        params: Initial parameters plus ``<step>.output`` entries written as steps complete
        outcome: Step results destined for the caller, in execution order
        state: Current lifecycle state
        step_index: Index of the step currently running (-1 before the first)
        run_id: Identifier used to correlate log events
    """

    params: dict[str, str]
    outcome: list[StepResult] = field(default_factory=list)
    state: RunState = RunState.IDLE
    step_index: int = -1
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def seed(cls, initial_params: dict[str, str] | None) -> "ExecutionContext":
        """Create a context from a copy of the caller's parameters."""
        return cls(params=dict(initial_params or {}))

    def record_output(self, result: StepResult) -> None:
        """Store a step's normalized result under ``<step>.output``."""
        self.params[output_key(result.name)] = result.result


def output_key(step_name: str) -> str:
    """Context key holding a step's normalized output."""
    return f"{step_name}.output"
