"""
Pydantic models and schemas for the flowchain runner.
"""

from .context import ExecutionContext, output_key
from .contracts import (
    AgentDefinition,
    MemoryConfig,
    RecordGroup,
    RecordGroupCollection,
    ResultRecord,
    ScalarOutput,
    StepResult,
    ToolOutput,
    ToolStep,
)
from .enums import (
    LogLevel,
    OutputKind,
    RunState,
    UnknownToolPolicy,
)

__all__ = [
    "AgentDefinition",
    "ToolStep",
    "MemoryConfig",
    "StepResult",
    "ScalarOutput",
    "ResultRecord",
    "RecordGroup",
    "RecordGroupCollection",
    "ToolOutput",
    "ExecutionContext",
    "output_key",
    "LogLevel",
    "OutputKind",
    "RunState",
    "UnknownToolPolicy",
]
