"""
Pydantic models defining the contracts between the runner and its collaborators.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import OutputKind

# ============================================================================
# Agent Definition Contracts
# ============================================================================


class MemoryConfig(BaseModel):
    """Memory backend selection for an agent."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1, description="Memory factory registry key")


class ToolStep(BaseModel):
    """One tool invocation within a flow agent."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "retrieve",
                "type": "search_index",
                "parameters": {"index": "docs", "query": "${parameters.question}"},
                "include_output_in_agent_response": True,
            }
        },
    )

    name: str = Field(..., min_length=1, description="Step label, used as the result/context key")
    type: str = Field(..., min_length=1, description="Tool registry key")
    description: str | None = None
    parameters: dict[str, str] = Field(
        default_factory=dict, description="Static parameters declared by the step"
    )
    include_output_in_agent_response: bool = Field(
        default=False, description="Surface this step's result in the agent response"
    )

    @model_validator(mode="before")
    @classmethod
    def default_name_to_type(cls, data: Any) -> Any:
        """A step without a name is labelled by its tool type."""
        if isinstance(data, dict) and not data.get("name") and data.get("type"):
            data = {**data, "name": data["type"]}
        return data

    @field_validator("parameters", mode="before")
    @classmethod
    def stringify_parameters(cls, v: Any) -> Any:
        """Static parameters are strings; YAML numbers and booleans are converted."""
        if isinstance(v, dict):
            return {str(k): val if isinstance(val, str) else str(val) for k, val in v.items()}
        return v


class AgentDefinition(BaseModel):
    """Declarative flow agent: ordered tool steps plus optional memory."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(default="flow", description="Agent type; only flow agents are run here")
    description: str | None = None
    tools: list[ToolStep] = Field(default_factory=list)
    memory: MemoryConfig | None = None


# ============================================================================
# Tool Output Contracts
# ============================================================================


class ScalarOutput(BaseModel):
    """Plain text or any other opaque tool result."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal[OutputKind.SCALAR] = Field(default=OutputKind.SCALAR, exclude=True)
    value: Any = None


class ResultRecord(BaseModel):
    """A single named result produced by a tool."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[OutputKind.RECORD] = Field(default=OutputKind.RECORD, exclude=True)
    name: str | None = None
    result: str | None = None
    data_as_map: dict[str, Any] | None = None


class RecordGroup(BaseModel):
    """A flat group of result records."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[OutputKind.GROUP] = Field(default=OutputKind.GROUP, exclude=True)
    records: list[ResultRecord] = Field(default_factory=list)


class RecordGroupCollection(BaseModel):
    """A collection of record groups, e.g. the full output of a model call."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[OutputKind.COLLECTION] = Field(default=OutputKind.COLLECTION, exclude=True)
    groups: list[RecordGroup] = Field(default_factory=list)

    def flatten(self) -> list[ResultRecord]:
        """All records of all groups, in order."""
        return [record for group in self.groups for record in group.records]


ToolOutput = Union[ScalarOutput, ResultRecord, RecordGroup, RecordGroupCollection]


# ============================================================================
# Run Outcome Contracts
# ============================================================================


class StepResult(BaseModel):
    """Normalized result of one step."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Declared step name")
    result: str = Field(..., description="Normalized string form of the tool result")
