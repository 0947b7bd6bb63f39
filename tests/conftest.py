"""
Pytest configuration and shared fixtures.
"""

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
import structlog

from flowchain.core.config import FlowChainConfig, reset_config
from flowchain.core.registry import MemoryRegistry, ToolRegistry
from flowchain.core.runner import FlowAgentRunner
from flowchain.models.contracts import AgentDefinition, MemoryConfig, ToolStep

FIRST_TOOL = "firstTool"
SECOND_TOOL = "secondTool"
MEMORY_TYPE = "memoryType"


class RecordingTool:
    """Tool returning a fixed response (or raising it) and recording its parameters."""

    def __init__(self, response: Any, calls: list[dict[str, str]]):
        self.response = response
        self.calls = calls

    async def run(self, parameters: dict[str, str]) -> Any:
        self.calls.append(dict(parameters))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class RecordingToolFactory:
    """Factory for RecordingTools; remembers every creation and run."""

    def __init__(self, response: Any):
        self.response = response
        self.created: list[dict[str, str]] = []
        self.calls: list[dict[str, str]] = []

    def create(self, parameters: dict[str, str]) -> RecordingTool:
        self.created.append(dict(parameters))
        return RecordingTool(self.response, self.calls)


def _make_step(name: str, tool_type: str | None = None, **kwargs: Any) -> ToolStep:
    """Step whose type defaults to its name."""
    return ToolStep(name=name, type=tool_type or name, **kwargs)


def _make_agent(*steps: ToolStep, memory: bool = True) -> AgentDefinition:
    return AgentDefinition(
        name="TestAgent",
        tools=list(steps),
        memory=MemoryConfig(type=MEMORY_TYPE) if memory else None,
    )


@pytest.fixture
def make_step():
    return _make_step


@pytest.fixture
def make_agent():
    return _make_agent


@pytest.fixture(autouse=True)
def reset_global_state():
    """Each test starts from default structlog and configuration state."""
    reset_config()
    yield
    reset_config()
    structlog.reset_defaults()


@pytest.fixture
def config():
    return FlowChainConfig()


@pytest.fixture
def first_factory():
    return RecordingToolFactory("First tool response")


@pytest.fixture
def second_factory():
    return RecordingToolFactory("Second tool response")


@pytest.fixture
def tool_registry(first_factory, second_factory):
    return ToolRegistry({FIRST_TOOL: first_factory, SECOND_TOOL: second_factory})


@pytest.fixture
def memory():
    """Memory backend mock accepting any interaction update."""
    backend = Mock()
    backend.update_interaction = AsyncMock(return_value="updated")
    return backend


@pytest.fixture
def memory_factory(memory):
    factory = Mock()
    factory.create = AsyncMock(return_value=memory)
    return factory


@pytest.fixture
def memory_registry(memory_factory):
    return MemoryRegistry({MEMORY_TYPE: memory_factory})


@pytest.fixture
def runner(tool_registry, memory_registry, config):
    return FlowAgentRunner(tool_registry, memory_registry, config=config)


@pytest.fixture
def params():
    """Initial run parameters carrying a memory id."""
    return {"memory_id": "memoryId"}


@pytest.fixture
def recording_factory():
    """The RecordingToolFactory class, for tests building their own registries."""
    return RecordingToolFactory
