"""
Integration tests for flow agents running the example tools.

Tests cover:
- Output threading between steps through templated parameters
- Structured tool results
- Interaction history recorded after a run
- Listener reporting through execute()
"""

from unittest.mock import Mock

import pytest

from flowchain.core.loader import parse_agent_definition
from flowchain.core.memory import InMemoryMemoryFactory
from flowchain.core.registry import MemoryRegistry
from flowchain.core.runner import FlowAgentRunner
from flowchain.models.contracts import StepResult
from flowchain.tools.example_tools import build_default_registry

AGENT = {
    "name": "greeter",
    "memory": {"type": "conversation_index"},
    "tools": [
        {"name": "greet", "type": "echo", "parameters": {"input": "hello ${parameters.who}"}},
        {"name": "shout", "type": "uppercase", "parameters": {"input": "${parameters.greet.output}"}},
    ],
}


@pytest.fixture
def memory_factory():
    return InMemoryMemoryFactory()


@pytest.fixture
def flow_runner(memory_factory, config):
    memory_registry = MemoryRegistry({InMemoryMemoryFactory.type_name: memory_factory})
    return FlowAgentRunner(build_default_registry(), memory_registry, config=config)


@pytest.mark.integration
class TestFlowAgent:
    """End-to-end runs over the example tools."""

    @pytest.mark.asyncio
    async def test_outputs_thread_between_steps(self, flow_runner):
        agent = parse_agent_definition(AGENT)

        outcome = await flow_runner.run(agent, {"who": "world"})

        assert outcome == [StepResult(name="shout", result="HELLO WORLD")]

    @pytest.mark.asyncio
    async def test_included_steps_and_records(self, flow_runner):
        agent = parse_agent_definition({
            "name": "labelled",
            "tools": [
                {"name": "greet", "type": "echo", "include_output_in_agent_response": True,
                 "parameters": {"input": "hi"}},
                {"name": "wrap", "type": "record", "include_output_in_agent_response": True,
                 "parameters": {"label": "answer", "input": "${parameters.greet.output}"}},
            ],
        })

        outcome = await flow_runner.run(agent, {})

        assert outcome == [
            StepResult(name="greet", result="hi"),
            StepResult(name="wrap", result='{"name":"answer","result":"hi"}'),
        ]

    @pytest.mark.asyncio
    async def test_run_parameter_overrides_step(self, flow_runner):
        agent = parse_agent_definition(AGENT)

        outcome = await flow_runner.run(agent, {"who": "world", "shout.input": "quiet"})

        assert outcome[0].result == "QUIET"

    @pytest.mark.asyncio
    async def test_interaction_history_recorded(self, flow_runner, memory_factory):
        agent = parse_agent_definition(AGENT)
        params = {"who": "world", "memory_id": "m-1", "parent_interaction_id": "i-1"}

        await flow_runner.run(agent, params)
        responses = await flow_runner.wait_for_memory_updates()

        assert responses == ["i-1"]
        assert memory_factory.store == {
            "m-1": {"i-1": {"additional_info": {"shout.output": "HELLO WORLD"}}}
        }

    @pytest.mark.asyncio
    async def test_execute_reports_outcome(self, flow_runner):
        agent = parse_agent_definition(AGENT)
        listener = Mock()

        await flow_runner.execute(agent, {"who": "there"}, listener)

        listener.on_response.assert_called_once_with([StepResult(name="shout", result="HELLO THERE")])
        listener.on_failure.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
