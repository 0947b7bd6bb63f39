"""
Unit tests for agent definition and run parameter loading.
"""

import json

import pytest

from flowchain.core.loader import load_agent_definition, parse_agent_definition, parse_parameters
from flowchain.exceptions import AgentDefinitionError, ConfigurationError

AGENT_YAML = """
name: research
description: Retrieve then answer
memory:
  type: conversation_index
tools:
  - name: retrieve
    type: search_index
    parameters:
      index: docs
      size: 5
  - type: answer
    include_output_in_agent_response: true
    parameters:
      input: "${parameters.retrieve.output}"
"""


class TestLoadAgentDefinition:
    """Tests for load_agent_definition()."""

    def test_yaml_definition(self, tmp_path):
        path = tmp_path / "agent.yaml"
        path.write_text(AGENT_YAML)

        agent = load_agent_definition(path)

        assert agent.name == "research"
        assert agent.type == "flow"
        assert agent.memory.type == "conversation_index"
        assert [step.name for step in agent.tools] == ["retrieve", "answer"]
        assert agent.tools[1].include_output_in_agent_response is True
        assert agent.tools[1].parameters == {"input": "${parameters.retrieve.output}"}

    def test_yaml_scalars_become_strings(self, tmp_path):
        path = tmp_path / "agent.yml"
        path.write_text(AGENT_YAML)

        agent = load_agent_definition(path)

        assert agent.tools[0].parameters == {"index": "docs", "size": "5"}

    def test_json_definition(self, tmp_path):
        path = tmp_path / "agent.json"
        path.write_text(json.dumps({"name": "echoer", "tools": [{"type": "echo"}]}))

        agent = load_agent_definition(str(path))

        assert agent.name == "echoer"
        assert agent.memory is None
        assert agent.tools[0].name == "echo"

    def test_missing_file(self, tmp_path):
        with pytest.raises(AgentDefinitionError) as exc_info:
            load_agent_definition(tmp_path / "missing.yaml")

        assert "Cannot read agent definition" in exc_info.value.message

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "agent.yaml"
        path.write_text("name: [unclosed")

        with pytest.raises(AgentDefinitionError) as exc_info:
            load_agent_definition(path)

        assert "Cannot parse agent definition" in exc_info.value.message

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "agent.json"
        path.write_text("{not json")

        with pytest.raises(AgentDefinitionError):
            load_agent_definition(path)


class TestParseAgentDefinition:
    """Tests for parse_agent_definition()."""

    def test_non_mapping_rejected(self):
        with pytest.raises(AgentDefinitionError) as exc_info:
            parse_agent_definition(["not", "a", "mapping"], source="inline")

        assert "must be a mapping" in exc_info.value.message
        assert isinstance(exc_info.value, ConfigurationError)

    def test_validation_errors_are_wrapped(self):
        with pytest.raises(AgentDefinitionError) as exc_info:
            parse_agent_definition({"tools": []}, source="inline")

        assert "Invalid agent definition in inline" in exc_info.value.message

    def test_step_without_type_rejected(self):
        with pytest.raises(AgentDefinitionError):
            parse_agent_definition({"name": "a", "tools": [{"name": "nameless"}]})

    def test_zero_tools_is_a_valid_definition(self):
        agent = parse_agent_definition({"name": "empty"})

        assert agent.tools == []


class TestParseParameters:
    """Tests for parse_parameters()."""

    def test_pairs(self):
        assert parse_parameters(["question=why", "memory_id=m-1"]) == {
            "question": "why",
            "memory_id": "m-1",
        }

    def test_value_may_contain_equals(self):
        assert parse_parameters(["filter=a=b"]) == {"filter": "a=b"}

    def test_empty_value(self):
        assert parse_parameters(["key="]) == {"key": ""}

    def test_later_pairs_win(self):
        assert parse_parameters(["k=1", "k=2"]) == {"k": "2"}

    @pytest.mark.parametrize("pair", ["novalue", "=value", " =value"])
    def test_invalid_pairs(self, pair):
        with pytest.raises(ValueError):
            parse_parameters([pair])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
