"""
Example tool implementations for local runs and demonstrations.

Each tool reads its ``input`` parameter, which agents usually template from
earlier steps, e.g. ``input: "${parameters.fetch.output}"``.
"""

from ..models.contracts import ResultRecord
from ..core.registry import ToolRegistry


class EchoTool:
    """Returns its ``input`` parameter unchanged."""

    def __init__(self, parameters: dict[str, str]):
        self.parameters = parameters

    def run(self, parameters: dict[str, str]) -> str:
        return parameters.get("input", "")


class UppercaseTool:
    """Returns its ``input`` parameter upper-cased."""

    def __init__(self, parameters: dict[str, str]):
        self.parameters = parameters

    async def run(self, parameters: dict[str, str]) -> str:
        return parameters.get("input", "").upper()


class RecordTool:
    """
    Wraps ``input`` in a result record named after the ``label`` parameter.

    Demonstrates structured results: the step output is the record serialized
    as JSON, not the bare input.
    """

    def __init__(self, parameters: dict[str, str]):
        self.parameters = parameters

    async def run(self, parameters: dict[str, str]) -> ResultRecord:
        return ResultRecord(name=parameters.get("label", "record"), result=parameters.get("input", ""))


def build_default_registry() -> ToolRegistry:
    """Registry holding the example tools."""
    registry = ToolRegistry()
    registry.register_tool("echo")(EchoTool)
    registry.register_tool("uppercase")(UppercaseTool)
    registry.register_tool("record")(RecordTool)
    return registry
