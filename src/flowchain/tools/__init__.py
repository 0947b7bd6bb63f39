"""
Example tools for the flowchain runner.
"""

from .example_tools import EchoTool, RecordTool, UppercaseTool, build_default_registry

__all__ = [
    "EchoTool",
    "UppercaseTool",
    "RecordTool",
    "build_default_registry",
]
