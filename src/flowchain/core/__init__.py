"""
Core components of the flowchain runner.
"""

from .config import FlowChainConfig, get_config, reset_config
from .listener import ActionListener, Listener
from .loader import load_agent_definition, parse_agent_definition, parse_parameters
from .memory import InMemoryConversationMemory, InMemoryMemoryFactory, MemoryRecorder
from .normalizer import OutputNormalizer
from .parameters import ParameterResolver, substitute
from .registry import (
    ClassToolFactory,
    Memory,
    MemoryFactory,
    MemoryRegistry,
    Tool,
    ToolFactory,
    ToolRegistry,
)
from .runner import FlowAgentRunner

__all__ = [
    "FlowAgentRunner",
    "ParameterResolver",
    "substitute",
    "OutputNormalizer",
    "MemoryRecorder",
    "InMemoryConversationMemory",
    "InMemoryMemoryFactory",
    "ToolRegistry",
    "MemoryRegistry",
    "ClassToolFactory",
    "Tool",
    "ToolFactory",
    "Memory",
    "MemoryFactory",
    "ActionListener",
    "Listener",
    "FlowChainConfig",
    "get_config",
    "reset_config",
    "load_agent_definition",
    "parse_agent_definition",
    "parse_parameters",
]
