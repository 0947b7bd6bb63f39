"""
flowchain - Flow Agent Runner
Sequential tool-chain execution with templated parameters and interaction memory
"""

from .core.config import FlowChainConfig
from .core.listener import ActionListener
from .core.registry import MemoryRegistry, ToolRegistry
from .core.runner import FlowAgentRunner
from .models.contracts import AgentDefinition, MemoryConfig, StepResult, ToolStep

__version__ = "0.1.0"

__all__ = [
    "FlowAgentRunner",
    "ToolRegistry",
    "MemoryRegistry",
    "ActionListener",
    "AgentDefinition",
    "ToolStep",
    "MemoryConfig",
    "StepResult",
    "FlowChainConfig",
]
