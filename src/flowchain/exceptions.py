"""Exception classes carrying structured context for logging"""

from typing import Any
from datetime import datetime


class FlowAgentError(Exception):
    """Base exception with structured context and metadata"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
        user_message: str | None = None,
    ):
        """
        Initialize exception with context.

        Args:
            message: Technical error message for logs
            details: Additional context (dict for structured logging)
            recoverable: Whether the caller can fix the input and try again
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.user_message = user_message or message
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({details_str})")

        if self.recoverable:
            parts.append("[recoverable]")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(FlowAgentError):
    """Agent or runner configuration errors"""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            recoverable=False,  # Config errors require fix
            user_message=f"Configuration error: {message}",
        )
        self.field = field
        self.value = value


class NoToolConfiguredError(ConfigurationError):
    """Raised when an agent declares zero tool steps."""

    def __init__(self, agent_name: str | None = None):
        super().__init__("no tool configured", field="tools", value=agent_name)
        self.agent_name = agent_name


class UnknownToolTypeError(ConfigurationError, ValueError):
    """Raised when a tool type has no registered factory."""

    def __init__(self, tool_type: str):
        super().__init__(f"Unknown tool type: {tool_type}", field="type", value=tool_type)
        self.tool_type = tool_type


class UnknownMemoryTypeError(ConfigurationError, ValueError):
    """Raised when a memory type has no registered factory."""

    def __init__(self, memory_type: str):
        super().__init__(f"Unknown memory type: {memory_type}", field="memory.type", value=memory_type)
        self.memory_type = memory_type


class AgentDefinitionError(ConfigurationError):
    """Agent definition could not be read or failed validation"""

    pass


class MemoryUpdateError(FlowAgentError):
    """Interaction history could not be updated after a run"""

    def __init__(self, message: str, interaction_id: str | None, details: dict[str, Any] | None = None):
        details = details or {}
        details["interaction_id"] = interaction_id

        super().__init__(
            message=message,
            details=details,
            recoverable=True,  # The run outcome is unaffected
            user_message="Failed to record interaction history.",
        )
        self.interaction_id = interaction_id
