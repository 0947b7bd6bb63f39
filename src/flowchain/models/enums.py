"""Enums for type-safe settings and runner state.

This module provides enum types for configuration choices and the fixed
vocabularies used by the runner, enabling IDE autocomplete and preventing typos.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels.

    Attributes:
        DEBUG: Detailed diagnostic information
        INFO: General informational messages
        WARNING: Warning messages for potentially problematic situations
        ERROR: Error messages for serious problems
        CRITICAL: Critical messages for severe errors
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class UnknownToolPolicy(str, Enum):
    """How an unknown tool type is reported by ``FlowAgentRunner.execute``.

    Attributes:
        RAISE: Raise out of the call that starts the run
        CALLBACK: Deliver to the listener's ``on_failure`` like any other failure
    """
    RAISE = "raise"
    CALLBACK = "callback"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class OutputKind(str, Enum):
    """Shapes a tool result can take before normalization.

    Attributes:
        SCALAR: Plain text or any other opaque value
        RECORD: A single named result record
        GROUP: A flat group of records
        COLLECTION: A collection of record groups
    """
    SCALAR = "scalar"
    RECORD = "record"
    GROUP = "group"
    COLLECTION = "collection"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class RunState(str, Enum):
    """Lifecycle of a single flow run."""
    IDLE = "idle"
    VALIDATING = "validating"
    RUNNING = "running"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


__all__ = [
    "LogLevel",
    "UnknownToolPolicy",
    "OutputKind",
    "RunState",
]
