"""
Tool and memory factory registries.

Factories are registered under a string type key before runs start; runs only
read from the registries, so concurrent lookups need no coordination.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from ..exceptions import UnknownMemoryTypeError, UnknownToolTypeError
from ..utils.logging import get_logger


@runtime_checkable
class Tool(Protocol):
    """A tool instance. ``run`` may return the result or an awaitable of it."""

    def run(self, parameters: dict[str, str]) -> Any | Awaitable[Any]: ...


class ToolFactory(Protocol):
    """Creates a tool instance from a step's static parameters."""

    def create(self, parameters: dict[str, str]) -> Tool: ...


class Memory(Protocol):
    """Conversational history backend."""

    async def update_interaction(self, interaction_id: str, payload: dict[str, Any]) -> Any: ...


class MemoryFactory(Protocol):
    """Creates the memory backend bound to a memory identifier."""

    async def create(self, memory_id: str) -> Memory: ...


class ClassToolFactory:
    """Factory for tool classes whose constructor takes the static parameters."""

    def __init__(self, tool_class: Callable[[dict[str, str]], Tool]):
        self.tool_class = tool_class

    def create(self, parameters: dict[str, str]) -> Tool:
        return self.tool_class(dict(parameters))

    def __repr__(self) -> str:
        return f"ClassToolFactory({getattr(self.tool_class, '__name__', self.tool_class)!r})"


F = TypeVar("F")


class _FactoryRegistry(Generic[F]):
    """String-keyed factory lookup shared by the tool and memory registries."""

    kind = "factory"

    def __init__(self, factories: Mapping[str, F] | None = None):
        self.logger = get_logger(__name__)
        self._factories: dict[str, F] = {}
        for type_name, factory in (factories or {}).items():
            self.register(type_name, factory)

    def register(self, type_name: str, factory: F) -> None:
        """
        Register a factory under a type key.

        Args:
            type_name: Registry key referenced by agent definitions
            factory: Factory instance

        Raises:
            ValueError: If the type key is already registered
        """
        if type_name in self._factories:
            raise ValueError(f"{self.kind.capitalize()} type '{type_name}' is already registered")

        self._factories[type_name] = factory
        self.logger.debug(f"{self.kind}_registered", type=type_name)

    def lookup(self, type_name: str) -> F:
        try:
            return self._factories[type_name]
        except KeyError:
            raise self._unknown(type_name) from None

    def list_types(self) -> list[str]:
        """Registered type keys in registration order."""
        return list(self._factories)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def _unknown(self, type_name: str) -> Exception:
        return KeyError(f"Unknown {self.kind} type: {type_name}")


class ToolRegistry(_FactoryRegistry[ToolFactory]):
    """
    Maps tool type names to tool factories.

    Example:
        registry = ToolRegistry()

        @registry.register_tool("echo")
        class EchoTool:
            def __init__(self, parameters: dict[str, str]):
                self.parameters = parameters

            def run(self, parameters: dict[str, str]) -> str:
                return parameters.get("input", "")

        tool = registry.create("echo", {})
    """

    kind = "tool"

    def register_tool(self, type_name: str) -> Callable:
        """
        Class decorator registering a tool class under a type key.

        The class is constructed with the step's static parameters for every step.
        """
        def decorator(tool_class: type) -> type:
            self.register(type_name, ClassToolFactory(tool_class))
            return tool_class
        return decorator

    def create(self, type_name: str, parameters: Mapping[str, str] | None = None) -> Tool:
        """
        Create a fresh tool instance.

        Args:
            type_name: Registered tool type
            parameters: Static parameters of the step

        Returns:
            New tool instance

        Raises:
            UnknownToolTypeError: If no factory is registered for the type
        """
        factory = self.lookup(type_name)
        return factory.create(dict(parameters or {}))

    def _unknown(self, type_name: str) -> Exception:
        return UnknownToolTypeError(type_name)


class MemoryRegistry(_FactoryRegistry[MemoryFactory]):
    """Maps memory type names to memory factories."""

    kind = "memory"

    async def create(self, type_name: str, memory_id: str) -> Memory:
        """
        Create the memory backend for a memory identifier.

        Raises:
            UnknownMemoryTypeError: If no factory is registered for the type
        """
        factory = self.lookup(type_name)
        return await factory.create(memory_id)

    def _unknown(self, type_name: str) -> Exception:
        return UnknownMemoryTypeError(type_name)
