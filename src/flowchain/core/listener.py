"""
Completion listeners for runs and memory updates.
"""

from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class Listener(Protocol[T_contra]):
    """Receives exactly one of a response or a failure."""

    def on_response(self, response: T_contra) -> None: ...

    def on_failure(self, error: Exception) -> None: ...


class ActionListener(Generic[T]):
    """
    Listener built from two callables.

    Example:
        listener = ActionListener(
            on_response=lambda outcome: print(outcome),
            on_failure=lambda error: print(f"failed: {error}"),
        )
    """

    def __init__(
        self,
        on_response: Callable[[T], Any],
        on_failure: Callable[[Exception], Any],
    ):
        self._response_handler = on_response
        self._failure_handler = on_failure

    def on_response(self, response: T) -> None:
        self._response_handler(response)

    def on_failure(self, error: Exception) -> None:
        self._failure_handler(error)
