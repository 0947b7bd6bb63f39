"""
Memory Recorder - persists step outputs into interaction history after a run.

Recording runs as its own asyncio task; the run that triggered it never waits
for it and its failures never replace the run's outcome.
"""

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

from ..exceptions import MemoryUpdateError
from ..models.context import output_key
from ..models.contracts import MemoryConfig, StepResult
from ..utils.logging import get_logger
from .config import FlowChainConfig, get_config
from .listener import Listener
from .registry import MemoryRegistry


class MemoryRecorder:
    """
    Records a run's outcome on the parent interaction.

    Responsibilities:
    - Resolve the memory backend from the memory factory registry
    - Build the interaction update from the outcome
    - Report success or failure to an optional listener
    """

    def __init__(self, memory_registry: MemoryRegistry, config: FlowChainConfig | None = None):
        self.memory_registry = memory_registry
        self.config = config or get_config()
        self.logger = get_logger(__name__)

    def build_payload(self, outcome: Sequence[StepResult]) -> dict[str, Any]:
        """
        Map each result's ``<step>.output`` key to its result string.

        Returns:
            Update payload nested under the additional info field
        """
        return {
            self.config.additional_info_field: {
                output_key(result.name): result.result for result in outcome
            }
        }

    def record(
        self,
        memory_config: MemoryConfig,
        params: Mapping[str, str],
        outcome: Sequence[StepResult],
        listener: Listener[Any] | None = None,
    ) -> asyncio.Task | None:
        """
        Start updating the parent interaction with the outcome.

        Must be called from a running event loop.

        Args:
            memory_config: Memory selection of the agent
            params: Run parameters holding the memory and interaction identifiers
            outcome: Step results to record
            listener: Optional observer of the update result

        Returns:
            The task performing the update, or None when there is nothing to update
        """
        interaction_id = params.get(self.config.parent_interaction_id_key)
        if not interaction_id:
            return None

        memory_id = params.get(self.config.memory_id_key)
        if not memory_id:
            self.logger.warning(
                "memory_update_skipped",
                reason="missing memory id",
                memory_id_key=self.config.memory_id_key,
                interaction_id=interaction_id,
            )
            return None

        payload = self.build_payload(outcome)
        return asyncio.get_running_loop().create_task(
            self._update(memory_config, memory_id, interaction_id, payload, listener)
        )

    async def _update(
        self,
        memory_config: MemoryConfig,
        memory_id: str,
        interaction_id: str,
        payload: dict[str, Any],
        listener: Listener[Any] | None,
    ) -> Any:
        try:
            memory = await self.memory_registry.create(memory_config.type, memory_id)
            response = await memory.update_interaction(interaction_id, payload)
        except Exception as e:
            error = MemoryUpdateError(
                f"Failed to update interaction: {e}",
                interaction_id=interaction_id,
                details={"memory_type": memory_config.type, "memory_id": memory_id},
            )
            error.__cause__ = e
            self.logger.error(
                "memory_update_failed",
                memory_type=memory_config.type,
                memory_id=memory_id,
                interaction_id=interaction_id,
                error=f"{type(e).__name__}: {e}",
            )
            if listener is not None:
                listener.on_failure(error)
            return None

        self.logger.info(
            "memory_updated",
            memory_type=memory_config.type,
            memory_id=memory_id,
            interaction_id=interaction_id,
            outputs=len(payload[self.config.additional_info_field]),
        )
        if listener is not None:
            listener.on_response(response)
        return response


class InMemoryConversationMemory:
    """Interaction history kept in a dict, shared by all memories of one factory."""

    def __init__(self, memory_id: str, store: dict[str, dict[str, dict[str, Any]]]):
        self.memory_id = memory_id
        self._store = store

    async def update_interaction(self, interaction_id: str, payload: dict[str, Any]) -> str:
        interaction = self._store.setdefault(self.memory_id, {}).setdefault(interaction_id, {})
        for field, value in payload.items():
            current = interaction.get(field)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                interaction[field] = dict(value) if isinstance(value, dict) else value
        return interaction_id

    def get_interaction(self, interaction_id: str) -> dict[str, Any] | None:
        return self._store.get(self.memory_id, {}).get(interaction_id)


class InMemoryMemoryFactory:
    """Memory factory for local runs and tests."""

    type_name = "conversation_index"

    def __init__(self):
        self.store: dict[str, dict[str, dict[str, Any]]] = {}

    async def create(self, memory_id: str) -> InMemoryConversationMemory:
        return InMemoryConversationMemory(memory_id, self.store)
