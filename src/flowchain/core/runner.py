"""
Flow Agent Runner - executes an agent's tool steps in order.

Each run owns one ExecutionContext. Steps run one after another inside a
single coroutine: step i+1 starts only once step i has returned. The first
failing step ends the run; its exception reaches the caller unchanged and no
partial outcome is returned.
"""

import asyncio
import inspect
import time
from collections.abc import Mapping
from typing import Any

from ..exceptions import NoToolConfiguredError, UnknownToolTypeError
from ..models.context import ExecutionContext
from ..models.contracts import AgentDefinition, StepResult, ToolStep
from ..models.enums import RunState, UnknownToolPolicy
from ..utils.logging import get_logger
from .config import FlowChainConfig, get_config
from .listener import Listener
from .memory import MemoryRecorder
from .normalizer import OutputNormalizer
from .parameters import ParameterResolver
from .registry import MemoryRegistry, ToolRegistry


class FlowAgentRunner:
    """
    Runs flow agents against a tool registry.

    Example:
        runner = FlowAgentRunner(tool_registry, memory_registry)
        outcome = await runner.run(agent, {"memory_id": "m-1", "question": "..."})
        for result in outcome:
            print(result.name, result.result)
    """

    def __init__(
        self,
        tool_registry: ToolRegistry,
        memory_registry: MemoryRegistry | None = None,
        config: FlowChainConfig | None = None,
        memory_listener: Listener[Any] | None = None,
    ):
        """
        Initialize the runner.

        Args:
            tool_registry: Factories for every tool type agents may reference
            memory_registry: Factories for memory types (empty registry if omitted)
            config: Runner configuration (global config if omitted)
            memory_listener: Optional observer of interaction updates
        """
        self.config = config or get_config()
        self.tool_registry = tool_registry
        self.memory_registry = memory_registry or MemoryRegistry()
        self.memory_listener = memory_listener
        self.resolver = ParameterResolver()
        self.normalizer = OutputNormalizer()
        self.memory_recorder = MemoryRecorder(self.memory_registry, self.config)
        self.logger = get_logger(__name__)

        self._memory_tasks: set[asyncio.Task] = set()

    async def run(
        self,
        agent: AgentDefinition,
        params: Mapping[str, str] | None = None,
    ) -> list[StepResult]:
        """
        Run an agent and return its outcome.

        Args:
            agent: Agent definition to run
            params: Initial run parameters (never modified)

        Returns:
            The last step's result, or every result whose step is flagged
            ``include_output_in_agent_response``, in step order

        Raises:
            NoToolConfiguredError: If the agent has no steps
            UnknownToolTypeError: If a step references an unregistered tool type
            Exception: Whatever a failing tool raised
        """
        context = self._prepare(agent, params)
        return await self._run_steps(agent, context)

    async def execute(
        self,
        agent: AgentDefinition,
        params: Mapping[str, str] | None,
        listener: Listener[list[StepResult]],
    ) -> None:
        """
        Run an agent and report to a listener.

        The listener receives exactly one call: ``on_response`` with the outcome
        or ``on_failure`` with the error. Unknown tool types are raised out of
        this call instead when ``unknown_tool_policy`` is ``raise``.

        Raises:
            UnknownToolTypeError: Under the ``raise`` policy, before any tool runs
        """
        try:
            context = self._prepare(agent, params)
        except UnknownToolTypeError as e:
            if self.config.unknown_tool_policy == UnknownToolPolicy.RAISE:
                raise
            listener.on_failure(e)
            return
        except NoToolConfiguredError as e:
            listener.on_failure(e)
            return

        try:
            outcome = await self._run_steps(agent, context)
        except Exception as e:
            listener.on_failure(e)
            return

        listener.on_response(outcome)

    async def wait_for_memory_updates(self) -> list[Any]:
        """
        Wait for interaction updates started by earlier runs.

        Returns:
            Responses of the updates (None for failed ones)
        """
        if not self._memory_tasks:
            return []
        return await asyncio.gather(*list(self._memory_tasks))

    def _prepare(self, agent: AgentDefinition, params: Mapping[str, str] | None) -> ExecutionContext:
        """Seed a fresh context and validate the agent against the registry."""
        context = ExecutionContext.seed(dict(params or {}))
        context.state = RunState.VALIDATING

        try:
            if not agent.tools:
                raise NoToolConfiguredError(agent.name)
            # Every type is checked before the first tool runs
            for step in agent.tools:
                self.tool_registry.lookup(step.type)
        except (NoToolConfiguredError, UnknownToolTypeError) as e:
            context.state = RunState.FAILED
            self.logger.error(
                "flow_run_invalid",
                agent=agent.name,
                run_id=context.run_id,
                state=str(context.state),
                error=str(e),
            )
            raise

        self.logger.info(
            "flow_run_started",
            agent=agent.name,
            run_id=context.run_id,
            state=str(context.state),
            steps=len(agent.tools),
        )
        return context

    async def _run_steps(self, agent: AgentDefinition, context: ExecutionContext) -> list[StepResult]:
        start_time = time.perf_counter()
        last_index = len(agent.tools) - 1

        for index, step in enumerate(agent.tools):
            context.state = RunState.RUNNING
            context.step_index = index

            try:
                result = await self._run_step(step, context)
            except Exception as e:
                context.state = RunState.FAILED
                self.logger.error(
                    "flow_run_failed",
                    agent=agent.name,
                    run_id=context.run_id,
                    step=step.name,
                    step_index=context.step_index,
                    state=str(context.state),
                    error=f"{type(e).__name__}: {e}",
                )
                raise

            context.record_output(result)
            if step.include_output_in_agent_response:
                context.outcome.append(result)
            elif index == last_index and not context.outcome:
                context.outcome.append(result)

        context.state = RunState.FINALIZING
        if agent.memory is not None:
            self._record_memory(agent, context)

        context.state = RunState.COMPLETED
        self.logger.info(
            "flow_run_completed",
            agent=agent.name,
            run_id=context.run_id,
            state=str(context.state),
            outputs=len(context.outcome),
            total_time_ms=(time.perf_counter() - start_time) * 1000,
        )
        return list(context.outcome)

    async def _run_step(self, step: ToolStep, context: ExecutionContext) -> StepResult:
        parameters = self.resolver.resolve(context.params, step)
        tool = self.tool_registry.create(step.type, step.parameters)

        self.logger.debug(
            "tool_step_started",
            run_id=context.run_id,
            step=step.name,
            tool_type=step.type,
            step_index=context.step_index,
        )
        start = time.perf_counter()

        raw = tool.run(parameters)
        if inspect.isawaitable(raw):
            raw = await raw

        result = self.normalizer.normalize(step.name, raw)

        self.logger.info(
            "tool_step_completed",
            run_id=context.run_id,
            step=step.name,
            tool_type=step.type,
            execution_time_ms=(time.perf_counter() - start) * 1000,
        )
        return result

    def _record_memory(self, agent: AgentDefinition, context: ExecutionContext) -> None:
        task = self.memory_recorder.record(
            agent.memory,
            context.params,
            context.outcome,
            listener=self.memory_listener,
        )
        if task is None:
            return
        self._memory_tasks.add(task)
        task.add_done_callback(self._memory_tasks.discard)
