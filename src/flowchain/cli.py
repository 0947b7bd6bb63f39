"""
Command-line interface for flowchain.

Runs flow agents defined in YAML or JSON files against the example tools.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.config import FlowChainConfig, get_config
from .core.loader import load_agent_definition, parse_parameters
from .core.memory import InMemoryMemoryFactory
from .core.registry import MemoryRegistry, ToolRegistry
from .core.runner import FlowAgentRunner
from .exceptions import FlowAgentError
from .models.contracts import AgentDefinition, StepResult
from .models.enums import LogLevel
from .tools.example_tools import build_default_registry
from .utils.logging import setup_logging
from .utils.rich_logging import FlowConsole, setup_rich_logging

app = typer.Typer(
    name="flowchain",
    help="Sequential tool-chain runner for flow agents",
    add_completion=False,
)

console = Console()


def build_memory_registry() -> MemoryRegistry:
    """Memory registry backed by the in-memory conversation store."""
    registry = MemoryRegistry()
    registry.register(InMemoryMemoryFactory.type_name, InMemoryMemoryFactory())
    return registry


async def _run_agent(
    agent: AgentDefinition,
    params: dict[str, str],
    tool_registry: ToolRegistry,
    config: FlowChainConfig,
) -> list[StepResult]:
    runner = FlowAgentRunner(tool_registry, build_memory_registry(), config=config)
    outcome = await runner.run(agent, params)
    await runner.wait_for_memory_updates()
    return outcome


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]flowchain[/bold cyan] version {__version__}")


@app.command()
def tools():
    """List the tool types available to agents."""
    table = Table(title="Registered Tools", border_style="cyan")
    table.add_column("Type", style="cyan")
    table.add_column("Factory", style="dim")

    registry = build_default_registry()
    for type_name in registry.list_types():
        table.add_row(type_name, repr(registry.lookup(type_name)))

    console.print(table)


@app.command()
def run(
    agent_file: Path = typer.Argument(..., help="Agent definition (YAML or JSON)"),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Run parameter as key=value (repeatable)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Run a flow agent and print its outcome.

    Example:
        flowchain run agent.yaml -p question="What is a flow agent?"
    """
    if debug:
        config = FlowChainConfig(log_level=LogLevel.DEBUG)
        config.ensure_log_directory()
    else:
        config = get_config()
    setup_logging(config)
    rich_console = config.enable_rich_console
    if rich_console:
        setup_rich_logging()

    flow_console = FlowConsole()

    try:
        params = parse_parameters(param or [])
    except ValueError as e:
        flow_console.print_error(str(e))
        raise typer.Exit(code=2)

    try:
        agent = load_agent_definition(agent_file)
    except FlowAgentError as e:
        flow_console.print_error(e.user_message)
        flow_console.console.print(f"[dim]{escape(e.message)}[/dim]")
        raise typer.Exit(code=1)

    try:
        outcome = asyncio.run(_run_agent(agent, params, build_default_registry(), config))
    except FlowAgentError as e:
        flow_console.print_error(e.user_message)
        raise typer.Exit(code=1)
    except Exception as e:
        # Tool failures surface unchanged
        flow_console.print_error(f"Step failed: {type(e).__name__}: {e}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps([result.model_dump() for result in outcome], indent=2, ensure_ascii=False))
        return

    if not rich_console:
        for result in outcome:
            typer.echo(f"{result.name}: {result.result}")
        return

    flow_console.print_agent(agent)
    flow_console.print_outcome(outcome)
    flow_console.print_success(f"{len(outcome)} result(s) from {len(agent.tools)} step(s)")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
