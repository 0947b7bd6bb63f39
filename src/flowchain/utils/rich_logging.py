"""Console rendering with Rich for the flowchain CLI"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

import structlog
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme
from rich.traceback import install as install_rich_traceback

if TYPE_CHECKING:
    from ..models.contracts import AgentDefinition, StepResult

FLOWCHAIN_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "tool": "blue",
        "step": "magenta",
    }
)


class FlowConsole:
    """Singleton console with the flowchain theme"""

    _instance: Optional["FlowConsole"] = None

    def __new__(cls) -> "FlowConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.console = Console(theme=FLOWCHAIN_THEME)
            self.initialized = True

    def print_agent(self, agent: "AgentDefinition"):
        """Print the steps of an agent as a table"""
        table = Table(title=f"Agent: {agent.name}", border_style="cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Step", style="step")
        table.add_column("Tool", style="tool")
        table.add_column("Included", justify="center")

        for index, step in enumerate(agent.tools, start=1):
            table.add_row(
                str(index),
                step.name,
                step.type,
                "✓" if step.include_output_in_agent_response else "",
            )

        if agent.memory is not None:
            table.caption = f"memory: {agent.memory.type}"

        self.console.print(table)

    def print_outcome(self, outcome: Sequence["StepResult"]):
        """Print step results, one panel per result"""
        for result in outcome:
            self.console.print(
                Panel(
                    Text(result.result) if result.result else Text("(empty)", style="dim"),
                    title=f"[step]{result.name}[/step]",
                    border_style="green",
                )
            )

    def print_success(self, message: str):
        """Print success message"""
        self.console.print(f"[success]✓[/success] {message}")

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[error]✗[/error] {escape(message)}")


def setup_rich_logging() -> None:
    """
    Install Rich's traceback handler globally.

    structlog configuration is handled separately in utils/logging.py.
    """
    install_rich_traceback(
        show_locals=False,
        width=120,
        extra_lines=3,
        word_wrap=False,
        suppress=[structlog],
    )
