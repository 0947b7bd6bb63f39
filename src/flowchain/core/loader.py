"""
Loading agent definitions and run parameters from files and the command line.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..exceptions import AgentDefinitionError
from ..models.contracts import AgentDefinition


def load_agent_definition(path: str | Path) -> AgentDefinition:
    """
    Read an agent definition from a YAML or JSON file.

    Args:
        path: ``.yaml``/``.yml`` files are read as YAML, everything else as JSON

    Returns:
        Validated AgentDefinition

    Raises:
        AgentDefinitionError: If the file cannot be read, parsed or validated
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AgentDefinitionError(f"Cannot read agent definition {path}: {e}") from e

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise AgentDefinitionError(f"Cannot parse agent definition {path}: {e}") from e

    return parse_agent_definition(data, source=str(path))


def parse_agent_definition(data: Any, source: str = "<data>") -> AgentDefinition:
    """Validate already-parsed data into an AgentDefinition."""
    if not isinstance(data, dict):
        raise AgentDefinitionError(
            f"Agent definition in {source} must be a mapping, got {type(data).__name__}"
        )

    try:
        return AgentDefinition.model_validate(data)
    except ValidationError as e:
        raise AgentDefinitionError(f"Invalid agent definition in {source}: {e}") from e


def parse_parameters(pairs: Iterable[str]) -> dict[str, str]:
    """
    Parse ``key=value`` strings into run parameters.

    Only the first ``=`` separates key and value, so values may contain ``=``.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key
    """
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        params[key] = value
    return params
