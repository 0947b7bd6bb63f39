"""
Parameter Resolver - builds the parameter set handed to each tool step.

Merge order, later sources winning:
1. Run context (initial parameters and earlier ``<step>.output`` entries)
2. The step's static parameters
3. Context entries scoped to the step as ``<step>.<key>``

String values are then templated: ``${parameters.KEY}`` is replaced with the
context value of KEY, expanded recursively, and left untouched when KEY is
absent.
"""

import re
from collections.abc import Mapping

from ..models.contracts import ToolStep

PLACEHOLDER_PATTERN = re.compile(r"\$\{parameters\.([^{}]+)\}")


def substitute(text: str, values: Mapping[str, str]) -> str:
    """
    Replace every ``${parameters.KEY}`` in text with ``values[KEY]``.

    Inserted values are expanded again, so a value may itself reference other
    keys. A key that is already being expanded is left as a literal
    placeholder, which ends reference cycles such as ``a -> b -> a``.

    Args:
        text: Template text
        values: Lookup for placeholder keys

    Returns:
        Text with known placeholders replaced
    """
    return _expand(text, values, frozenset())


def _expand(text: str, values: Mapping[str, str], resolving: frozenset[str]) -> str:
    if "${" not in text:
        return text

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in values or key in resolving:
            return match.group(0)
        return _expand(str(values[key]), values, resolving | {key})

    return PLACEHOLDER_PATTERN.sub(_replace, text)


class ParameterResolver:
    """
    Resolves the exact parameter mapping passed to a step's tool.

    Resolution only reads the context; callers own the context and are the
    only ones writing to it.
    """

    def resolve(self, context: Mapping[str, str], step: ToolStep) -> dict[str, str]:
        """
        Build the merged and templated parameters for one step.

        Args:
            context: Current run parameters
            step: Step about to run

        Returns:
            New dict of parameters for the step's tool
        """
        merged: dict[str, str] = dict(context)
        merged.update(step.parameters)
        merged.update(self.scoped_overrides(context, step.name))

        return {
            key: substitute(value, context) if isinstance(value, str) else value
            for key, value in merged.items()
        }

    @staticmethod
    def scoped_overrides(context: Mapping[str, str], step_name: str) -> dict[str, str]:
        """
        Collect ``<step_name>.<key>`` context entries as ``<key>``.

        Args:
            context: Current run parameters
            step_name: Name of the step the overrides target

        Returns:
            Overrides keyed without the step prefix
        """
        prefix = f"{step_name}."
        return {
            key[len(prefix):]: value
            for key, value in context.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        }
