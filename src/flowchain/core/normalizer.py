"""
Output Normalizer - reduces any tool result to a named string result.

Tool results arrive as one of four shapes (see ``OutputKind``); each shape has
its own normalization function. The returned StepResult is always named after
the step, whatever name the tool gave its own records.
"""

import json
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from ..models.contracts import (
    RecordGroup,
    RecordGroupCollection,
    ResultRecord,
    ScalarOutput,
    StepResult,
    ToolOutput,
)
from ..models.enums import OutputKind

_VARIANTS = (ScalarOutput, ResultRecord, RecordGroup, RecordGroupCollection)


def as_tool_output(raw: Any) -> ToolOutput:
    """Wrap a raw tool result into its output variant."""
    if isinstance(raw, _VARIANTS):
        return raw
    return ScalarOutput(value=raw)


def to_json(value: Any) -> str:
    """Compact JSON, keeping non-ASCII text readable."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def canonical_json(model: BaseModel) -> str:
    """Canonical string form of an output model: compact JSON without null fields."""
    return model.model_dump_json(exclude_none=True)


def normalize_scalar(output: ScalarOutput) -> str:
    value = output.value
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return canonical_json(value)
    return to_json(value)


def normalize_record(output: ResultRecord) -> str:
    # The whole record is serialized; its own result field is not reused as-is
    return canonical_json(output)


def normalize_group(output: RecordGroup) -> str:
    return canonical_json(output)


def normalize_collection(output: RecordGroupCollection) -> str:
    """
    Flatten the groups to their records.

    A single record yields its payload: ``data_as_map`` as JSON when present,
    else its ``result``. Any other count yields the JSON list of records.
    """
    records = output.flatten()
    if len(records) == 1:
        record = records[0]
        if record.data_as_map is not None:
            return to_json(record.data_as_map)
        if record.result is not None:
            return record.result
    return to_json([record.model_dump(mode="json", exclude_none=True) for record in records])


class OutputNormalizer:
    """Converts raw tool results into StepResults."""

    def __init__(self):
        self._normalizers: dict[OutputKind, Callable[[Any], str]] = {
            OutputKind.SCALAR: normalize_scalar,
            OutputKind.RECORD: normalize_record,
            OutputKind.GROUP: normalize_group,
            OutputKind.COLLECTION: normalize_collection,
        }

    def normalize(self, step_name: str, raw: Any) -> StepResult:
        """
        Normalize a raw tool result.

        Args:
            step_name: Declared name of the step that produced the result
            raw: Tool result in any of the supported shapes

        Returns:
            StepResult named after the step
        """
        output = as_tool_output(raw)
        return StepResult(name=step_name, result=self._normalizers[output.kind](output))
