"""Split a step element's attributes into parameters and output bindings."""

from __future__ import annotations

from dataclasses import dataclass

from planner.errors import DuplicateAttributeError
from planner.execution_plan import (
    DEFAULT_OUTPUT_ATTRIBUTE,
    DEFAULT_RESULT_ATTRIBUTE,
    ParameterValue,
)
from planner.markup_tokenizer import Element


@dataclass(frozen=True)
class StepBinding:
    """Attributes of one step element, partitioned."""

    named_parameters: dict[str, ParameterValue]
    named_outputs: tuple[str, ...]
    result_outputs: tuple[str, ...]


def bind_step(
    element: Element,
    output_attribute: str = DEFAULT_OUTPUT_ATTRIBUTE,
    result_attribute: str = DEFAULT_RESULT_ATTRIBUTE,
) -> StepBinding:
    """Partition ``element.attributes``; values stay uninterpreted strings."""
    parameters: dict[str, ParameterValue] = {}
    outputs: list[str] = []
    results: list[str] = []
    seen: set[str] = set()

    for name, value in element.attributes:
        if name in seen:
            raise DuplicateAttributeError(
                f"Attribute '{name}' appears more than once on <{element.tag}>.",
                line=element.line,
                column=element.column,
            )
        seen.add(name)

        if name == output_attribute:
            outputs.append(value)
        elif name == result_attribute:
            # Result variables are bound in the context too.
            outputs.append(value)
            results.append(value)
        else:
            parameters[name] = ParameterValue.from_raw(value)

    return StepBinding(
        named_parameters=parameters,
        named_outputs=tuple(dict.fromkeys(outputs)),
        result_outputs=tuple(results),
    )
